# app/system_services/appointment_service.py
import logging
from datetime import date
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from app.users.user_models.user_model import User, UserRole
from app.system_models.appointment_model.appointment_model import Appointment, AppointmentStatus
from app.system_models.appointment_model.appointment_schemas import AppointmentCreate, RescheduleRequest
from app.system_services.availability_service import calculate_available_slots

logger = logging.getLogger(__name__)


async def get_doctor(db: AsyncSession, doctor_id: int) -> Optional[User]:
    result = await db.execute(
        select(User).where(and_(User.id == doctor_id, User.role == UserRole.DOCTOR.value))
    )
    return result.scalars().first()


async def list_doctors(db: AsyncSession) -> List[User]:
    result = await db.execute(
        select(User).where(User.role == UserRole.DOCTOR.value).order_by(User.name)
    )
    return list(result.scalars().all())


# ============================================================
# ✅ BOOK APPOINTMENT
# ============================================================
async def book_appointment(db: AsyncSession, student: User, data: AppointmentCreate) -> Appointment:
    doctor = await get_doctor(db, data.doctor_id)
    if not doctor:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Doctor not found")

    # The window stays locked until the insert below is committed
    slot = await calculate_available_slots(db, doctor.id, data.date, data.time, lock=True)
    if not slot.available:
        logger.warning(
            f"Booking rejected for student {student.id} with doctor {doctor.id} "
            f"on {data.date} {data.time}: {slot.message}"
        )
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=slot.message)

    duplicate = await db.execute(
        select(Appointment.id).where(
            and_(
                Appointment.student_id == student.id,
                Appointment.doctor_id == doctor.id,
                Appointment.date == data.date,
                Appointment.time == data.time,
                Appointment.status != AppointmentStatus.CANCELLED.value,
            )
        )
    )
    if duplicate.first():
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Student already has an appointment with this doctor at this time",
        )

    appointment = Appointment(
        student_id=student.id,
        student_name=student.name,
        doctor_id=doctor.id,
        doctor_name=doctor.name,
        date=data.date,
        time=data.time,
        reason=data.reason,
        status=AppointmentStatus.SCHEDULED.value,
    )
    db.add(appointment)
    await db.commit()
    await db.refresh(appointment)

    logger.info(
        f"Appointment {appointment.id} booked: student {student.id} with doctor {doctor.id} "
        f"on {data.date} {data.time} ({slot.current_bookings + 1}/{slot.max_patients})"
    )
    return appointment


# ============================================================
# ✅ LIST APPOINTMENTS
# ============================================================
async def list_student_appointments(
    db: AsyncSession, student_id: int, upcoming_only: bool = False, on_or_after: Optional[date] = None
) -> List[Appointment]:
    conditions = [Appointment.student_id == student_id]
    if upcoming_only:
        conditions.append(Appointment.status == AppointmentStatus.SCHEDULED.value)
    if on_or_after is not None:
        conditions.append(Appointment.date >= on_or_after)

    result = await db.execute(
        select(Appointment).where(and_(*conditions)).order_by(Appointment.date, Appointment.time)
    )
    return list(result.scalars().all())


async def list_doctor_appointments(
    db: AsyncSession,
    doctor_id: int,
    on_date: Optional[date] = None,
    on_or_after: Optional[date] = None,
    scheduled_only: bool = False,
) -> List[Appointment]:
    conditions = [Appointment.doctor_id == doctor_id]
    if on_date is not None:
        conditions.append(Appointment.date == on_date)
    if on_or_after is not None:
        conditions.append(Appointment.date >= on_or_after)
    if scheduled_only:
        conditions.append(Appointment.status == AppointmentStatus.SCHEDULED.value)

    result = await db.execute(
        select(Appointment).where(and_(*conditions)).order_by(Appointment.date, Appointment.time)
    )
    return list(result.scalars().all())


async def list_all_appointments(db: AsyncSession) -> List[Appointment]:
    result = await db.execute(
        select(Appointment).order_by(Appointment.date.desc(), Appointment.time.desc())
    )
    return list(result.scalars().all())


def resolve_doctor_scope(current_user: User, doctor_id: Optional[int]) -> int:
    """Which doctor's appointments the caller may list."""
    if current_user.role == UserRole.ADMIN.value:
        if doctor_id is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Doctor id is required")
        return doctor_id

    if doctor_id is not None and doctor_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return current_user.id


# ============================================================
# ✅ RESCHEDULE / CANCEL
# ============================================================
async def reschedule_appointment(
    db: AsyncSession, appointment: Appointment, data: RescheduleRequest
) -> Appointment:
    if appointment.status != AppointmentStatus.SCHEDULED.value:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Can only reschedule appointments that are currently scheduled",
        )

    conflict = await db.execute(
        select(Appointment.id).where(
            and_(
                Appointment.doctor_id == appointment.doctor_id,
                Appointment.date == data.date,
                Appointment.time == data.time,
                Appointment.status == AppointmentStatus.SCHEDULED.value,
                Appointment.id != appointment.id,
            )
        )
    )
    if conflict.first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Doctor not available at this slot")

    previous = f"{appointment.date} {appointment.time}"
    appointment.date = data.date
    appointment.time = data.time
    await db.commit()
    await db.refresh(appointment)

    logger.info(f"Appointment {appointment.id} rescheduled from {previous} to {data.date} {data.time}")
    return appointment


async def cancel_appointment(db: AsyncSession, appointment: Appointment) -> Appointment:
    appointment.status = AppointmentStatus.CANCELLED.value
    await db.commit()
    logger.info(f"Appointment {appointment.id} cancelled")
    return appointment
