# app/system_services/availability_service.py
import logging
from datetime import date, time
from typing import Dict, List, Optional, Union

from fastapi import HTTPException, status
from sqlalchemy import select, func, and_
from sqlalchemy.ext.asyncio import AsyncSession

from config.appconfig import settings
from app.helpers.time import format_time, minutes_between, parse_time, today
from app.users.user_models.user_model import User
from app.system_models.availability_model.availability_model import DoctorAvailability
from app.system_models.availability_model.availability_schemas import (
    AvailabilityCreate,
    AvailabilityResponse,
    SlotAvailability,
)
from app.system_models.appointment_model.appointment_model import Appointment, AppointmentStatus
from app.system_models.notification_model.notification_model import Notification

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "Doctor is not available at this time"
FULLY_BOOKED = "Doctor not available at this time: this slot is fully booked"


# ============================================================
# ✅ CAPACITY HELPERS
# ============================================================
def effective_time_per_patient(value: Optional[int]) -> int:
    return value or settings.DEFAULT_TIME_PER_PATIENT


def resolve_capacity(window: DoctorAvailability, time_per_patient: Optional[int]) -> int:
    """Explicit max_patients wins; otherwise window length // time per patient."""
    if window.max_patients is not None:
        return window.max_patients
    return minutes_between(window.start_time, window.end_time) // effective_time_per_patient(time_per_patient)


def in_window(appointment_time: str, window: DoctorAvailability) -> bool:
    at = parse_time(appointment_time)
    return at is not None and window.start_time <= at < window.end_time


async def get_time_per_patient(db: AsyncSession, doctor_id: int) -> int:
    result = await db.execute(select(User.time_per_patient).where(User.id == doctor_id))
    return effective_time_per_patient(result.scalar_one_or_none())


# ============================================================
# ✅ CALCULATE AVAILABLE SLOTS
# ============================================================
async def calculate_available_slots(
    db: AsyncSession,
    doctor_id: int,
    on_date: date,
    at: Union[time, str],
    lock: bool = False,
) -> SlotAvailability:
    """
    Decide whether one more booking fits at doctor/date/time.

    Windows match on [start_time, end_time); when several windows contain
    the time, the one starting latest serves it. With lock=True the matched
    window row is held FOR UPDATE until the caller commits.
    """
    if isinstance(at, str):
        at = parse_time(at)
        if at is None:
            return SlotAvailability(available=False, message=NOT_AVAILABLE)

    stmt = (
        select(DoctorAvailability)
        .where(
            and_(
                DoctorAvailability.doctor_id == doctor_id,
                DoctorAvailability.date == on_date,
                DoctorAvailability.start_time <= at,
                DoctorAvailability.end_time > at,
            )
        )
        .order_by(DoctorAvailability.start_time.desc())
        .limit(1)
    )
    if lock:
        stmt = stmt.with_for_update()

    window = (await db.execute(stmt)).scalars().first()
    if window is None:
        return SlotAvailability(available=False, message=NOT_AVAILABLE)

    time_per_patient = await get_time_per_patient(db, doctor_id)
    max_patients = resolve_capacity(window, time_per_patient)

    current_bookings = (
        await db.execute(
            select(func.count(Appointment.id)).where(
                and_(
                    Appointment.doctor_id == doctor_id,
                    Appointment.date == on_date,
                    Appointment.time == format_time(at),
                    Appointment.status == AppointmentStatus.SCHEDULED.value,
                )
            )
        )
    ).scalar_one()

    available = current_bookings < max_patients
    return SlotAvailability(
        available=available,
        max_patients=max_patients,
        current_bookings=current_bookings,
        time_per_patient=time_per_patient,
        window_id=window.id,
        message=None if available else FULLY_BOOKED,
    )


# ============================================================
# ✅ SERIALIZE
# ============================================================
def serialize_window(
    window: DoctorAvailability, time_per_patient: int, booked: int = 0
) -> AvailabilityResponse:
    return AvailabilityResponse(
        id=window.id,
        doctor_id=window.doctor_id,
        date=window.date,
        start_time=format_time(window.start_time),
        end_time=format_time(window.end_time),
        max_patients=resolve_capacity(window, time_per_patient),
        max_patients_set=window.max_patients is not None,
        time_per_patient=time_per_patient,
        booked_appointments=booked,
        created_at=window.created_at,
    )


async def _scheduled_appointments(
    db: AsyncSession, doctor_id: int, dates: List[date]
) -> List[Appointment]:
    if not dates:
        return []
    result = await db.execute(
        select(Appointment).where(
            and_(
                Appointment.doctor_id == doctor_id,
                Appointment.date.in_(dates),
                Appointment.status == AppointmentStatus.SCHEDULED.value,
            )
        )
    )
    return list(result.scalars().all())


async def window_appointments(db: AsyncSession, window: DoctorAvailability) -> List[Appointment]:
    """Scheduled appointments of the window's doctor that fall inside it."""
    appointments = await _scheduled_appointments(db, window.doctor_id, [window.date])
    return [a for a in appointments if in_window(a.time, window)]


# ============================================================
# ✅ CREATE / UPSERT AVAILABILITY
# ============================================================
async def set_availability(
    db: AsyncSession, doctor: User, data: AvailabilityCreate
) -> AvailabilityResponse:
    result = await db.execute(
        select(DoctorAvailability).where(
            and_(
                DoctorAvailability.doctor_id == doctor.id,
                DoctorAvailability.date == data.date,
                DoctorAvailability.start_time == data.start_time,
                DoctorAvailability.end_time == data.end_time,
            )
        )
    )
    window = result.scalars().first()

    if window:
        window.max_patients = data.max_patients
        logger.info(f"Doctor {doctor.id} updated availability {window.id} (max_patients={data.max_patients})")
    else:
        window = DoctorAvailability(
            doctor_id=doctor.id,
            date=data.date,
            start_time=data.start_time,
            end_time=data.end_time,
            max_patients=data.max_patients,
        )
        db.add(window)

    await db.commit()
    await db.refresh(window)

    booked = len(await window_appointments(db, window))
    return serialize_window(window, effective_time_per_patient(doctor.time_per_patient), booked)


# ============================================================
# ✅ LIST AVAILABILITY
# ============================================================
async def list_availability(
    db: AsyncSession,
    doctor_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[AvailabilityResponse]:
    """Windows ordered by date and start; from today on when no range is given."""
    conditions = [DoctorAvailability.doctor_id == doctor_id]
    if start_date is None and end_date is None:
        conditions.append(DoctorAvailability.date >= today())
    if start_date is not None:
        conditions.append(DoctorAvailability.date >= start_date)
    if end_date is not None:
        conditions.append(DoctorAvailability.date <= end_date)

    result = await db.execute(
        select(DoctorAvailability)
        .where(and_(*conditions))
        .order_by(DoctorAvailability.date, DoctorAvailability.start_time)
    )
    windows = list(result.scalars().all())
    if not windows:
        return []

    time_per_patient = await get_time_per_patient(db, doctor_id)
    appointments = await _scheduled_appointments(db, doctor_id, sorted({w.date for w in windows}))

    by_date: Dict[date, List[Appointment]] = {}
    for appointment in appointments:
        by_date.setdefault(appointment.date, []).append(appointment)

    return [
        serialize_window(
            w,
            time_per_patient,
            sum(1 for a in by_date.get(w.date, []) if in_window(a.time, w)),
        )
        for w in windows
    ]


# ============================================================
# ✅ DELETE AVAILABILITY (optionally forced)
# ============================================================
def build_cancellation_message(appointment: Appointment, doctor_name: Optional[str]) -> str:
    return (
        f"Your appointment on {appointment.date.isoformat()} at {appointment.time} "
        f"with {doctor_name or 'your doctor'} was cancelled by the doctor."
    )


async def delete_availability(
    db: AsyncSession, doctor: User, availability_id: int, force: bool = False
) -> str:
    """
    Remove a window. Occupied windows need force=True, which cancels every
    booking inside the window and notifies each student in one transaction.
    Returns the success message.
    """
    result = await db.execute(
        select(DoctorAvailability)
        .where(
            and_(
                DoctorAvailability.id == availability_id,
                DoctorAvailability.doctor_id == doctor.id,
            )
        )
        .with_for_update()
    )
    window = result.scalars().first()
    if not window:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Availability not found")

    affected = await window_appointments(db, window)

    if not affected:
        await db.delete(window)
        await db.commit()
        logger.info(f"Doctor {doctor.id} deleted availability {availability_id}")
        return "Availability deleted successfully"

    if not force:
        logger.warning(
            f"Doctor {doctor.id} tried to delete availability {availability_id} with {len(affected)} booking(s)"
        )
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete availability with booked appointments",
        )

    try:
        for appointment in affected:
            appointment.status = AppointmentStatus.CANCELLED.value
            if appointment.student_id is not None:
                db.add(
                    Notification(
                        user_id=appointment.student_id,
                        message=build_cancellation_message(appointment, doctor.name),
                    )
                )
        await db.delete(window)
        await db.commit()
    except Exception:
        await db.rollback()
        logger.error(f"Forced deletion of availability {availability_id} failed; rolled back", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error deleting availability (forced)",
        )

    logger.info(
        f"Doctor {doctor.id} force-deleted availability {availability_id}; {len(affected)} booking(s) cancelled"
    )
    return f"Slot deleted and {len(affected)} booking(s) cancelled and notified"
