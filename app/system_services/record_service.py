# app/system_services/record_service.py
import logging
from typing import List

from fastapi import HTTPException, status
from sqlalchemy import select, and_, or_, false
from sqlalchemy.orm import aliased
from sqlalchemy.ext.asyncio import AsyncSession

from app.users.user_models.user_model import User, UserRole
from app.system_models.prescription_model.prescription_model import Prescription
from app.system_models.prescription_model.prescription_schemas import PrescriptionCreate, PrescriptionUpdate

logger = logging.getLogger(__name__)


# ============================================================
# ✅ SPECIALIZATION FILTER
# ============================================================
def visible_to_doctor(doctor: User):
    """
    SQL condition: general records, or records whose author shares the
    doctor's specialization. The author is matched by id.
    """
    if not doctor.specialization:
        same_specialization = false()
    else:
        author = aliased(User)
        author_specialization = (
            select(author.specialization)
            .where(author.id == Prescription.doctor_id)
            .correlate(Prescription)
            .scalar_subquery()
        )
        same_specialization = author_specialization == doctor.specialization

    return or_(Prescription.category == "general", same_specialization)


# ============================================================
# ✅ CREATE / UPDATE
# ============================================================
async def create_record(db: AsyncSession, doctor: User, data: PrescriptionCreate) -> Prescription:
    result = await db.execute(
        select(User).where(and_(User.id == data.student_id, User.role == UserRole.STUDENT.value))
    )
    if not result.scalars().first():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")

    record = Prescription(
        student_id=data.student_id,
        doctor_id=doctor.id,
        doctor_name=doctor.name,
        diagnosis=data.diagnosis,
        notes=data.notes,
        medicines=data.medicines,
        category=data.category,
    )
    db.add(record)
    await db.commit()
    await db.refresh(record)

    logger.info(f"Doctor {doctor.id} wrote {record.category} record {record.id} for student {data.student_id}")
    return record


async def update_record(db: AsyncSession, record_id: int, data: PrescriptionUpdate) -> Prescription:
    record = await db.get(Prescription, record_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Record not found")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(record, field, value)
    await db.commit()
    await db.refresh(record)
    return record


# ============================================================
# ✅ READ
# ============================================================
async def list_student_records(db: AsyncSession, student_id: int) -> List[Prescription]:
    result = await db.execute(
        select(Prescription)
        .where(Prescription.student_id == student_id)
        .order_by(Prescription.date.desc(), Prescription.id.desc())
    )
    return list(result.scalars().all())


async def list_records_for_doctor(db: AsyncSession, doctor: User, student_id: int) -> List[Prescription]:
    result = await db.execute(
        select(Prescription)
        .where(and_(Prescription.student_id == student_id, visible_to_doctor(doctor)))
        .order_by(Prescription.date.desc(), Prescription.id.desc())
    )
    return list(result.scalars().all())


async def get_record(db: AsyncSession, user: User, record_id: int) -> Prescription:
    record = await db.get(Prescription, record_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Record not found")

    if user.role == UserRole.ADMIN.value:
        return record
    if user.role == UserRole.STUDENT.value and record.student_id == user.id:
        return record
    if user.role == UserRole.DOCTOR.value:
        visible = await db.execute(
            select(Prescription.id).where(and_(Prescription.id == record_id, visible_to_doctor(user)))
        )
        if visible.first():
            return record

    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
