# app/system_services/concern_service.py
import logging
from typing import List

from fastapi import HTTPException, status
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.helpers.time import utcnow
from app.users.user_models.user_model import User
from app.system_models.concern_model.concern_model import Concern
from app.system_models.concern_model.concern_schemas import ConcernCreate

logger = logging.getLogger(__name__)


async def create_concern(db: AsyncSession, student: User, data: ConcernCreate) -> Concern:
    concern = Concern(student_id=student.id, category=data.category, message=data.message)
    db.add(concern)
    await db.commit()
    await db.refresh(concern)
    logger.info(f"Concern {concern.id} submitted ({concern.category})")
    return concern


async def list_student_concerns(db: AsyncSession, student_id: int) -> List[Concern]:
    result = await db.execute(
        select(Concern).where(Concern.student_id == student_id).order_by(Concern.created_at.desc())
    )
    return list(result.scalars().all())


async def list_doctor_concerns(db: AsyncSession, doctor_id: int) -> List[Concern]:
    """Pending concerns plus the ones this doctor answered."""
    result = await db.execute(
        select(Concern)
        .where(or_(Concern.responded_by == doctor_id, Concern.status == "pending"))
        .order_by(Concern.created_at.desc())
    )
    return list(result.scalars().all())


async def reply_to_concern(db: AsyncSession, doctor: User, concern_id: int, reply: str) -> Concern:
    concern = await db.get(Concern, concern_id)
    if not concern:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Concern not found")

    concern.response = reply
    concern.responded_by = doctor.id
    concern.status = "responded"
    concern.responded_at = utcnow()
    await db.commit()
    await db.refresh(concern)

    logger.info(f"Doctor {doctor.id} replied to concern {concern.id}")
    return concern
