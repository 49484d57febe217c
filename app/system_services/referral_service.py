# app/system_services/referral_service.py
import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.users.user_models.user_model import User
from app.system_models.referral_model.referral_model import Referral

logger = logging.getLogger(__name__)


async def request_referral(db: AsyncSession, student: User, reason: str) -> Referral:
    referral = Referral(student_id=student.id, student_name=student.name, reason=reason, status="pending")
    db.add(referral)
    await db.commit()
    await db.refresh(referral)
    logger.info(f"Student {student.id} requested referral {referral.id}")
    return referral


async def list_student_referrals(db: AsyncSession, student_id: int) -> List[Referral]:
    result = await db.execute(
        select(Referral).where(Referral.student_id == student_id).order_by(Referral.requested_at.desc())
    )
    return list(result.scalars().all())


async def list_pending_referrals(db: AsyncSession) -> List[Referral]:
    result = await db.execute(
        select(Referral).where(Referral.status == "pending").order_by(Referral.requested_at)
    )
    return list(result.scalars().all())


async def review_referral(
    db: AsyncSession, doctor: User, referral_id: int, decision: Optional[str]
) -> Referral:
    referral = await db.get(Referral, referral_id)
    if not referral:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Referral not found")

    referral.status = "approved" if decision == "approved" else "rejected"
    referral.doctor_notes = f"Reviewed by {doctor.name}"
    await db.commit()
    await db.refresh(referral)

    logger.info(f"Doctor {doctor.id} {referral.status} referral {referral.id}")
    return referral
