# app/users/user_services.py
import logging
from typing import List

from fastapi import HTTPException, status
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from app.users.user_models.user_model import User, UserRole
from app.users.user_models.schemas import UserUpdate

logger = logging.getLogger(__name__)


async def list_users(db: AsyncSession) -> List[User]:
    result = await db.execute(select(User).order_by(User.id))
    return list(result.scalars().all())


async def get_user_by_id(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


# ============================================================
# ✅ UPDATE PROFILE
# ============================================================
async def update_user(db: AsyncSession, user: User, data: UserUpdate, actor: User) -> User:
    changes = data.model_dump(exclude_unset=True)

    if "role" in changes and changes["role"] != user.role and actor.role != UserRole.ADMIN.value:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only admins can change roles")

    if "email" in changes and changes["email"] != user.email:
        taken = await db.execute(
            select(User.id).where(and_(User.email == changes["email"], User.id != user.id))
        )
        if taken.first():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already in use")

    for field, value in changes.items():
        if value is not None:
            setattr(user, field, value)

    await db.commit()
    await db.refresh(user)
    logger.info(f"User {user.id} updated by {actor.id}: {sorted(changes)}")
    return user


# ============================================================
# ✅ TIME PER PATIENT (doctors)
# ============================================================
async def set_time_per_patient(db: AsyncSession, doctor: User, minutes: int) -> User:
    doctor.time_per_patient = minutes
    await db.commit()
    await db.refresh(doctor)
    logger.info(f"Doctor {doctor.id} set time per patient to {minutes} minutes")
    return doctor
