# app/system_services/admin_service.py
import logging
from typing import Dict

from fastapi import HTTPException, status
from sqlalchemy import select, func, and_
from sqlalchemy.ext.asyncio import AsyncSession

from config.appconfig import settings
from app.users.security import get_password_hash
from app.users.user_models.user_model import User, UserRole
from app.users.user_models.schemas import StaffCreate
from app.system_models.appointment_model.appointment_model import Appointment
from app.system_models.concern_model.concern_model import Concern
from app.system_models.medicine_model.medicine_model import Medicine

logger = logging.getLogger(__name__)

STAFF_LABELS = {
    UserRole.DOCTOR: "Doctor",
    UserRole.PHARMACY: "Pharmacist",
}


async def _count(db: AsyncSession, stmt) -> int:
    return (await db.execute(stmt)).scalar_one()


# ============================================================
# ✅ OVERVIEW
# ============================================================
async def get_overview(db: AsyncSession) -> Dict[str, int]:
    def users_with(role: UserRole):
        return select(func.count(User.id)).where(User.role == role.value)

    return {
        "total_users": await _count(db, select(func.count(User.id))),
        "total_doctors": await _count(db, users_with(UserRole.DOCTOR)),
        "total_students": await _count(db, users_with(UserRole.STUDENT)),
        "total_pharmacy_staff": await _count(db, users_with(UserRole.PHARMACY)),
        "total_appointments": await _count(db, select(func.count(Appointment.id))),
        "pending_concerns": await _count(
            db, select(func.count(Concern.id)).where(Concern.status == "pending")
        ),
        "medicines_in_inventory": await _count(db, select(func.count(Medicine.id))),
    }


# ============================================================
# ✅ STAFF ACCOUNTS
# ============================================================
async def create_staff(db: AsyncSession, data: StaffCreate, role: UserRole) -> User:
    existing = await db.execute(select(User.id).where(User.email == data.email))
    if existing.first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")

    user = User(
        name=data.name,
        email=data.email,
        hashed_password=get_password_hash(data.password),
        role=role.value,
        phone=data.phone,
    )
    if role == UserRole.DOCTOR:
        user.specialization = data.specialization
        user.time_per_patient = data.time_per_patient or settings.DEFAULT_TIME_PER_PATIENT

    db.add(user)
    await db.commit()
    await db.refresh(user)

    logger.info(f"Admin created {role.value} account {user.id} ({user.email})")
    return user


async def remove_staff(db: AsyncSession, user_id: int, role: UserRole) -> None:
    result = await db.execute(select(User).where(and_(User.id == user_id, User.role == role.value)))
    user = result.scalars().first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"{STAFF_LABELS[role]} not found"
        )

    await db.delete(user)
    await db.commit()
    logger.info(f"Admin removed {role.value} account {user_id}")
