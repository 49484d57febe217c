# app/system_services/admin_routes.py
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.users.auth_dependencies import get_current_admin
from app.users.user_models.user_model import UserRole
from app.users.user_models.schemas import StaffCreate, UserResponse
from app.users import user_services
from app.system_models.appointment_model.appointment_schemas import AppointmentResponse
from app.system_models.medicine_model.medicine_schemas import MedicineResponse
from app.system_services import admin_service, appointment_service, pharmacy_service

logger = logging.getLogger(__name__)

# Every route here is admin-only
router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(get_current_admin)])


# ============================================================
# ✅ OVERVIEW & LISTINGS
# ============================================================
@router.get("/overview")
async def overview_endpoint(db: AsyncSession = Depends(get_db)):
    try:
        overview = await admin_service.get_overview(db)
    except SQLAlchemyError:
        logger.error("Error building admin overview", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {"success": True, "data": overview}


@router.get("/users")
async def users_endpoint(db: AsyncSession = Depends(get_db)):
    try:
        users = await user_services.list_users(db)
    except SQLAlchemyError:
        logger.error("Error fetching users", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "data": [UserResponse.model_validate(u) for u in users],
        "count": len(users),
    }


@router.get("/appointments")
async def appointments_endpoint(db: AsyncSession = Depends(get_db)):
    try:
        appointments = await appointment_service.list_all_appointments(db)
    except SQLAlchemyError:
        logger.error("Error fetching appointments", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "data": [AppointmentResponse.model_validate(a) for a in appointments],
        "count": len(appointments),
    }


@router.get("/inventory")
async def inventory_endpoint(db: AsyncSession = Depends(get_db)):
    try:
        medicines = await pharmacy_service.list_inventory(db)
    except SQLAlchemyError:
        logger.error("Error fetching inventory", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "data": [MedicineResponse.model_validate(m) for m in medicines],
        "count": len(medicines),
    }


# ============================================================
# ✅ STAFF ACCOUNTS
# ============================================================
async def _create_staff(data: StaffCreate, role: UserRole, db: AsyncSession):
    try:
        user = await admin_service.create_staff(db, data, role)
    except SQLAlchemyError:
        logger.error(f"Error creating {role.value} account", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {"success": True, "data": UserResponse.model_validate(user)}


async def _remove_staff(user_id: int, role: UserRole, db: AsyncSession):
    try:
        await admin_service.remove_staff(db, user_id, role)
    except SQLAlchemyError:
        logger.error(f"Error removing {role.value} account {user_id}", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {"success": True, "message": f"{admin_service.STAFF_LABELS[role]} removed"}


@router.post("/doctors", status_code=201)
async def add_doctor_endpoint(data: StaffCreate, db: AsyncSession = Depends(get_db)):
    return await _create_staff(data, UserRole.DOCTOR, db)


@router.delete("/doctors/{user_id}")
async def remove_doctor_endpoint(user_id: int, db: AsyncSession = Depends(get_db)):
    return await _remove_staff(user_id, UserRole.DOCTOR, db)


@router.post("/pharmacists", status_code=201)
async def add_pharmacist_endpoint(data: StaffCreate, db: AsyncSession = Depends(get_db)):
    return await _create_staff(data, UserRole.PHARMACY, db)


@router.delete("/pharmacists/{user_id}")
async def remove_pharmacist_endpoint(user_id: int, db: AsyncSession = Depends(get_db)):
    return await _remove_staff(user_id, UserRole.PHARMACY, db)
