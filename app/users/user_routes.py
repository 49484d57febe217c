# app/users/user_routes.py
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.users import user_services
from app.users.auth_dependencies import (
    authorize_user_or_admin,
    get_current_admin,
    get_current_doctor,
    get_current_user,
)
from app.users.user_models.user_model import User
from app.users.user_models.schemas import TimePerPatientUpdate, UserResponse, UserUpdate
from app.system_services.dashboard_service import build_dashboard

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("")
async def list_users_endpoint(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
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


# Must stay above /{user_id}
@router.put("/doctor/time-per-patient")
async def time_per_patient_endpoint(
    data: TimePerPatientUpdate,
    doctor: User = Depends(get_current_doctor),
    db: AsyncSession = Depends(get_db)
):
    try:
        doctor = await user_services.set_time_per_patient(db, doctor, data.time_per_patient)
    except SQLAlchemyError:
        logger.error("Error updating time per patient", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "message": "Time per patient updated",
        "data": {"time_per_patient": doctor.time_per_patient},
    }


@router.get("/{user_id}")
async def get_user_endpoint(
    user_id: int,
    current_user: User = Depends(authorize_user_or_admin),
    db: AsyncSession = Depends(get_db)
):
    try:
        user = await user_services.get_user_by_id(db, user_id)
    except SQLAlchemyError:
        logger.error(f"Error fetching user {user_id}", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {"success": True, "data": UserResponse.model_validate(user)}


@router.put("/{user_id}")
async def update_user_endpoint(
    user_id: int,
    data: UserUpdate,
    current_user: User = Depends(authorize_user_or_admin),
    db: AsyncSession = Depends(get_db)
):
    try:
        user = await user_services.get_user_by_id(db, user_id)
        user = await user_services.update_user(db, user, data, current_user)
    except SQLAlchemyError:
        logger.error(f"Error updating user {user_id}", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "message": "User updated",
        "data": UserResponse.model_validate(user),
    }


@router.get("/{user_id}/dashboard")
async def dashboard_endpoint(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    if current_user.id != user_id:
        raise HTTPException(status_code=403, detail="Forbidden")
    try:
        dashboard = await build_dashboard(db, current_user)
    except SQLAlchemyError:
        logger.error(f"Error building dashboard for user {user_id}", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {"success": True, "data": dashboard}
