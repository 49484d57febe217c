# app/system_services/availability_routes.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.helpers.time import parse_date
from app.users.auth_dependencies import get_current_doctor, get_current_user
from app.users.user_models.user_model import User, UserRole
from app.system_models.availability_model.availability_schemas import AvailabilityCreate
from app.system_services.availability_service import (
    delete_availability,
    list_availability,
    set_availability,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/availability", tags=["Availability"])


def _parse_range_bound(value: Optional[str]):
    if value is None or value == "":
        return None
    parsed = parse_date(value)
    if parsed is None:
        raise HTTPException(status_code=400, detail="Invalid date format. Use YYYY-MM-DD")
    return parsed


async def _list_windows(db: AsyncSession, doctor_id: int, start_date, end_date):
    start = _parse_range_bound(start_date)
    end = _parse_range_bound(end_date)
    try:
        windows = await list_availability(db, doctor_id, start, end)
    except SQLAlchemyError:
        logger.error(f"Error fetching availability for doctor {doctor_id}", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {"success": True, "data": windows, "count": len(windows)}


# ============================================================
# ✅ SET AVAILABILITY (doctor)
# ============================================================
@router.post("", status_code=201)
async def create_availability_endpoint(
    data: AvailabilityCreate,
    doctor: User = Depends(get_current_doctor),
    db: AsyncSession = Depends(get_db)
):
    try:
        window = await set_availability(db, doctor, data)
    except SQLAlchemyError:
        logger.error("Error saving availability", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {"success": True, "message": "Availability saved", "data": window}


# ============================================================
# ✅ LIST AVAILABILITY
# ============================================================
@router.get("")
async def my_availability_endpoint(
    doctor_id: Optional[int] = Query(None),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Doctors default to their own windows; everyone else names a doctor."""
    if doctor_id is None:
        if current_user.role != UserRole.DOCTOR.value:
            raise HTTPException(status_code=400, detail="Doctor id is required")
        doctor_id = current_user.id
    return await _list_windows(db, doctor_id, start_date, end_date)


@router.get("/{doctor_id}")
async def doctor_availability_endpoint(
    doctor_id: int,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await _list_windows(db, doctor_id, start_date, end_date)


# ============================================================
# ✅ DELETE AVAILABILITY (owning doctor; ?force=true cascades)
# ============================================================
@router.delete("/{availability_id}")
async def delete_availability_endpoint(
    availability_id: int,
    force: bool = Query(False),
    doctor: User = Depends(get_current_doctor),
    db: AsyncSession = Depends(get_db)
):
    try:
        message = await delete_availability(db, doctor, availability_id, force=force)
    except SQLAlchemyError:
        logger.error(f"Error deleting availability {availability_id}", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {"success": True, "message": message}
