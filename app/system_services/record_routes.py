# app/system_services/record_routes.py
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.users.auth_dependencies import get_current_doctor, get_current_student, get_current_user
from app.users.user_models.user_model import User
from app.system_models.prescription_model.prescription_schemas import (
    PrescriptionCreate,
    PrescriptionResponse,
    PrescriptionUpdate,
)
from app.system_services import record_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/records", tags=["Medical Records"])


@router.post("", status_code=201)
async def create_record_endpoint(
    data: PrescriptionCreate,
    doctor: User = Depends(get_current_doctor),
    db: AsyncSession = Depends(get_db)
):
    try:
        record = await record_service.create_record(db, doctor, data)
    except SQLAlchemyError:
        logger.error("Error creating medical record", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "message": "Medical record created",
        "data": PrescriptionResponse.model_validate(record),
    }


@router.get("/student")
async def student_records_endpoint(
    student: User = Depends(get_current_student),
    db: AsyncSession = Depends(get_db)
):
    try:
        records = await record_service.list_student_records(db, student.id)
    except SQLAlchemyError:
        logger.error("Error fetching student records", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "data": [PrescriptionResponse.model_validate(r) for r in records],
        "count": len(records),
    }


@router.get("/doctor/{student_id}")
async def doctor_records_endpoint(
    student_id: int,
    doctor: User = Depends(get_current_doctor),
    db: AsyncSession = Depends(get_db)
):
    try:
        records = await record_service.list_records_for_doctor(db, doctor, student_id)
    except SQLAlchemyError:
        logger.error(f"Error fetching records of student {student_id}", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "data": [PrescriptionResponse.model_validate(r) for r in records],
        "count": len(records),
    }


@router.get("/prescriptions/{record_id}")
async def get_record_endpoint(
    record_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    try:
        record = await record_service.get_record(db, current_user, record_id)
    except SQLAlchemyError:
        logger.error(f"Error fetching record {record_id}", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {"success": True, "data": PrescriptionResponse.model_validate(record)}


@router.put("/prescriptions/{record_id}")
async def update_record_endpoint(
    record_id: int,
    data: PrescriptionUpdate,
    doctor: User = Depends(get_current_doctor),
    db: AsyncSession = Depends(get_db)
):
    try:
        record = await record_service.update_record(db, record_id, data)
    except SQLAlchemyError:
        logger.error(f"Error updating record {record_id}", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "message": "Prescription updated",
        "data": PrescriptionResponse.model_validate(record),
    }
