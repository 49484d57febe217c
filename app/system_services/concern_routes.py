# app/system_services/concern_routes.py
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.users.auth_dependencies import get_current_doctor, get_current_student
from app.users.user_models.user_model import User
from app.system_models.concern_model.concern_schemas import (
    ConcernCreate,
    ConcernDoctorView,
    ConcernReply,
    ConcernStudentView,
)
from app.system_services import concern_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/concerns", tags=["Concerns"])


@router.post("", status_code=201)
async def submit_concern_endpoint(
    data: ConcernCreate,
    student: User = Depends(get_current_student),
    db: AsyncSession = Depends(get_db)
):
    try:
        concern = await concern_service.create_concern(db, student, data)
    except SQLAlchemyError:
        logger.error("Error submitting concern", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "message": "Concern submitted",
        "data": ConcernStudentView.model_validate(concern),
    }


@router.get("/student")
async def student_concerns_endpoint(
    student: User = Depends(get_current_student),
    db: AsyncSession = Depends(get_db)
):
    try:
        concerns = await concern_service.list_student_concerns(db, student.id)
    except SQLAlchemyError:
        logger.error("Error fetching student concerns", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "data": [ConcernStudentView.model_validate(c) for c in concerns],
        "count": len(concerns),
    }


@router.get("/doctor")
async def doctor_concerns_endpoint(
    doctor: User = Depends(get_current_doctor),
    db: AsyncSession = Depends(get_db)
):
    # Anonymous: the doctor view carries no student id
    try:
        concerns = await concern_service.list_doctor_concerns(db, doctor.id)
    except SQLAlchemyError:
        logger.error("Error fetching concerns for doctor", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "data": [ConcernDoctorView.model_validate(c) for c in concerns],
        "count": len(concerns),
    }


@router.post("/{concern_id}/reply")
async def reply_concern_endpoint(
    concern_id: int,
    data: ConcernReply,
    doctor: User = Depends(get_current_doctor),
    db: AsyncSession = Depends(get_db)
):
    try:
        concern = await concern_service.reply_to_concern(db, doctor, concern_id, data.reply)
    except SQLAlchemyError:
        logger.error(f"Error replying to concern {concern_id}", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "message": "Reply sent",
        "data": ConcernDoctorView.model_validate(concern),
    }
