# app/system_services/appointment_routes.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.users.auth_dependencies import (
    check_appointment_ownership,
    get_current_student,
    require_roles,
)
from app.users.user_models.user_model import User, UserRole
from app.users.user_models.schemas import DoctorSummary
from app.system_models.appointment_model.appointment_model import Appointment
from app.system_models.appointment_model.appointment_schemas import (
    AppointmentCreate,
    AppointmentResponse,
    RescheduleRequest,
)
from app.system_services import appointment_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Appointments"])


# ============================================================
# ✅ DOCTORS (public)
# ============================================================
@router.get("/doctors")
async def list_doctors_endpoint(db: AsyncSession = Depends(get_db)):
    try:
        doctors = await appointment_service.list_doctors(db)
    except SQLAlchemyError:
        logger.error("Error fetching doctors", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "data": [DoctorSummary.model_validate(d) for d in doctors],
        "count": len(doctors),
    }


# ============================================================
# ✅ BOOK APPOINTMENT (student)
# ============================================================
@router.post("/appointments", status_code=201)
async def book_appointment_endpoint(
    data: AppointmentCreate,
    student: User = Depends(get_current_student),
    db: AsyncSession = Depends(get_db)
):
    try:
        appointment = await appointment_service.book_appointment(db, student, data)
    except SQLAlchemyError:
        logger.error("Error booking appointment", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "message": "Appointment booked successfully",
        "data": AppointmentResponse.model_validate(appointment),
    }


# ============================================================
# ✅ LIST APPOINTMENTS
# ============================================================
@router.get("/appointments/student")
async def student_appointments_endpoint(
    student: User = Depends(get_current_student),
    db: AsyncSession = Depends(get_db)
):
    try:
        appointments = await appointment_service.list_student_appointments(db, student.id)
    except SQLAlchemyError:
        logger.error("Error fetching student appointments", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "data": [AppointmentResponse.model_validate(a) for a in appointments],
        "count": len(appointments),
    }


@router.get("/appointments/doctor")
async def doctor_appointments_endpoint(
    doctor_id: Optional[int] = Query(None),
    current_user: User = Depends(require_roles(UserRole.DOCTOR, UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db)
):
    target_id = appointment_service.resolve_doctor_scope(current_user, doctor_id)
    try:
        appointments = await appointment_service.list_doctor_appointments(db, target_id)
    except SQLAlchemyError:
        logger.error(f"Error fetching appointments for doctor {target_id}", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "data": [AppointmentResponse.model_validate(a) for a in appointments],
        "count": len(appointments),
    }


# ============================================================
# ✅ RESCHEDULE / CANCEL (owner or admin)
# ============================================================
@router.put("/appointments/{appointment_id}")
async def reschedule_appointment_endpoint(
    appointment_id: int,
    data: RescheduleRequest,
    appointment: Appointment = Depends(check_appointment_ownership),
    db: AsyncSession = Depends(get_db)
):
    try:
        appointment = await appointment_service.reschedule_appointment(db, appointment, data)
    except SQLAlchemyError:
        logger.error(f"Error rescheduling appointment {appointment_id}", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "message": "Appointment rescheduled",
        "data": AppointmentResponse.model_validate(appointment),
    }


@router.delete("/appointments/{appointment_id}")
async def cancel_appointment_endpoint(
    appointment_id: int,
    appointment: Appointment = Depends(check_appointment_ownership),
    db: AsyncSession = Depends(get_db)
):
    try:
        await appointment_service.cancel_appointment(db, appointment)
    except SQLAlchemyError:
        logger.error(f"Error cancelling appointment {appointment_id}", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {"success": True, "message": "Appointment cancelled"}
