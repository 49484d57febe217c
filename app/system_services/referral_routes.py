# app/system_services/referral_routes.py
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.users.auth_dependencies import get_current_doctor, get_current_student
from app.users.user_models.user_model import User
from app.system_models.referral_model.referral_schemas import (
    ReferralCreate,
    ReferralDecision,
    ReferralResponse,
)
from app.system_services import referral_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/referrals", tags=["Referrals"])


@router.post("/request", status_code=201)
async def request_referral_endpoint(
    data: ReferralCreate,
    student: User = Depends(get_current_student),
    db: AsyncSession = Depends(get_db)
):
    try:
        referral = await referral_service.request_referral(db, student, data.reason)
    except SQLAlchemyError:
        logger.error("Error requesting referral", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "message": "Referral requested",
        "data": ReferralResponse.model_validate(referral),
    }


@router.get("/student")
async def student_referrals_endpoint(
    student: User = Depends(get_current_student),
    db: AsyncSession = Depends(get_db)
):
    try:
        referrals = await referral_service.list_student_referrals(db, student.id)
    except SQLAlchemyError:
        logger.error("Error fetching student referrals", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "data": [ReferralResponse.model_validate(r) for r in referrals],
        "count": len(referrals),
    }


@router.get("/doctor")
async def pending_referrals_endpoint(
    doctor: User = Depends(get_current_doctor),
    db: AsyncSession = Depends(get_db)
):
    try:
        referrals = await referral_service.list_pending_referrals(db)
    except SQLAlchemyError:
        logger.error("Error fetching pending referrals", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "data": [ReferralResponse.model_validate(r) for r in referrals],
        "count": len(referrals),
    }


@router.put("/{referral_id}/approve")
async def review_referral_endpoint(
    referral_id: int,
    data: ReferralDecision,
    doctor: User = Depends(get_current_doctor),
    db: AsyncSession = Depends(get_db)
):
    try:
        referral = await referral_service.review_referral(db, doctor, referral_id, data.status)
    except SQLAlchemyError:
        logger.error(f"Error reviewing referral {referral_id}", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "message": f"Referral {referral.status}",
        "data": ReferralResponse.model_validate(referral),
    }
