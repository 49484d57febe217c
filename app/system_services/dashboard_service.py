# app/system_services/dashboard_service.py
"""
Per-role dashboard payloads.

Each role maps to one builder; the builders reuse the service functions the
JSON routers call, so a dashboard never disagrees with the underlying API.
"""
import logging
from typing import Any, Awaitable, Callable, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from config.appconfig import settings
from app.helpers.time import today
from app.users.user_models.user_model import User, UserRole
from app.users.user_models.schemas import UserResponse
from app.system_models.appointment_model.appointment_schemas import AppointmentResponse
from app.system_models.concern_model.concern_schemas import ConcernDoctorView, ConcernStudentView
from app.system_models.referral_model.referral_schemas import ReferralResponse
from app.system_models.medicine_model.medicine_schemas import MedicineResponse
from app.system_services import (
    admin_service,
    appointment_service,
    availability_service,
    concern_service,
    notification_service,
    pharmacy_service,
    referral_service,
)

logger = logging.getLogger(__name__)

DashboardBuilder = Callable[[AsyncSession, User], Awaitable[Dict[str, Any]]]


async def build_student_dashboard(db: AsyncSession, user: User) -> Dict[str, Any]:
    appointments = await appointment_service.list_student_appointments(
        db, user.id, upcoming_only=True, on_or_after=today()
    )
    concerns = await concern_service.list_student_concerns(db, user.id)
    referrals = await referral_service.list_student_referrals(db, user.id)
    orders = await pharmacy_service.list_student_orders(db, user.id)
    return {
        "upcoming_appointments": [AppointmentResponse.model_validate(a) for a in appointments],
        "unread_notifications": await notification_service.count_unread(db, user.id),
        "pending_concerns": [ConcernStudentView.model_validate(c) for c in concerns if c.status == "pending"],
        "referrals": [ReferralResponse.model_validate(r) for r in referrals],
        "orders": [pharmacy_service.serialize_order(o) for o in orders],
    }


async def build_doctor_dashboard(db: AsyncSession, user: User) -> Dict[str, Any]:
    now = today()
    upcoming = await appointment_service.list_doctor_appointments(
        db, user.id, on_or_after=now, scheduled_only=True
    )
    concerns = await concern_service.list_doctor_concerns(db, user.id)
    return {
        "todays_appointments": [AppointmentResponse.model_validate(a) for a in upcoming if a.date == now],
        "upcoming_appointments": [AppointmentResponse.model_validate(a) for a in upcoming if a.date > now],
        "availability": await availability_service.list_availability(db, user.id),
        "pending_concerns": [ConcernDoctorView.model_validate(c) for c in concerns if c.status == "pending"],
        "pending_referrals": [
            ReferralResponse.model_validate(r) for r in await referral_service.list_pending_referrals(db)
        ],
    }


async def build_admin_dashboard(db: AsyncSession, user: User) -> Dict[str, Any]:
    return {"overview": await admin_service.get_overview(db)}


async def build_pharmacy_dashboard(db: AsyncSession, user: User) -> Dict[str, Any]:
    pending = await pharmacy_service.list_pending_orders(db)
    low_stock = await pharmacy_service.list_low_stock(db, settings.LOW_STOCK_THRESHOLD)
    return {
        "pending_orders": [pharmacy_service.serialize_order(o) for o in pending],
        "low_stock": [MedicineResponse.model_validate(m) for m in low_stock],
        "low_stock_threshold": settings.LOW_STOCK_THRESHOLD,
    }


DASHBOARD_BUILDERS: Dict[UserRole, DashboardBuilder] = {
    UserRole.STUDENT: build_student_dashboard,
    UserRole.DOCTOR: build_doctor_dashboard,
    UserRole.ADMIN: build_admin_dashboard,
    UserRole.PHARMACY: build_pharmacy_dashboard,
}


async def build_dashboard(db: AsyncSession, user: User) -> Dict[str, Any]:
    role = UserRole(user.role)
    builder = DASHBOARD_BUILDERS[role]
    payload = await builder(db, user)
    logger.debug(f"Built {role.value} dashboard for user {user.id}")
    return {"role": role.value, "user": UserResponse.model_validate(user), **payload}
