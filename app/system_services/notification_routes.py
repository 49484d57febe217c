# app/system_services/notification_routes.py
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.users.auth_dependencies import get_current_admin, get_current_user
from app.users.user_models.user_model import User
from app.system_models.notification_model.notification_schemas import (
    NotificationCreate,
    NotificationResponse,
)
from app.system_services import notification_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("")
async def my_notifications_endpoint(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    try:
        notifications = await notification_service.list_notifications(db, current_user.id)
    except SQLAlchemyError:
        logger.error("Error fetching notifications", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "data": [NotificationResponse.model_validate(n) for n in notifications],
        "count": len(notifications),
    }


@router.post("", status_code=201)
async def send_notification_endpoint(
    data: NotificationCreate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    try:
        notification = await notification_service.send_notification(db, data.user_id, data.message)
    except SQLAlchemyError:
        logger.error("Error sending notification", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "message": "Notification sent",
        "data": NotificationResponse.model_validate(notification),
    }


@router.put("/{notification_id}/read")
async def mark_read_endpoint(
    notification_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    try:
        notification = await notification_service.mark_read(db, current_user.id, notification_id)
    except SQLAlchemyError:
        logger.error(f"Error marking notification {notification_id} read", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "message": "Notification marked as read",
        "data": NotificationResponse.model_validate(notification),
    }
