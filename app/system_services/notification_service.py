# app/system_services/notification_service.py
import logging
from typing import List

from fastapi import HTTPException, status
from sqlalchemy import select, func, and_
from sqlalchemy.ext.asyncio import AsyncSession

from app.users.user_models.user_model import User
from app.system_models.notification_model.notification_model import Notification

logger = logging.getLogger(__name__)


async def list_notifications(db: AsyncSession, user_id: int) -> List[Notification]:
    result = await db.execute(
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
    )
    return list(result.scalars().all())


async def count_unread(db: AsyncSession, user_id: int) -> int:
    result = await db.execute(
        select(func.count(Notification.id)).where(
            and_(Notification.user_id == user_id, Notification.is_read.is_(False))
        )
    )
    return result.scalar_one()


async def send_notification(db: AsyncSession, user_id: int, message: str) -> Notification:
    if not await db.get(User, user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    notification = Notification(user_id=user_id, message=message)
    db.add(notification)
    await db.commit()
    await db.refresh(notification)
    logger.info(f"Notification {notification.id} sent to user {user_id}")
    return notification


async def mark_read(db: AsyncSession, user_id: int, notification_id: int) -> Notification:
    result = await db.execute(
        select(Notification).where(
            and_(Notification.id == notification_id, Notification.user_id == user_id)
        )
    )
    notification = result.scalars().first()
    if not notification:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")

    notification.is_read = True
    await db.commit()
    return notification
