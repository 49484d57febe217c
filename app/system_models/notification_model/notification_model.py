# app/system_models/notification_model/notification_model.py
from sqlalchemy import Column, Integer, Text, Boolean, DateTime, ForeignKey
from app.database.connection import Base
from app.helpers.time import utcnow


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
