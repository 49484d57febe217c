# app/system_models/referral_model/referral_model.py
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, CheckConstraint
from app.database.connection import Base
from app.helpers.time import utcnow


class Referral(Base):
    __tablename__ = "referrals"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    student_name = Column(String)
    reason = Column(Text, nullable=False)
    status = Column(String, nullable=False, default="pending")
    doctor_notes = Column(Text, nullable=True)
    requested_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        CheckConstraint("status IN ('pending', 'approved', 'rejected')", name="check_referral_status"),
    )
