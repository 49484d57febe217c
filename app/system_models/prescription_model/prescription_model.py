# app/system_models/prescription_model/prescription_model.py
from sqlalchemy import Column, Integer, String, Date, Text, DateTime, ForeignKey, CheckConstraint
from app.database.connection import Base
from app.helpers.time import utcnow, today


class Prescription(Base):
    """A medical record written by a doctor for a student."""
    __tablename__ = "prescriptions"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    doctor_name = Column(String)

    date = Column(Date, nullable=False, default=today)
    diagnosis = Column(Text, nullable=False)
    notes = Column(Text, nullable=True)
    medicines = Column(Text, nullable=True)
    category = Column(String, nullable=False, default="specialized")

    created_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        CheckConstraint("category IN ('specialized', 'general')", name="check_prescription_category"),
    )
