# app/system_models/appointment_model/appointment_model.py
import enum

from sqlalchemy import Column, Integer, String, Date, DateTime, Text, ForeignKey, CheckConstraint, Index
from app.database.connection import Base
from app.helpers.time import utcnow


class AppointmentStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    NO_SHOW = "no_show"


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    doctor_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    # Snapshots taken at booking time
    student_name = Column(String)
    doctor_name = Column(String)

    date = Column(Date, nullable=False)
    time = Column(String(5), nullable=False)  # "HH:MM"
    status = Column(String, nullable=False, default=AppointmentStatus.SCHEDULED.value)
    reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        CheckConstraint(
            "status IN ('scheduled', 'cancelled', 'completed', 'no_show')", name="check_appointment_status"
        ),
        Index("ix_appointments_doctor_slot", "doctor_id", "date", "time"),
    )

    def __repr__(self):
        return f"<Appointment(id={self.id}, doctor_id={self.doctor_id}, {self.date} {self.time}, {self.status})>"
