# app/system_models/availability_model/availability_model.py
from sqlalchemy import Column, Integer, Date, Time, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from app.database.connection import Base
from app.helpers.time import utcnow


class DoctorAvailability(Base):
    __tablename__ = "doctor_availability"

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    max_patients = Column(Integer, nullable=True)  # None → derived from time_per_patient
    created_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        UniqueConstraint("doctor_id", "date", "start_time", "end_time", name="uq_doctor_availability_window"),
        CheckConstraint("start_time < end_time", name="check_window_order"),
        CheckConstraint("max_patients IS NULL OR max_patients > 0", name="check_max_patients_positive"),
    )

    def __repr__(self):
        return f"<DoctorAvailability(id={self.id}, doctor_id={self.doctor_id}, {self.date} {self.start_time}-{self.end_time})>"
