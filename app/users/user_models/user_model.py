# app/users/user_models/user_model.py
import enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from app.database.connection import Base
from app.helpers.time import utcnow


class UserRole(str, enum.Enum):
    STUDENT = "student"
    DOCTOR = "doctor"
    ADMIN = "admin"
    PHARMACY = "pharmacy"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String, default=UserRole.STUDENT.value, nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Students
    roll_number = Column(String, nullable=True)

    # Doctors
    specialization = Column(String, nullable=True)
    time_per_patient = Column(Integer, nullable=True)  # minutes

    phone = Column(String, nullable=True)

    tokens = relationship("Token", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

    # Add check constraints for validation at database level
    __table_args__ = (
        CheckConstraint(
            "role IN ('student', 'doctor', 'admin', 'pharmacy')", name="check_role_values"
        ),
        CheckConstraint(
            "time_per_patient IS NULL OR time_per_patient > 0", name="check_time_per_patient_positive"
        ),
    )

    def __repr__(self):
        return f"<User(id={self.id}, name='{self.name}', email='{self.email}', role='{self.role}')>"
