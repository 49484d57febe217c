# app/users/user_models/schemas.py
import re
from datetime import datetime
from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator

# Allowed values as constants
ROLES = Literal["student", "doctor", "admin", "pharmacy"]
SIGNUP_ROLES = Literal["student", "doctor", "pharmacy"]

PASSWORD_PATTERN = re.compile(r"^(?=.*[A-Za-z])(?=.*\d).{8,}$")
PASSWORD_POLICY_MESSAGE = (
    "Password must be at least 8 characters long and include at least one letter and one number"
)


def check_password_policy(password: Optional[str]) -> str:
    if not password:
        raise ValueError("Password is required")
    if not PASSWORD_PATTERN.match(password):
        raise ValueError(PASSWORD_POLICY_MESSAGE)
    return password


def normalize_email_value(v):
    if isinstance(v, str):
        return v.strip().lower()
    return v


# ✅ Request schema for signup
class UserSignup(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    password: Optional[str] = Field(default=None, validate_default=True)
    role: SIGNUP_ROLES = "student"
    roll_number: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("roll_no", "roll_number")
    )
    specialization: Optional[str] = None
    phone: Optional[str] = None
    time_per_patient: Optional[int] = Field(
        default=None, gt=0, validation_alias=AliasChoices("timePerPatient", "time_per_patient")
    )

    @field_validator("email", mode="before")
    def normalize_email(cls, v):
        return normalize_email_value(v)

    @field_validator("password")
    def validate_password(cls, v):
        return check_password_policy(v)


# ✅ User login request
class UserLogin(BaseModel):
    email: str
    password: str

    @field_validator("email", mode="before")
    def normalize_email(cls, v):
        return normalize_email_value(v)


# ✅ Response schema for user info
class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    role: ROLES
    roll_number: Optional[str] = None
    specialization: Optional[str] = None
    time_per_patient: Optional[int] = None
    phone: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class DoctorSummary(BaseModel):
    id: int
    name: str
    specialization: Optional[str] = None
    time_per_patient: Optional[int] = None
    model_config = ConfigDict(from_attributes=True)


# ✅ Response schema for user login
class UserLoginResponse(BaseModel):
    success: bool = True
    token: str
    token_type: str = "bearer"
    user: UserResponse


# ✅ Request schema for profile / admin updates
class UserUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    email: Optional[EmailStr] = None
    role: Optional[ROLES] = None
    roll_number: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("roll_no", "roll_number")
    )
    specialization: Optional[str] = None
    phone: Optional[str] = None

    @field_validator("email", mode="before")
    def normalize_email(cls, v):
        return normalize_email_value(v)


# ✅ Request schema for a doctor's visit length
class TimePerPatientUpdate(BaseModel):
    time_per_patient: Optional[int] = Field(
        default=None,
        validate_default=True,
        validation_alias=AliasChoices("timePerPatient", "time_per_patient"),
    )

    @field_validator("time_per_patient")
    def validate_time_per_patient(cls, v):
        if v is None:
            raise ValueError("Time per patient is required")
        if v <= 0:
            raise ValueError("Time per patient must be greater than 0")
        return v


# ✅ Request schema for admin-created staff accounts
class StaffCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    password: Optional[str] = Field(default=None, validate_default=True)
    specialization: Optional[str] = None
    phone: Optional[str] = None
    time_per_patient: Optional[int] = Field(
        default=None, gt=0, validation_alias=AliasChoices("timePerPatient", "time_per_patient")
    )

    @field_validator("email", mode="before")
    def normalize_email(cls, v):
        return normalize_email_value(v)

    @field_validator("password")
    def validate_password(cls, v):
        return check_password_policy(v)
