# app/system_models/appointment_model/appointment_schemas.py
from typing import Optional, Literal
from datetime import date as date_type, datetime
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from app.helpers.time import format_time, parse_date, parse_time

APPOINTMENT_STATUSES = Literal["scheduled", "cancelled", "completed", "no_show"]

INVALID_DATE = "Invalid date format. Use YYYY-MM-DD"
INVALID_TIME = "Invalid time format. Use HH:mm (24-hour format)"


def _missing(value) -> bool:
    return value is None or value == ""


def validate_date_text(v):
    parsed = parse_date(v)
    if parsed is None:
        raise ValueError(INVALID_DATE)
    return parsed


def validate_time_text(v):
    parsed = parse_time(v)
    if parsed is None:
        raise ValueError(INVALID_TIME)
    return format_time(parsed)


# ✅ Booking request
class AppointmentCreate(BaseModel):
    # Field order decides which message wins when several fields are bad
    date: date_type
    time: str
    doctor_id: int
    reason: Optional[str] = None

    @model_validator(mode="before")
    def check_required(cls, data):
        if isinstance(data, dict) and any(_missing(data.get(k)) for k in ("doctor_id", "date", "time")):
            raise ValueError("doctor_id, date, and time are required")
        return data

    @field_validator("date", mode="before")
    def validate_date(cls, v):
        return validate_date_text(v)

    @field_validator("time", mode="before")
    def validate_time(cls, v):
        return validate_time_text(v)

    @field_validator("doctor_id", mode="before")
    def validate_doctor_id(cls, v):
        # bool is an int subclass; neither it nor numeric strings count
        if isinstance(v, bool) or not isinstance(v, int) or v <= 0:
            raise ValueError("Invalid doctor_id. Must be a positive integer")
        return v


# ✅ Reschedule request: {date, time} or {new_date, new_time}
class RescheduleRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: date_type = Field(validation_alias=AliasChoices("date", "new_date"))
    time: str = Field(validation_alias=AliasChoices("time", "new_time"))

    @model_validator(mode="before")
    def check_required(cls, data):
        if isinstance(data, dict):
            new_date = data.get("date") or data.get("new_date")
            new_time = data.get("time") or data.get("new_time")
            if _missing(new_date) or _missing(new_time):
                raise ValueError(
                    "Both date and time are required for rescheduling. "
                    "Use either {date, time} or {new_date, new_time} format."
                )
        return data

    @field_validator("date", mode="before")
    def validate_date(cls, v):
        return validate_date_text(v)

    @field_validator("time", mode="before")
    def validate_time(cls, v):
        return validate_time_text(v)


class AppointmentResponse(BaseModel):
    id: int
    student_id: Optional[int] = None
    student_name: Optional[str] = None
    doctor_id: Optional[int] = None
    doctor_name: Optional[str] = None
    date: date_type
    time: str
    status: APPOINTMENT_STATUSES
    reason: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
