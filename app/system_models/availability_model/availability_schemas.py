# app/system_models/availability_model/availability_schemas.py
from datetime import date as date_type, datetime, time
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from app.helpers.time import parse_clock, parse_date

REQUIRED_MESSAGE = "Date, start time, and end time are required"


class AvailabilityCreate(BaseModel):
    """Accepts both camelCase and snake_case keys."""
    model_config = ConfigDict(populate_by_name=True)

    date: Optional[date_type] = Field(default=None, validate_default=True)
    start_time: Optional[time] = Field(
        default=None, validate_default=True, validation_alias=AliasChoices("startTime", "start_time")
    )
    end_time: Optional[time] = Field(
        default=None, validate_default=True, validation_alias=AliasChoices("endTime", "end_time")
    )
    max_patients: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("maxPatients", "max_patients")
    )

    @field_validator("date", mode="before")
    def validate_date(cls, v):
        if v is None or v == "":
            raise ValueError(REQUIRED_MESSAGE)
        parsed = parse_date(v)
        if parsed is None:
            raise ValueError("Invalid date format. Use YYYY-MM-DD")
        return parsed

    @field_validator("start_time", "end_time", mode="before")
    def validate_clock(cls, v):
        if v is None or v == "":
            raise ValueError(REQUIRED_MESSAGE)
        parsed = parse_clock(v)
        if parsed is None:
            raise ValueError("Invalid time format. Use HH:mm (24-hour format)")
        return parsed

    @field_validator("max_patients")
    def validate_max_patients(cls, v):
        if v is not None and v <= 0:
            raise ValueError("max_patients must be greater than 0")
        return v

    @model_validator(mode="after")
    def check_window_order(self):
        if self.start_time and self.end_time and self.start_time >= self.end_time:
            raise ValueError("Start time must be before end time")
        return self


class AvailabilityResponse(BaseModel):
    id: int
    doctor_id: int
    date: date_type
    start_time: str
    end_time: str
    max_patients: Optional[int] = None
    max_patients_set: bool = False
    time_per_patient: Optional[int] = None
    booked_appointments: int = 0
    created_at: Optional[datetime] = None


class SlotAvailability(BaseModel):
    """Result of a capacity check for one doctor/date/time."""
    available: bool
    max_patients: Optional[int] = None
    current_bookings: Optional[int] = None
    time_per_patient: Optional[int] = None
    window_id: Optional[int] = None
    message: Optional[str] = None
