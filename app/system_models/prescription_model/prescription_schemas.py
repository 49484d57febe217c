# app/system_models/prescription_model/prescription_schemas.py
from typing import Optional, Literal
from datetime import date as date_type, datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator

RECORD_CATEGORIES = Literal["specialized", "general"]


class PrescriptionCreate(BaseModel):
    student_id: int
    diagnosis: str = Field(..., min_length=1)
    notes: Optional[str] = None
    medicines: Optional[str] = None
    category: RECORD_CATEGORIES = "specialized"

    @field_validator("category", mode="before")
    def default_category(cls, v):
        # An empty value falls back to the default
        return v or "specialized"


class PrescriptionUpdate(BaseModel):
    diagnosis: Optional[str] = None
    notes: Optional[str] = None
    medicines: Optional[str] = None


class PrescriptionResponse(BaseModel):
    id: int
    student_id: int
    doctor_id: Optional[int] = None
    doctor_name: Optional[str] = None
    date: date_type
    diagnosis: str
    notes: Optional[str] = None
    medicines: Optional[str] = None
    category: RECORD_CATEGORIES

    model_config = ConfigDict(from_attributes=True)
