# app/system_models/referral_model/referral_schemas.py
from typing import Optional, Literal
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

REFERRAL_STATUSES = Literal["pending", "approved", "rejected"]


class ReferralCreate(BaseModel):
    reason: str = Field(..., min_length=1)


class ReferralDecision(BaseModel):
    # Anything other than "approved" rejects
    status: Optional[str] = None


class ReferralResponse(BaseModel):
    id: int
    student_id: Optional[int] = None
    student_name: Optional[str] = None
    reason: str
    status: REFERRAL_STATUSES
    doctor_notes: Optional[str] = None
    requested_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
