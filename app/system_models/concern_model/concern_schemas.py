# app/system_models/concern_model/concern_schemas.py
from typing import Optional, Literal
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

CONCERN_STATUSES = Literal["pending", "responded"]


class ConcernCreate(BaseModel):
    category: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)


class ConcernReply(BaseModel):
    reply: str = Field(..., min_length=1)


# Student view: their own concern with any reply
class ConcernStudentView(BaseModel):
    id: int
    category: str
    message: str
    response: Optional[str] = None
    status: CONCERN_STATUSES
    created_at: Optional[datetime] = None
    responded_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# Doctor view: anonymous, no student id
class ConcernDoctorView(ConcernStudentView):
    responded_by: Optional[int] = None
