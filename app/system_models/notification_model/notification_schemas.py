# app/system_models/notification_model/notification_schemas.py
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class NotificationCreate(BaseModel):
    user_id: int
    message: str

    @model_validator(mode="before")
    def check_required(cls, data):
        if isinstance(data, dict) and (not data.get("user_id") or not data.get("message")):
            raise ValueError("Missing fields")
        return data

    @field_validator("message")
    def strip_message(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Missing fields")
        return v


class NotificationResponse(BaseModel):
    id: int
    user_id: int
    message: str
    is_read: bool = False
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
