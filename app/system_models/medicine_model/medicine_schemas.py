# app/system_models/medicine_model/medicine_schemas.py
from typing import Optional, List, Literal
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

ORDER_STATUSES = Literal["pending", "processing", "ready", "completed", "cancelled"]


class MedicineCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    stock: int = Field(default=0, ge=0)
    price: float = Field(default=0, ge=0)
    category: Optional[str] = None


class StockUpdate(BaseModel):
    quantity: int = Field(..., ge=0)


class MedicineResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    stock: int
    price: float
    category: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class OrderCreate(BaseModel):
    medicine_id: int
    quantity: int = Field(..., gt=0)


class OrderStatusUpdate(BaseModel):
    status: ORDER_STATUSES


class OrderItemResponse(BaseModel):
    medicine_id: Optional[int] = None
    medicine_name: Optional[str] = None
    quantity: int


class OrderResponse(BaseModel):
    id: int
    student_id: Optional[int] = None
    student_name: Optional[str] = None
    total: float
    status: ORDER_STATUSES
    ordered_at: Optional[datetime] = None
    items: List[OrderItemResponse] = []
