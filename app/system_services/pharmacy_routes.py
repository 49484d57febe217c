# app/system_services/pharmacy_routes.py
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.users.auth_dependencies import get_current_pharmacist, get_current_student, get_current_user
from app.users.user_models.user_model import User
from app.system_models.medicine_model.medicine_schemas import (
    MedicineCreate,
    MedicineResponse,
    OrderCreate,
    OrderStatusUpdate,
    StockUpdate,
)
from app.system_services import pharmacy_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pharmacy", tags=["Pharmacy"])


# ============================================================
# ✅ INVENTORY
# ============================================================
@router.get("/inventory")
async def inventory_endpoint(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    try:
        medicines = await pharmacy_service.list_inventory(db)
    except SQLAlchemyError:
        logger.error("Error fetching inventory", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "data": [MedicineResponse.model_validate(m) for m in medicines],
        "count": len(medicines),
    }


@router.post("/inventory", status_code=201)
async def add_medicine_endpoint(
    data: MedicineCreate,
    pharmacist: User = Depends(get_current_pharmacist),
    db: AsyncSession = Depends(get_db)
):
    try:
        medicine = await pharmacy_service.add_medicine(db, data)
    except SQLAlchemyError:
        logger.error("Error adding medicine", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "message": "Medicine added",
        "data": MedicineResponse.model_validate(medicine),
    }


@router.put("/inventory/{medicine_id}")
async def update_stock_endpoint(
    medicine_id: int,
    data: StockUpdate,
    pharmacist: User = Depends(get_current_pharmacist),
    db: AsyncSession = Depends(get_db)
):
    try:
        medicine = await pharmacy_service.set_stock(db, medicine_id, data.quantity)
    except SQLAlchemyError:
        logger.error(f"Error updating stock of medicine {medicine_id}", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "message": "Stock updated",
        "data": MedicineResponse.model_validate(medicine),
    }


# ============================================================
# ✅ ORDERS
# ============================================================
@router.post("/orders", status_code=201)
async def place_order_endpoint(
    data: OrderCreate,
    student: User = Depends(get_current_student),
    db: AsyncSession = Depends(get_db)
):
    try:
        order = await pharmacy_service.place_order(db, student, data)
    except SQLAlchemyError:
        logger.error("Error placing order", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {"success": True, "message": "Order placed", "order_id": order.id}


@router.get("/orders")
async def all_orders_endpoint(
    pharmacist: User = Depends(get_current_pharmacist),
    db: AsyncSession = Depends(get_db)
):
    try:
        orders = await pharmacy_service.list_orders(db)
    except SQLAlchemyError:
        logger.error("Error fetching orders", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "data": [pharmacy_service.serialize_order(o) for o in orders],
        "count": len(orders),
    }


@router.get("/orders/student")
async def student_orders_endpoint(
    student: User = Depends(get_current_student),
    db: AsyncSession = Depends(get_db)
):
    try:
        orders = await pharmacy_service.list_student_orders(db, student.id)
    except SQLAlchemyError:
        logger.error("Error fetching student orders", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "data": [pharmacy_service.serialize_order(o) for o in orders],
        "count": len(orders),
    }


@router.put("/orders/{order_id}/status")
async def update_order_status_endpoint(
    order_id: int,
    data: OrderStatusUpdate,
    pharmacist: User = Depends(get_current_pharmacist),
    db: AsyncSession = Depends(get_db)
):
    try:
        order = await pharmacy_service.update_order_status(db, order_id, data.status)
    except SQLAlchemyError:
        logger.error(f"Error updating order {order_id}", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {
        "success": True,
        "message": "Order status updated",
        "data": pharmacy_service.serialize_order(order),
    }
