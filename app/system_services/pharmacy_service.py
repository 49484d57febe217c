# app/system_services/pharmacy_service.py
import logging
from decimal import Decimal
from typing import List

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.users.user_models.user_model import User
from app.system_models.medicine_model.medicine_model import Medicine, Order, OrderMedicine
from app.system_models.medicine_model.medicine_schemas import (
    MedicineCreate,
    OrderCreate,
    OrderItemResponse,
    OrderResponse,
)

logger = logging.getLogger(__name__)


# ============================================================
# ✅ INVENTORY
# ============================================================
async def list_inventory(db: AsyncSession) -> List[Medicine]:
    result = await db.execute(select(Medicine).order_by(Medicine.name))
    return list(result.scalars().all())


async def list_low_stock(db: AsyncSession, threshold: int) -> List[Medicine]:
    result = await db.execute(
        select(Medicine).where(Medicine.stock < threshold).order_by(Medicine.stock, Medicine.name)
    )
    return list(result.scalars().all())


async def add_medicine(db: AsyncSession, data: MedicineCreate) -> Medicine:
    medicine = Medicine(**data.model_dump())
    db.add(medicine)
    await db.commit()
    await db.refresh(medicine)
    logger.info(f"Medicine {medicine.id} ({medicine.name}) added with stock {medicine.stock}")
    return medicine


async def set_stock(db: AsyncSession, medicine_id: int, quantity: int) -> Medicine:
    medicine = await db.get(Medicine, medicine_id)
    if not medicine:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Medicine not found")

    medicine.stock = quantity
    await db.commit()
    await db.refresh(medicine)
    logger.info(f"Medicine {medicine.id} stock set to {quantity}")
    return medicine


# ============================================================
# ✅ ORDERS
# ============================================================
def serialize_order(order: Order) -> OrderResponse:
    return OrderResponse(
        id=order.id,
        student_id=order.student_id,
        student_name=order.student_name,
        total=float(order.total or 0),
        status=order.status,
        ordered_at=order.ordered_at,
        items=[
            OrderItemResponse(
                medicine_id=item.medicine_id,
                medicine_name=item.medicine.name if item.medicine else None,
                quantity=item.quantity,
            )
            for item in order.items
        ],
    )


async def place_order(db: AsyncSession, student: User, data: OrderCreate) -> Order:
    """Order, order line and stock decrement commit together."""
    result = await db.execute(
        select(Medicine).where(Medicine.id == data.medicine_id).with_for_update()
    )
    medicine = result.scalars().first()
    if not medicine:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Medicine not found")

    if medicine.stock < data.quantity:
        logger.warning(
            f"Order by student {student.id} for {data.quantity} x medicine {medicine.id} "
            f"exceeds stock {medicine.stock}"
        )
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Not enough stock available")

    order = Order(
        student_id=student.id,
        student_name=student.name,
        total=Decimal(medicine.price) * data.quantity,
        status="pending",
    )
    order.items.append(OrderMedicine(medicine=medicine, quantity=data.quantity))
    medicine.stock -= data.quantity
    db.add(order)
    await db.commit()

    logger.info(f"Order {order.id} placed by student {student.id}: {data.quantity} x {medicine.name}")
    return order


async def list_orders(db: AsyncSession) -> List[Order]:
    result = await db.execute(select(Order).order_by(Order.ordered_at.desc(), Order.id.desc()))
    return list(result.scalars().all())


async def list_pending_orders(db: AsyncSession) -> List[Order]:
    result = await db.execute(
        select(Order).where(Order.status == "pending").order_by(Order.ordered_at, Order.id)
    )
    return list(result.scalars().all())


async def list_student_orders(db: AsyncSession, student_id: int) -> List[Order]:
    result = await db.execute(
        select(Order).where(Order.student_id == student_id).order_by(Order.ordered_at.desc(), Order.id.desc())
    )
    return list(result.scalars().all())


async def update_order_status(db: AsyncSession, order_id: int, new_status: str) -> Order:
    result = await db.execute(select(Order).where(Order.id == order_id))
    order = result.scalars().first()
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")

    order.status = new_status
    await db.commit()
    logger.info(f"Order {order.id} moved to {new_status}")
    return order
