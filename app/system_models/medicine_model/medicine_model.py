# app/system_models/medicine_model/medicine_model.py
from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from app.database.connection import Base
from app.helpers.time import utcnow


class Medicine(Base):
    __tablename__ = "medicines"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    stock = Column(Integer, nullable=False, default=0)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    category = Column(String, nullable=True)

    __table_args__ = (
        CheckConstraint("stock >= 0", name="check_medicine_stock_non_negative"),
    )


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    student_name = Column(String)
    total = Column(Numeric(10, 2), nullable=False, default=0)
    status = Column(String, nullable=False, default="pending")
    ordered_at = Column(DateTime(timezone=True), default=utcnow)

    items = relationship(
        "OrderMedicine", back_populates="order", cascade="all, delete-orphan", lazy="selectin"
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'processing', 'ready', 'completed', 'cancelled')", name="check_order_status"
        ),
    )


class OrderMedicine(Base):
    __tablename__ = "order_medicines"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    medicine_id = Column(Integer, ForeignKey("medicines.id", ondelete="SET NULL"), nullable=True)
    quantity = Column(Integer, nullable=False)

    order = relationship("Order", back_populates="items")
    medicine = relationship("Medicine", lazy="selectin")
