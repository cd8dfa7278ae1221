"""
Order Module - Models
======================
Order with a price snapshot per item, collected at a pickup location.
"""

import enum
from sqlalchemy import (
    Column, Integer, String, Numeric,
    ForeignKey, DateTime, CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from config.database import Base
from common.helpers import new_id, now_utc


class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    READY_FOR_PICKUP = "READY_FOR_PICKUP"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


# Statuses an admin may set. PENDING is only ever the initial value.
SETTABLE_STATUSES = (
    OrderStatus.READY_FOR_PICKUP,
    OrderStatus.PAID,
    OrderStatus.CANCELLED,
)


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(32), primary_key=True, default=new_id)
    buyer_id = Column(String(32), ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    pickup_location_id = Column(
        String(32), ForeignKey("pickup_locations.id", ondelete="RESTRICT"), nullable=False, index=True,
    )
    total_amount = Column(Numeric(12, 2), nullable=False)
    status = Column(String, default=OrderStatus.PENDING.value, nullable=False)
    created_at = Column(DateTime(timezone=True), default=now_utc, server_default=func.now(), nullable=False, index=True)

    # Relationships
    buyer = relationship("User", foreign_keys=[buyer_id])
    pickup_location = relationship("PickupLocation", back_populates="orders")
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")

    @property
    def status_label(self) -> str:
        labels = {
            OrderStatus.PENDING.value: "Pending",
            OrderStatus.READY_FOR_PICKUP.value: "Ready for pickup",
            OrderStatus.PAID.value: "Paid",
            OrderStatus.CANCELLED.value: "Cancelled",
        }
        return labels.get(self.status, self.status)


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(String(32), primary_key=True, default=new_id)
    order_id = Column(String(32), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(String(32), ForeignKey("products.id", ondelete="SET NULL"), nullable=True)

    # Snapshot at time of purchase
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)

    # Relationships
    order = relationship("Order", back_populates="items")
    product = relationship("Product", back_populates="order_items")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_order_item_qty"),
    )

    @property
    def line_total(self):
        return self.price * self.quantity
