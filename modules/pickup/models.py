"""
Pickup Module - Models
=======================
Physical collection points a buyer picks when placing an order.
"""

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from config.database import Base
from common.helpers import new_id, now_utc


class PickupLocation(Base):
    __tablename__ = "pickup_locations"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    address = Column(String, nullable=False)
    city = Column(String, nullable=False)
    contact = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, server_default=func.now(), nullable=False)

    orders = relationship("Order", back_populates="pickup_location")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "city": self.city,
            "contact": self.contact,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<PickupLocation {self.name} ({self.city})>"
