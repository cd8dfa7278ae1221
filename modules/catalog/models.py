"""
Catalog Module - Models
========================
Product and its ordered image list. A product belongs to exactly one seller.
"""

from sqlalchemy import (
    Column, Integer, String, Text, Numeric,
    ForeignKey, DateTime, CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from config.database import Base
from common.helpers import new_id, now_utc


# ==========================================
# Product
# ==========================================

class Product(Base):
    __tablename__ = "products"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(12, 2), nullable=False)
    condition = Column(String, nullable=False)                 # NEW / USED / REFURBISHED ...
    category = Column(String, nullable=True)
    brand = Column(String, nullable=True)
    model = Column(String, nullable=True)
    stock = Column(Integer, default=0, nullable=False)
    seller_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, server_default=func.now(), nullable=False, index=True)

    # Relationships
    seller = relationship("User", foreign_keys=[seller_id])
    images = relationship(
        "ProductImage",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductImage.position",
    )
    order_items = relationship("OrderItem", back_populates="product", passive_deletes=True)

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_product_price"),
        CheckConstraint("stock >= 0", name="ck_product_stock"),
    )

    def __repr__(self):
        return f"<Product {self.name} ({self.price})>"


class ProductImage(Base):
    __tablename__ = "product_images"

    id = Column(String(32), primary_key=True, default=new_id)
    image_url = Column(String, nullable=False)
    position = Column(Integer, default=0, nullable=False)
    product_id = Column(String(32), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)

    product = relationship("Product", back_populates="images")
