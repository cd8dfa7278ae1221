"""
User Module - User Model
==========================
One row per identity-provider account. The role (buyer, seller or admin)
is chosen once during onboarding.
"""

import enum

from sqlalchemy import Column, String, Boolean, DateTime, Index
from sqlalchemy.sql import func

from config.database import Base
from common.helpers import new_id, now_utc


class UserRole(str, enum.Enum):
    BUYER = "BUYER"
    SELLER = "SELLER"
    ADMIN = "ADMIN"


class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)

    # === Identity ===
    external_id = Column(String, unique=True, nullable=False, index=True)

    # === Profile ===
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    email = Column(String, nullable=True, index=True)
    phone = Column(String, nullable=True)
    image_url = Column(String, nullable=True)
    location = Column(String, nullable=True)

    # === Role ===
    role = Column(String, default=UserRole.BUYER.value, nullable=False)
    has_completed_onboarding = Column(Boolean, default=False, server_default="false", nullable=False)

    # === Audit ===
    created_at = Column(DateTime(timezone=True), default=now_utc, server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_users_created", "created_at"),
    )

    @property
    def full_name(self) -> str:
        parts = [self.first_name or "", self.last_name or ""]
        return " ".join(p for p in parts if p).strip()

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    @property
    def is_seller(self) -> bool:
        return self.role == UserRole.SELLER.value

    def display(self) -> dict:
        """Seller display name, as embedded in product listings."""
        return {"firstName": self.first_name, "lastName": self.last_name}

    def contact(self) -> dict:
        """Full seller contact details, as embedded in product detail."""
        return {
            "id": self.id,
            "externalId": self.external_id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "imageUrl": self.image_url,
            "role": self.role,
            "location": self.location,
            "hasCompletedOnboarding": self.has_completed_onboarding,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<User {self.external_id} ({self.role}) {self.full_name}>"
