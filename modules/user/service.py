"""
User Module - Service Layer
==============================
Maps identity-provider accounts onto local users: first-callback sync,
onboarding (profile + role) and role lookup.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from common.exceptions import ValidationError, NotFoundError
from modules.user.models import User, UserRole

logger = logging.getLogger("sparelink.user")


class UserService:

    def get_by_external_id(self, db: Session, external_id: str) -> Optional[User]:
        if not external_id:
            return None
        return db.query(User).filter(User.external_id == external_id).first()

    def require_by_external_id(self, db: Session, external_id: str) -> User:
        """Lookup that raises NotFound, used by routes keyed on userExternalId."""
        if not external_id:
            raise ValidationError("Missing user ID")
        user = self.get_by_external_id(db, external_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def sync_identity(self, db: Session, external_id: str, email: str = None,
                      first_name: str = None, last_name: str = None,
                      image_url: str = None) -> User:
        """
        Identity-provider callback: create the local user on first sight.
        Existing users only get empty profile fields filled in.
        """
        user = self.get_by_external_id(db, external_id)
        if not user:
            user = User(
                external_id=external_id,
                email=email,
                first_name=first_name,
                last_name=last_name,
                image_url=image_url,
                role=UserRole.BUYER.value,
                has_completed_onboarding=False,
            )
            db.add(user)
            db.flush()
            logger.info(f"Created user {user.id} for identity {external_id}")
            return user

        user.email = user.email or email
        user.first_name = user.first_name or first_name
        user.last_name = user.last_name or last_name
        user.image_url = user.image_url or image_url
        db.flush()
        return user

    def complete_onboarding(self, db: Session, data: dict) -> User:
        """
        Upsert the profile chosen on the onboarding page and fix the role.

        data keys: externalId, email, firstName, lastName, phone, role
        """
        external_id = (data.get("externalId") or "").strip()
        if not external_id:
            raise ValidationError("Missing user ID")

        role = (data.get("role") or UserRole.BUYER.value).upper()
        if role not in (UserRole.BUYER.value, UserRole.SELLER.value):
            # ADMIN is granted out of band, never self-selected
            raise ValidationError("Invalid role")

        user = self.sync_identity(db, external_id, email=data.get("email"))
        if user.has_completed_onboarding:
            raise ValidationError("Onboarding already completed")

        user.email = data.get("email") or user.email
        user.first_name = data.get("firstName") or user.first_name
        user.last_name = data.get("lastName") or user.last_name
        user.phone = data.get("phone") or user.phone
        user.role = role
        user.has_completed_onboarding = True
        db.flush()
        logger.info(f"User {user.id} onboarded as {role}")
        return user

    def get_role(self, db: Session, external_id: str) -> Optional[str]:
        user = self.get_by_external_id(db, external_id)
        return user.role if user else None


# Singleton
user_service = UserService()
