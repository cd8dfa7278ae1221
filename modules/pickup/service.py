"""
Pickup Module - Service Layer
================================
Create and list pickup locations.
"""

import logging
from typing import List

from sqlalchemy import desc
from sqlalchemy.orm import Session

from common.exceptions import ValidationError
from modules.pickup.models import PickupLocation

logger = logging.getLogger("sparelink.pickup")


def _clean(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class PickupService:

    def list_locations(self, db: Session) -> List[PickupLocation]:
        return db.query(PickupLocation).order_by(desc(PickupLocation.created_at)).all()

    def create_location(self, db: Session, data: dict) -> PickupLocation:
        name = _clean(data.get("name"))
        address = _clean(data.get("address"))
        city = _clean(data.get("city"))
        if not name or not address or not city:
            raise ValidationError("Name, address and city are required")

        location = PickupLocation(
            name=name,
            address=address,
            city=city,
            contact=_clean(data.get("contact")),
        )
        db.add(location)
        db.flush()
        logger.info(f"Pickup location created: {location.id} {name} ({city})")
        return location


# Singleton
pickup_service = PickupService()
