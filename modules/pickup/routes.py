"""
Pickup Module - API Routes
=============================
Endpoints:
  GET  /api/pickup-locations  — all locations, newest first
  POST /api/pickup-locations  — {userExternalId?, name, address, city, contact?}
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from config.database import get_db
from common.exceptions import AuthenticationError
from modules.auth.deps import get_caller_identity
from modules.pickup.service import pickup_service
from modules.user.service import user_service

router = APIRouter(prefix="/api", tags=["pickup"])


@router.get("/pickup-locations")
async def list_pickup_locations(db: Session = Depends(get_db)):
    return [loc.to_dict() for loc in pickup_service.list_locations(db)]


@router.post("/pickup-locations")
async def create_pickup_location(
    data: Dict[str, Any],
    caller: Optional[str] = Depends(get_caller_identity),
    db: Session = Depends(get_db),
):
    external_id = caller or data.get("userExternalId")
    if not external_id:
        raise AuthenticationError("Unauthorized")
    user_service.require_by_external_id(db, external_id)

    location = pickup_service.create_location(db, data)
    db.commit()
    db.refresh(location)
    return location.to_dict()
