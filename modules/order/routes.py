"""
Order Module - Buyer Routes
==============================
Endpoints:
  POST /api/order                          — place an order from the cart
  GET  /api/order?userExternalId=          — buyer's orders, newest first
  GET  /api/order/{id}?userExternalId=     — one order of that buyer
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from config.database import get_db
from common.exceptions import ValidationError
from modules.auth.deps import get_caller_identity
from modules.order.service import order_service, order_to_dict
from modules.user.service import user_service

logger = logging.getLogger("sparelink.order")

router = APIRouter(prefix="/api", tags=["orders"])


# Sync handler (threadpool): the confirmation email is a blocking HTTP call
@router.post("/order")
def place_order(
    data: Dict[str, Any],
    caller: Optional[str] = Depends(get_caller_identity),
    db: Session = Depends(get_db),
):
    external_id = data.get("userExternalId") or caller
    if not external_id:
        raise ValidationError("Missing user ID")
    pickup_location_id = data.get("pickupLocationId")
    if not pickup_location_id:
        raise ValidationError("Pickup location required")

    buyer = user_service.require_by_external_id(db, external_id)
    order = order_service.place_order(db, buyer, pickup_location_id)
    db.commit()

    # Order is committed; email outcome does not change the response
    order_service.notify_placed(db, order.id)

    order = order_service.get_order_by_id(db, order.id)
    return order_to_dict(order)


@router.get("/order")
async def list_orders(
    userExternalId: str = Query(None),
    caller: Optional[str] = Depends(get_caller_identity),
    db: Session = Depends(get_db),
):
    buyer = user_service.require_by_external_id(db, userExternalId or caller)
    orders = order_service.list_buyer_orders(db, buyer)
    return [order_to_dict(o) for o in orders]


@router.get("/order/{order_id}")
async def get_order(
    order_id: str,
    userExternalId: str = Query(None),
    caller: Optional[str] = Depends(get_caller_identity),
    db: Session = Depends(get_db),
):
    buyer = user_service.require_by_external_id(db, userExternalId or caller)
    order = order_service.get_buyer_order(db, buyer, order_id)
    return order_to_dict(order)
