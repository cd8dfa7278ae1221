"""
Order Module - Admin Routes
==============================
Order search and status management for admins (JSON, used by /admin/orders).

Endpoints:
  GET   /api/admin/orders?pickupLocationId=&orderId=&email=
  PATCH /api/admin/orders/{id}   — {status} -> updated order
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from config.database import get_db
from modules.auth.deps import require_admin
from modules.order.service import order_service, order_to_dict

router = APIRouter(prefix="/api/admin", tags=["order-admin"])


@router.get("/orders")
async def admin_orders(
    pickupLocationId: str = Query(None),
    orderId: str = Query(None),
    email: str = Query(None),
    db: Session = Depends(get_db),
    user=Depends(require_admin),
):
    orders = order_service.admin_search_orders(
        db,
        pickup_location_id=pickupLocationId,
        order_id=orderId,
        email=email,
    )
    return [order_to_dict(o, with_buyer=True) for o in orders]


@router.patch("/orders/{order_id}")
async def update_order_status(
    order_id: str,
    data: Dict[str, Any],
    db: Session = Depends(get_db),
    user=Depends(require_admin),
):
    order = order_service.update_status(db, order_id, data.get("status"))
    db.commit()
    order = order_service.get_order_by_id(db, order.id)
    return order_to_dict(order, with_buyer=True)
