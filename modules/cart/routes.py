"""
Cart Module - API Routes
==========================
Cart lookup, add-to-cart, quantity update and item removal (JSON, for AJAX).

Endpoints:
  GET    /api/cart?userExternalId=  — {items: [...]}
  POST   /api/cart                  — {userExternalId, productId, quantity}
  PATCH  /api/cart/item             — {itemId, quantity}
  DELETE /api/cart/item             — {itemId}
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from config.database import get_db
from common.exceptions import ValidationError
from modules.cart.service import cart_service, cart_item_to_dict
from modules.user.service import user_service

router = APIRouter(prefix="/api", tags=["cart"])


# ==========================================
# View Cart
# ==========================================

@router.get("/cart")
async def get_cart(
    userExternalId: str = Query(None),
    db: Session = Depends(get_db),
):
    user = user_service.require_by_external_id(db, userExternalId)
    items = cart_service.get_items(db, user)
    return {"items": [cart_item_to_dict(it) for it in items]}


# ==========================================
# Add to Cart
# ==========================================

@router.post("/cart")
async def add_to_cart(
    data: Dict[str, Any],
    db: Session = Depends(get_db),
):
    external_id = data.get("userExternalId")
    product_id = data.get("productId")
    quantity = data.get("quantity")
    if not external_id or not product_id or not quantity:
        raise ValidationError("Missing data")

    user = user_service.require_by_external_id(db, external_id)
    item = cart_service.add_item(db, user, product_id, quantity)
    db.commit()
    return {"success": True, "itemId": item.id, "quantity": item.quantity}


# ==========================================
# Update / Remove Item
# ==========================================

@router.patch("/cart/item")
async def update_cart_item(
    data: Dict[str, Any],
    db: Session = Depends(get_db),
):
    item = cart_service.update_quantity(db, data.get("itemId"), data.get("quantity"))
    db.commit()
    return {
        "id": item.id,
        "cartId": item.cart_id,
        "productId": item.product_id,
        "quantity": item.quantity,
    }


@router.delete("/cart/item")
async def remove_cart_item(
    data: Dict[str, Any],
    db: Session = Depends(get_db),
):
    item_id = data.get("itemId")
    removed = cart_service.remove_item(db, item_id)
    db.commit()
    return {"success": True, "removed": removed, "id": item_id}
