"""
Order Module - Service Layer
===============================
Checkout (cart -> order), buyer history, admin search and status updates.
"""

import logging
from decimal import Decimal
from typing import List

from sqlalchemy import desc
from sqlalchemy.orm import Session, joinedload, selectinload

from common.exceptions import (
    ValidationError, NotFoundError, EmptyCartError, NoValidItemsError,
)
from common.helpers import like_escape
from common.notifications import send_order_confirmation
from modules.cart.models import Cart, CartItem
from modules.cart.service import cart_service
from modules.catalog.models import Product
from modules.catalog.service import product_to_dict
from modules.order.models import Order, OrderItem, OrderStatus, SETTABLE_STATUSES
from modules.pickup.models import PickupLocation
from modules.user.models import User

logger = logging.getLogger("sparelink.order")


# ==========================================
# Serialization
# ==========================================

def order_item_to_dict(item: OrderItem) -> dict:
    return {
        "id": item.id,
        "orderId": item.order_id,
        "productId": item.product_id,
        "quantity": item.quantity,
        "price": float(item.price),
        "product": product_to_dict(item.product) if item.product else None,
    }


def order_to_dict(order: Order, with_buyer: bool = False) -> dict:
    data = {
        "id": order.id,
        "buyerId": order.buyer_id,
        "pickupLocationId": order.pickup_location_id,
        "totalAmount": float(order.total_amount),
        "status": order.status,
        "createdAt": order.created_at.isoformat() if order.created_at else None,
        "pickupLocation": order.pickup_location.to_dict() if order.pickup_location else None,
        "items": [order_item_to_dict(i) for i in order.items],
    }
    if with_buyer:
        buyer = order.buyer
        data["buyer"] = {
            "firstName": buyer.first_name,
            "lastName": buyer.last_name,
            "email": buyer.email,
        } if buyer else None
    return data


def _with_details(q):
    return q.options(
        joinedload(Order.pickup_location),
        selectinload(Order.items).selectinload(OrderItem.product).selectinload(Product.images),
    )


class OrderService:

    # ==========================================
    # Checkout
    # ==========================================

    def place_order(self, db: Session, buyer: User, pickup_location_id: str) -> Order:
        """
        Create an order from the buyer's cart:
        1. Drop cart items whose product no longer exists
        2. Snapshot current price x quantity per item
        3. Create Order + OrderItems
        4. Clear cart

        Everything is flushed into the caller's transaction; the route commits
        once, so order creation and cart clearing succeed or fail together.
        The confirmation email is sent separately via `notify_placed`.
        """
        if not pickup_location_id:
            raise ValidationError("Pickup location required")

        location = db.query(PickupLocation).filter(PickupLocation.id == pickup_location_id).first()
        if not location:
            raise NotFoundError("Pickup location not found")

        cart = db.query(Cart).options(
            selectinload(Cart.items).selectinload(CartItem.product),
        ).filter(Cart.user_id == buyer.id).first()
        if not cart or not cart.items:
            raise EmptyCartError()

        items = [i for i in cart.items if i.product is not None]
        if not items:
            raise NoValidItemsError()

        total = sum((i.product.price * i.quantity for i in items), Decimal("0.00"))

        order = Order(
            buyer_id=buyer.id,
            pickup_location_id=location.id,
            total_amount=total,
            status=OrderStatus.PENDING.value,
        )
        for i in items:
            order.items.append(OrderItem(
                product_id=i.product_id,
                quantity=i.quantity,
                price=i.product.price,
            ))
        db.add(order)
        db.flush()

        cart_service.clear_cart(db, cart.id)

        logger.info(f"Order {order.id} placed by {buyer.id}: {len(items)} items, total {total}")
        return order

    def notify_placed(self, db: Session, order_id: str) -> bool:
        """Best-effort confirmation email for a committed order."""
        order = self.get_order_by_id(db, order_id)
        if not order:
            return False
        return send_order_confirmation(order)

    # ==========================================
    # Query
    # ==========================================

    def get_order_by_id(self, db: Session, order_id: str):
        return _with_details(db.query(Order)).options(
            joinedload(Order.buyer),
        ).filter(Order.id == order_id).first()

    def list_buyer_orders(self, db: Session, buyer: User) -> List[Order]:
        return _with_details(db.query(Order)).filter(
            Order.buyer_id == buyer.id,
        ).order_by(desc(Order.created_at)).all()

    def get_buyer_order(self, db: Session, buyer: User, order_id: str) -> Order:
        order = _with_details(db.query(Order)).filter(
            Order.id == order_id,
            Order.buyer_id == buyer.id,
        ).first()
        if not order:
            raise NotFoundError("Order not found")
        return order

    def admin_search_orders(self, db: Session, pickup_location_id: str = None,
                            order_id: str = None, email: str = None) -> List[Order]:
        """
        Admin search. Filters combine with AND:
            pickup_location_id: exact match
            order_id: case-insensitive substring of the order id
            email: case-insensitive substring of the buyer's email
        """
        q = _with_details(db.query(Order)).join(User, Order.buyer_id == User.id).options(
            joinedload(Order.buyer),
        )

        if pickup_location_id:
            q = q.filter(Order.pickup_location_id == pickup_location_id)

        order_id = (order_id or "").strip()
        if order_id:
            q = q.filter(Order.id.ilike(f"%{like_escape(order_id)}%", escape="\\"))

        email = (email or "").strip()
        if email:
            q = q.filter(User.email.ilike(f"%{like_escape(email)}%", escape="\\"))

        return q.order_by(desc(Order.created_at)).all()

    # ==========================================
    # Status
    # ==========================================

    def update_status(self, db: Session, order_id: str, status: str) -> Order:
        """
        Set the order status. Any settable status may follow any other.
        """
        allowed = {s.value for s in SETTABLE_STATUSES}
        if not isinstance(status, str) or status not in allowed:
            raise ValidationError(f"Invalid status. Allowed: {', '.join(sorted(allowed))}")

        order = db.query(Order).filter(Order.id == order_id).first()
        if not order:
            raise NotFoundError("Order not found")

        previous = order.status
        order.status = status
        db.flush()
        logger.info(f"Order {order.id} status {previous} -> {status}")
        return order


# Singleton
order_service = OrderService()
