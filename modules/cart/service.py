"""
Cart Module - Service Layer
==============================
Cart management: get, add (merge-or-create), set quantity, remove.

Cart creation and item merging are single conditional upserts keyed on the
unique constraints (carts.user_id and cart_items(cart_id, product_id)), so
concurrent adds for the same user collapse into one cart and one row.
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session, selectinload

from common.exceptions import ValidationError, NotFoundError
from common.helpers import new_id, safe_int, MAX_INT
from modules.cart.models import Cart, CartItem
from modules.catalog.models import Product
from modules.catalog.service import product_to_dict
from modules.user.models import User

logger = logging.getLogger("sparelink.cart")


def _insert_for(db: Session):
    """Dialect-specific INSERT construct supporting ON CONFLICT."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert
    if dialect == "sqlite":
        return sqlite.insert
    raise RuntimeError(f"Unsupported database dialect for upsert: {dialect}")


def cart_item_to_dict(item: CartItem) -> dict:
    return {
        "id": item.id,
        "cartId": item.cart_id,
        "productId": item.product_id,
        "quantity": item.quantity,
        "product": product_to_dict(item.product) if item.product else None,
    }


def parse_quantity(value) -> int:
    quantity = safe_int(value)
    if quantity is None:
        raise ValidationError("Invalid quantity")
    if quantity > MAX_INT:
        raise ValidationError("Quantity is too large")
    return quantity


class CartService:

    def get_cart(self, db: Session, user: User) -> Optional[Cart]:
        return db.query(Cart).options(
            selectinload(Cart.items).selectinload(CartItem.product).selectinload(Product.images),
        ).filter(Cart.user_id == user.id).first()

    def get_items(self, db: Session, user: User) -> List[CartItem]:
        """Cart items with product + images. Empty list when no cart exists yet."""
        cart = self.get_cart(db, user)
        if not cart:
            return []
        return list(cart.items)

    def get_or_create_cart_id(self, db: Session, user: User) -> str:
        """Atomic find-or-create: INSERT ... ON CONFLICT (user_id) DO NOTHING, then read."""
        insert = _insert_for(db)
        stmt = insert(Cart.__table__).values(id=new_id(), user_id=user.id)
        stmt = stmt.on_conflict_do_nothing(index_elements=[Cart.__table__.c.user_id])
        db.execute(stmt)
        return db.execute(
            select(Cart.id).where(Cart.user_id == user.id)
        ).scalar_one()

    def add_item(self, db: Session, user: User, product_id: str, quantity) -> CartItem:
        """
        Add `quantity` of a product. A repeated add increments the existing
        row instead of overwriting it. Stock is not checked.
        """
        if not product_id:
            raise ValidationError("Missing data")
        quantity = parse_quantity(quantity)
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        product = db.query(Product.id).filter(Product.id == product_id).first()
        if not product:
            raise NotFoundError("Product not found")

        cart_id = self.get_or_create_cart_id(db, user)

        insert = _insert_for(db)
        table = CartItem.__table__
        stmt = insert(table).values(
            id=new_id(), cart_id=cart_id, product_id=product_id, quantity=quantity,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.cart_id, table.c.product_id],
            set_={"quantity": table.c.quantity + stmt.excluded.quantity},
        )
        db.execute(stmt)
        db.expire_all()

        item = db.query(CartItem).filter(
            CartItem.cart_id == cart_id,
            CartItem.product_id == product_id,
        ).one()
        logger.info(f"Cart {cart_id}: product {product_id} now x{item.quantity}")
        return item

    def update_quantity(self, db: Session, item_id: str, quantity) -> CartItem:
        """Overwrite quantity. Values below 1 are ignored and the item is returned unchanged."""
        if not item_id:
            raise ValidationError("Missing item ID")
        quantity = parse_quantity(quantity)

        item = db.query(CartItem).filter(CartItem.id == item_id).first()
        if not item:
            raise NotFoundError("Cart item not found")
        if quantity < 1:
            return item

        item.quantity = quantity
        db.flush()
        return item

    def remove_item(self, db: Session, item_id: str) -> bool:
        """Delete an item. Returns False when it was already gone."""
        if not item_id:
            raise ValidationError("Missing item ID")
        deleted = db.query(CartItem).filter(CartItem.id == item_id).delete()
        db.flush()
        return bool(deleted)

    def clear_cart(self, db: Session, cart_id: str):
        """Remove all items from a cart."""
        db.query(CartItem).filter(CartItem.cart_id == cart_id).delete()
        db.flush()


# Singleton
cart_service = CartService()
