"""
Catalog Module - Service Layer
================================
Product listing/search, detail, seller-owned create and update.
Numeric input (price, stock) is parsed strictly: anything that is not a
finite, non-negative number is rejected instead of stored.
"""

import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import or_, func
from sqlalchemy.orm import Session, joinedload, selectinload

from common.exceptions import ValidationError, NotFoundError
from common.helpers import safe_int, safe_decimal, like_escape, MAX_INT
from modules.catalog.models import Product, ProductImage
from modules.user.models import User

logger = logging.getLogger("sparelink.catalog")

_TEXT_FIELDS = ("name", "description", "brand", "model", "category")

# Numeric(12, 2)
MAX_PRICE = Decimal("9999999999.99")


# ==========================================
# Input parsing
# ==========================================

def parse_price(value, field: str = "price") -> Decimal:
    """Strict parse: finite decimal in [0, MAX_PRICE] or ValidationError."""
    price = safe_decimal(value)
    if price is None:
        raise ValidationError(f"Invalid {field}")
    if price < 0:
        raise ValidationError(f"{field} must not be negative")
    if price > MAX_PRICE:
        raise ValidationError(f"{field} is too large")
    return price.quantize(Decimal("0.01"))


def parse_stock(value) -> int:
    stock = safe_int(value)
    if stock is None:
        raise ValidationError("Invalid stock")
    if stock < 0:
        raise ValidationError("stock must not be negative")
    if stock > MAX_INT:
        raise ValidationError("stock is too large")
    return stock


def parse_images(value) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(u, str) and u.strip() for u in value):
        raise ValidationError("images must be a list of URLs")
    return [u.strip() for u in value]


def _optional_price(value, field: str) -> Optional[Decimal]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_price(value, field)


# ==========================================
# Serialization
# ==========================================

def image_to_dict(img: ProductImage) -> dict:
    return {"id": img.id, "imageUrl": img.image_url, "productId": img.product_id}


def product_to_dict(product: Product, seller: str = None) -> dict:
    """
    JSON shape of a product.
    seller: None (omit), "display" (name only) or "contact" (full details).
    """
    data = {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": float(product.price) if product.price is not None else None,
        "condition": product.condition,
        "category": product.category,
        "brand": product.brand,
        "model": product.model,
        "stock": product.stock,
        "sellerId": product.seller_id,
        "createdAt": product.created_at.isoformat() if product.created_at else None,
        "images": [image_to_dict(img) for img in product.images],
    }
    if seller == "display" and product.seller:
        data["seller"] = product.seller.display()
    elif seller == "contact" and product.seller:
        data["seller"] = product.seller.contact()
    return data


# ==========================================
# Product Service
# ==========================================

class ProductService:

    def list_products(self, db: Session, filters: dict = None) -> List[Product]:
        """
        Newest-first product list.

        filters keys (all optional):
            text: case-insensitive match on name/description/brand/model/category
            min_price, max_price: inclusive bounds
            brand, condition: case-insensitive exact match
        """
        filters = filters or {}
        q = db.query(Product).options(
            selectinload(Product.images),
            joinedload(Product.seller),
        )

        text = (filters.get("text") or "").strip()
        if text:
            pattern = f"%{like_escape(text)}%"
            q = q.filter(or_(*[
                getattr(Product, f).ilike(pattern, escape="\\") for f in _TEXT_FIELDS
            ]))

        min_price = _optional_price(filters.get("min_price"), "minPrice")
        if min_price is not None:
            q = q.filter(Product.price >= min_price)

        max_price = _optional_price(filters.get("max_price"), "maxPrice")
        if max_price is not None:
            q = q.filter(Product.price <= max_price)

        brand = (filters.get("brand") or "").strip()
        if brand:
            q = q.filter(func.lower(Product.brand) == brand.lower())

        condition = (filters.get("condition") or "").strip()
        if condition:
            q = q.filter(func.lower(Product.condition) == condition.lower())

        return q.order_by(Product.created_at.desc()).all()

    def get_by_id(self, db: Session, product_id: str) -> Optional[Product]:
        return db.query(Product).options(
            selectinload(Product.images),
            joinedload(Product.seller),
        ).filter(Product.id == product_id).first()

    def get_product(self, db: Session, product_id: str) -> Product:
        product = self.get_by_id(db, product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def list_seller_products(self, db: Session, seller: User) -> List[Product]:
        return db.query(Product).options(
            selectinload(Product.images),
            selectinload(Product.order_items),
        ).filter(
            Product.seller_id == seller.id,
        ).order_by(Product.created_at.desc()).all()

    def create(self, db: Session, seller: User, data: dict) -> Product:
        name = (data.get("name") or "").strip()
        condition = (data.get("condition") or "").strip()
        raw_price = data.get("price")
        if not name or not condition or raw_price is None or raw_price == "":
            raise ValidationError("Missing required fields")

        product = Product(
            name=name,
            description=data.get("description"),
            price=parse_price(raw_price),
            condition=condition,
            category=data.get("category"),
            brand=data.get("brand"),
            model=data.get("model"),
            stock=parse_stock(data["stock"]) if data.get("stock") not in (None, "") else 0,
            seller_id=seller.id,
        )
        for position, url in enumerate(parse_images(data.get("images"))):
            product.images.append(ProductImage(image_url=url, position=position))

        db.add(product)
        db.flush()
        logger.info(f"Seller {seller.id} created product {product.id}")
        return product

    def update(self, db: Session, seller: User, product_id: str, data: dict) -> Product:
        """
        Update a product owned by `seller`. The ownership check is part of the
        lookup itself, so a foreign product is indistinguishable from a missing one.
        A list under `images` replaces every existing image.
        """
        p = db.query(Product).filter(
            Product.id == product_id,
            Product.seller_id == seller.id,
        ).first()
        if not p:
            raise NotFoundError("Product not found")

        if "name" in data:
            name = (data.get("name") or "").strip()
            if not name:
                raise ValidationError("name must not be empty")
            p.name = name
        if "condition" in data:
            condition = (data.get("condition") or "").strip()
            if not condition:
                raise ValidationError("condition must not be empty")
            p.condition = condition
        if "price" in data:
            p.price = parse_price(data["price"])
        if "stock" in data:
            p.stock = parse_stock(data["stock"])
        for field in ("description", "category", "brand", "model"):
            if field in data:
                setattr(p, field, data[field])

        images = data.get("images")
        if isinstance(images, list):
            urls = parse_images(images)
            db.query(ProductImage).filter(ProductImage.product_id == p.id).delete()
            for position, url in enumerate(urls):
                db.add(ProductImage(image_url=url, position=position, product_id=p.id))

        db.flush()
        db.expire(p, ["images"])
        logger.info(f"Seller {seller.id} updated product {p.id}")
        return p


# Singleton
product_service = ProductService()
