"""
Catalog Module - API Routes
==============================
Endpoints:
  GET  /api/products       — search/filter products (newest first)
  GET  /api/products/{id}  — product detail with seller contact
  POST /api/products       — seller creates a product
  PUT  /api/products/{id}  — owning seller updates a product
  GET  /api/my-products    — products of the signed-in seller
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from config.database import get_db
from modules.auth.deps import require_user
from modules.catalog.service import product_service, product_to_dict


router = APIRouter(prefix="/api", tags=["catalog"])


@router.get("/products")
async def list_products(
    search: str = Query(None),
    minPrice: str = Query(None),
    maxPrice: str = Query(None),
    brand: str = Query(None),
    condition: str = Query(None),
    db: Session = Depends(get_db),
):
    products = product_service.list_products(db, {
        "text": search,
        "min_price": minPrice,
        "max_price": maxPrice,
        "brand": brand,
        "condition": condition,
    })
    return [product_to_dict(p, seller="display") for p in products]


@router.get("/products/{product_id}")
async def get_product(product_id: str, db: Session = Depends(get_db)):
    product = product_service.get_product(db, product_id)
    return product_to_dict(product, seller="contact")


@router.post("/products")
async def create_product(
    data: Dict[str, Any],
    seller=Depends(require_user),
    db: Session = Depends(get_db),
):
    product = product_service.create(db, seller, data)
    db.commit()
    db.refresh(product)
    return product_to_dict(product)


@router.put("/products/{product_id}")
async def update_product(
    product_id: str,
    data: Dict[str, Any],
    seller=Depends(require_user),
    db: Session = Depends(get_db),
):
    product = product_service.update(db, seller, product_id, data)
    db.commit()
    db.refresh(product)
    return product_to_dict(product)


@router.get("/my-products")
async def my_products(
    seller=Depends(require_user),
    db: Session = Depends(get_db),
):
    products = product_service.list_seller_products(db, seller)
    return [
        {**product_to_dict(p), "orderItemCount": len(p.order_items)}
        for p in products
    ]
