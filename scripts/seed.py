"""
SpareLink - Development Database Seeder
=========================================
Seeds users, pickup locations and a small parts catalog, then prints an
identity token per user so the API and pages can be tried locally.

Usage:
    python scripts/seed.py          # Seed (idempotent)
    python scripts/seed.py --reset  # Drop all data and reseed

Seeded:
  1. Users (admin, two sellers, two buyers)
  2. Pickup locations
  3. Products with images
"""

import sys
import os
from decimal import Decimal

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.database import SessionLocal, Base, engine
from common.security import create_identity_token
from modules.user.models import User, UserRole
from modules.catalog.models import Product, ProductImage
from modules.cart.models import Cart, CartItem  # noqa: F401
from modules.pickup.models import PickupLocation
from modules.order.models import Order, OrderItem  # noqa: F401


USERS = [
    {"external_id": "user_admin", "first_name": "Ada", "last_name": "Admin",
     "email": "admin@sparelink.local", "role": UserRole.ADMIN.value},
    {"external_id": "user_seller_1", "first_name": "Sam", "last_name": "Otieno",
     "email": "sam@autoparts.example.com", "phone": "+254700000001",
     "location": "Nairobi", "role": UserRole.SELLER.value},
    {"external_id": "user_seller_2", "first_name": "Grace", "last_name": "Wanjiru",
     "email": "grace@partshub.example.com", "phone": "+254700000002",
     "location": "Mombasa", "role": UserRole.SELLER.value},
    {"external_id": "user_buyer_1", "first_name": "Jane", "last_name": "Doe",
     "email": "jane.doe@example.com", "role": UserRole.BUYER.value},
    {"external_id": "user_buyer_2", "first_name": "John", "last_name": "Smith",
     "email": "john.smith@example.com", "role": UserRole.BUYER.value},
]

LOCATIONS = [
    {"name": "CBD Collection Point", "address": "Moi Avenue 12", "city": "Nairobi", "contact": "+254711000000"},
    {"name": "Nyali Depot", "address": "Links Road 4", "city": "Mombasa"},
]

PRODUCTS = [
    # seller external id, fields, image urls
    ("user_seller_1", {
        "name": "Brake pads (front)", "description": "Ceramic pads, set of 4",
        "price": Decimal("3500.00"), "condition": "new", "category": "brakes",
        "brand": "Toyota", "model": "Corolla", "stock": 12,
    }, ["https://picsum.photos/seed/brakes/600/400"]),
    ("user_seller_1", {
        "name": "Alternator 12V", "description": "Tested, 90A output",
        "price": Decimal("9800.00"), "condition": "used", "category": "electrical",
        "brand": "Nissan", "model": "Note", "stock": 3,
    }, ["https://picsum.photos/seed/alternator/600/400"]),
    ("user_seller_2", {
        "name": "Side mirror (left)", "description": "Manual adjust, unpainted",
        "price": Decimal("2400.00"), "condition": "refurbished", "category": "body",
        "brand": "Mazda", "model": "Demio", "stock": 5,
    }, []),
    ("user_seller_2", {
        "name": "Oil filter", "description": None,
        "price": Decimal("650.00"), "condition": "new", "category": "engine",
        "brand": "Toyota", "model": "Hilux", "stock": 40,
    }, ["https://picsum.photos/seed/oilfilter/600/400", "https://picsum.photos/seed/oilfilter2/600/400"]),
]


def ensure_tables():
    """Create all tables if they don't exist (safe to call multiple times)."""
    print("[0/3] Ensuring all tables exist...")
    Base.metadata.create_all(bind=engine)
    print("  + All tables OK\n")


def seed():
    db = SessionLocal()
    try:
        print("=" * 50)
        print("  SpareLink — Development Seeder")
        print("=" * 50)

        ensure_tables()

        # ==========================================
        # 1. Users
        # ==========================================
        print("[1/3] Users")
        users = {}
        for data in USERS:
            existing = db.query(User).filter(User.external_id == data["external_id"]).first()
            if existing:
                users[data["external_id"]] = existing
                print(f"  = exists: {data['external_id']}")
                continue
            user = User(**data, has_completed_onboarding=True)
            db.add(user)
            users[data["external_id"]] = user
            print(f"  + {data['role']}: {data['email']}")
        db.flush()

        # ==========================================
        # 2. Pickup Locations
        # ==========================================
        print("\n[2/3] Pickup Locations")
        for data in LOCATIONS:
            if db.query(PickupLocation).filter(PickupLocation.name == data["name"]).first():
                print(f"  = exists: {data['name']}")
                continue
            db.add(PickupLocation(**data))
            print(f"  + {data['name']} ({data['city']})")
        db.flush()

        # ==========================================
        # 3. Products
        # ==========================================
        print("\n[3/3] Products")
        for seller_ext, fields, images in PRODUCTS:
            seller = users[seller_ext]
            exists = db.query(Product).filter(
                Product.seller_id == seller.id, Product.name == fields["name"],
            ).first()
            if exists:
                print(f"  = exists: {fields['name']}")
                continue
            product = Product(seller_id=seller.id, **fields)
            for pos, url in enumerate(images):
                product.images.append(ProductImage(image_url=url, position=pos))
            db.add(product)
            print(f"  + {fields['name']} ({fields['price']})")

        db.commit()

        print("\n" + "=" * 50)
        print("  Seed complete. Identity tokens (Authorization: Bearer ...):")
        print("=" * 50)
        for ext_id in users:
            print(f"  {ext_id:<16} {create_identity_token(ext_id)}")

    except Exception as e:
        db.rollback()
        print(f"\nSeed failed: {e}")
        import traceback
        traceback.print_exc()
        raise
    finally:
        db.close()


def reset_and_seed():
    """Drop all tables and recreate + seed."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    print("All tables recreated")
    seed()


if __name__ == "__main__":
    if "--reset" in sys.argv:
        confirm = input("This will DELETE ALL DATA. Type 'yes' to confirm: ")
        if confirm.strip().lower() == "yes":
            reset_and_seed()
        else:
            print("Aborted.")
    else:
        seed()
