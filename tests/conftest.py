"""
Shared fixtures: in-memory SQLite app, users with identity tokens, seeded catalog.
"""

import os
import sys

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["IDENTITY_SECRET_KEY"] = "test-secret"
os.environ["EMAIL_API_KEY"] = ""
os.environ.setdefault("LOG_LEVEL", "WARNING")

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, ROOT)
os.chdir(ROOT)  # templates/ and static/ are resolved relative to the project root

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from config.database import Base, engine, SessionLocal
from common.security import create_identity_token
from main import app
from modules.catalog.models import Product, ProductImage
from modules.pickup.models import PickupLocation
from modules.user.models import User, UserRole


@pytest.fixture(autouse=True)
def fresh_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    """Session for arranging and inspecting data. Commit after arranging."""
    session = SessionLocal()
    yield session
    session.close()


def auth(external_id: str) -> dict:
    return {"Authorization": f"Bearer {create_identity_token(external_id)}"}


def make_user(db, external_id: str, role: str = UserRole.BUYER.value, **fields) -> User:
    user = User(external_id=external_id, role=role, has_completed_onboarding=True, **fields)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_product(db, seller: User, name: str, price, images=(), **fields) -> Product:
    fields.setdefault("condition", "new")
    product = Product(name=name, price=Decimal(str(price)), seller_id=seller.id, **fields)
    for pos, url in enumerate(images):
        product.images.append(ProductImage(image_url=url, position=pos))
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def make_location(db, name: str = "CBD Collection Point", city: str = "Nairobi") -> PickupLocation:
    loc = PickupLocation(name=name, address="Moi Avenue 12", city=city)
    db.add(loc)
    db.commit()
    db.refresh(loc)
    return loc


@pytest.fixture
def seller(db):
    return make_user(db, "user_seller", UserRole.SELLER.value,
                     first_name="Sam", last_name="Otieno", email="sam@parts.example.com",
                     phone="+254700000001", location="Nairobi")


@pytest.fixture
def buyer(db):
    return make_user(db, "user_buyer", first_name="Jane", last_name="Doe",
                     email="jane.doe@example.com")


@pytest.fixture
def admin(db):
    return make_user(db, "user_admin", UserRole.ADMIN.value,
                     first_name="Ada", last_name="Admin", email="admin@sparelink.local")


@pytest.fixture
def location(db):
    return make_location(db)
