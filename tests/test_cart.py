"""Cart: merge-on-add, quantity rules, removal."""

from conftest import make_product
from modules.cart.models import Cart, CartItem


def _add(client, user, product, quantity):
    return client.post("/api/cart", json={
        "userExternalId": user.external_id,
        "productId": product.id,
        "quantity": quantity,
    })


def test_get_cart_without_cart_is_empty(client, buyer):
    r = client.get("/api/cart", params={"userExternalId": buyer.external_id})
    assert r.status_code == 200
    assert r.json() == {"items": []}


def test_get_cart_missing_user_id(client):
    r = client.get("/api/cart")
    assert r.status_code == 400
    assert r.json()["error"] == "Missing user ID"


def test_get_cart_unknown_user(client):
    r = client.get("/api/cart", params={"userExternalId": "ghost"})
    assert r.status_code == 404


def test_add_same_product_twice_accumulates_into_one_row(client, db, buyer, seller):
    product = make_product(db, seller, "Brake pads", 100)

    assert _add(client, buyer, product, 2).status_code == 200
    r = _add(client, buyer, product, 3)
    assert r.status_code == 200
    assert r.json()["quantity"] == 5

    db.expire_all()
    assert db.query(Cart).filter(Cart.user_id == buyer.id).count() == 1
    items = db.query(CartItem).all()
    assert len(items) == 1
    assert items[0].quantity == 5


def test_cart_lists_items_with_product(client, db, buyer, seller):
    product = make_product(db, seller, "Brake pads", 100, images=["https://img/p.jpg"])
    _add(client, buyer, product, 1)

    r = client.get("/api/cart", params={"userExternalId": buyer.external_id})
    items = r.json()["items"]
    assert len(items) == 1
    assert items[0]["product"]["name"] == "Brake pads"
    assert items[0]["product"]["images"][0]["imageUrl"] == "https://img/p.jpg"


def test_add_missing_data(client, buyer):
    r = client.post("/api/cart", json={"userExternalId": buyer.external_id})
    assert r.status_code == 400
    assert r.json()["error"] == "Missing data"


def test_add_unknown_product(client, buyer):
    r = client.post("/api/cart", json={
        "userExternalId": buyer.external_id, "productId": "nope", "quantity": 1,
    })
    assert r.status_code == 404


def test_add_negative_quantity_rejected(client, db, buyer, seller):
    product = make_product(db, seller, "Brake pads", 100)
    r = _add(client, buyer, product, -2)
    assert r.status_code == 400


def test_add_oversized_quantity_rejected(client, db, buyer, seller):
    product = make_product(db, seller, "Brake pads", 100)
    r = _add(client, buyer, product, 10 ** 30)
    assert r.status_code == 400
    assert r.json()["error"] == "Quantity is too large"
    assert db.query(CartItem).count() == 0


def test_update_quantity_overwrites(client, db, buyer, seller):
    product = make_product(db, seller, "Brake pads", 100)
    item_id = _add(client, buyer, product, 2).json()["itemId"]

    r = client.patch("/api/cart/item", json={"itemId": item_id, "quantity": 7})
    assert r.status_code == 200
    assert r.json()["quantity"] == 7


def test_update_quantity_below_one_is_ignored(client, db, buyer, seller):
    product = make_product(db, seller, "Brake pads", 100)
    item_id = _add(client, buyer, product, 2).json()["itemId"]

    r = client.patch("/api/cart/item", json={"itemId": item_id, "quantity": 0})
    assert r.status_code == 200
    assert r.json()["quantity"] == 2


def test_update_missing_item(client):
    r = client.patch("/api/cart/item", json={"itemId": "nope", "quantity": 2})
    assert r.status_code == 404


def test_remove_item_is_idempotent(client, db, buyer, seller):
    product = make_product(db, seller, "Brake pads", 100)
    item_id = _add(client, buyer, product, 1).json()["itemId"]

    first = client.request("DELETE", "/api/cart/item", json={"itemId": item_id})
    assert first.status_code == 200
    assert first.json()["removed"] is True

    second = client.request("DELETE", "/api/cart/item", json={"itemId": item_id})
    assert second.status_code == 200
    assert second.json()["removed"] is False
