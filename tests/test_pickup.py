"""Pickup locations."""

from conftest import auth


def test_create_and_list_locations(client, admin):
    r = client.post("/api/pickup-locations", headers=auth(admin.external_id), json={
        "name": "CBD Collection Point", "address": "Moi Avenue 12", "city": "Nairobi",
    })
    assert r.status_code == 200
    assert r.json()["contact"] is None

    client.post("/api/pickup-locations", headers=auth(admin.external_id), json={
        "name": "Nyali Depot", "address": "Links Road 4", "city": "Mombasa", "contact": "0711",
    })

    r = client.get("/api/pickup-locations")
    assert [l["name"] for l in r.json()] == ["Nyali Depot", "CBD Collection Point"]


def test_create_location_with_external_id_in_body(client, admin):
    r = client.post("/api/pickup-locations", json={
        "userExternalId": admin.external_id,
        "name": "Depot", "address": "Road 1", "city": "Kisumu",
    })
    assert r.status_code == 200


def test_create_location_requires_identity(client):
    r = client.post("/api/pickup-locations", json={"name": "Depot", "address": "Road 1", "city": "Kisumu"})
    assert r.status_code == 401


def test_create_location_requires_fields(client, admin):
    r = client.post("/api/pickup-locations", headers=auth(admin.external_id), json={"name": "Depot"})
    assert r.status_code == 400
    assert r.json()["error"] == "Name, address and city are required"
