from conftest import CUSTOMER_ID, OTHER_ID

NEW_ADDRESS = {
    "user_id": CUSTOMER_ID,
    "first_name": "Cy",
    "last_name": "Buyer",
    "address_line1": "1 Main Rd",
    "city": "Pune",
    "state": "MH",
    "postal_code": "411001",
}


def test_create_address_defaults(client, customer_headers):
    res = client.post("/api/addresses", json=NEW_ADDRESS, headers=customer_headers)
    assert res.status_code == 201
    address = res.json()["address"]
    assert address["title"] == "Home"
    assert address["country"] == "India"
    assert address["is_default"] is False


def test_create_address_missing_fields(client):
    res = client.post("/api/addresses", json={**NEW_ADDRESS, "city": ""})
    assert res.status_code == 400
    assert res.json() == {"error": "Missing required fields"}


def test_list_addresses_default_first(client, db, customer_headers):
    db.seed(
        "shipping_addresses",
        {**NEW_ADDRESS, "title": "Office", "is_default": False},
        {**NEW_ADDRESS, "title": "Home", "is_default": True},
        {**NEW_ADDRESS, "user_id": OTHER_ID, "title": "Elsewhere", "is_default": True},
    )
    body = client.get("/api/addresses", params={"user_id": CUSTOMER_ID}, headers=customer_headers).json()
    assert body["count"] == 2
    assert [a["title"] for a in body["addresses"]] == ["Home", "Office"]


def test_list_other_users_addresses(client, customer_headers):
    res = client.get("/api/addresses", params={"user_id": OTHER_ID}, headers=customer_headers)
    assert res.status_code == 403
    assert res.json() == {"error": "Access denied"}


def test_update_address(client, db, customer_headers):
    (address,) = db.seed("shipping_addresses", {**NEW_ADDRESS, "title": "Home", "is_default": False})
    res = client.put(
        "/api/addresses",
        json={"id": address["id"], "user_id": CUSTOMER_ID, "city": "Mumbai"},
        headers=customer_headers,
    )
    assert res.status_code == 200
    assert res.json()["address"]["city"] == "Mumbai"
    assert res.json()["address"]["title"] == "Home"


def test_update_address_needs_ids(client):
    res = client.put("/api/addresses", json={"city": "Mumbai"})
    assert res.status_code == 400
    assert res.json() == {"error": "Address ID and User ID are required"}


def test_update_missing_address(client, customer_headers):
    res = client.put("/api/addresses", json={"id": 9, "user_id": CUSTOMER_ID, "city": "Goa"}, headers=customer_headers)
    assert res.status_code == 404


def test_delete_address(client, db, customer_headers):
    (address,) = db.seed("shipping_addresses", {**NEW_ADDRESS, "is_default": False})
    res = client.delete("/api/addresses", params={"id": address["id"], "user_id": CUSTOMER_ID}, headers=customer_headers)
    assert res.json() == {"message": "Address deleted successfully"}
    assert db.rows("shipping_addresses") == []
