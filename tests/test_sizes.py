"""Sizes API: normalisation, uniqueness and delete protection."""

import pytest


def test_list_sizes_ordered_by_display_order(client, db):
    db.seed("sizes", {"name": "L", "display_order": 3}, {"name": "S", "display_order": 1}, {"name": "M", "display_order": 2})
    res = client.get("/api/sizes")
    assert res.status_code == 200
    assert [s["name"] for s in res.json()["sizes"]] == ["S", "M", "L"]


def test_create_size_normalises_name_and_order(client, admin_headers):
    res = client.post("/api/sizes", json={"name": "  m ", "display_order": "2"}, headers=admin_headers)
    assert res.status_code == 201
    size = res.json()["size"]
    assert size["name"] == "M"
    assert size["display_order"] == 2


def test_create_size_rejects_duplicate_in_any_case(client, admin_headers):
    client.post("/api/sizes", json={"name": "  m ", "display_order": "2"}, headers=admin_headers)
    res = client.post("/api/sizes", json={"name": "m"}, headers=admin_headers)
    assert res.status_code == 400
    assert res.json() == {"error": "Size name already exists"}


@pytest.mark.parametrize(
    "body, message",
    [
        ({}, "Size name is required"),
        ({"name": "   "}, "Size name is required"),
        ({"name": "XL", "display_order": "first"}, "Display order must be a number"),
    ],
)
def test_create_size_validation(client, admin_headers, body, message):
    res = client.post("/api/sizes", json=body, headers=admin_headers)
    assert res.status_code == 400
    assert res.json()["error"] == message


def test_create_size_defaults_display_order_to_zero(client, admin_headers):
    res = client.post("/api/sizes", json={"name": "xs"}, headers=admin_headers)
    assert res.status_code == 201
    assert res.json()["size"]["display_order"] == 0


def test_create_size_requires_admin(client, customer_headers):
    assert client.post("/api/sizes", json={"name": "XL"}).status_code == 401
    res = client.post("/api/sizes", json={"name": "XL"}, headers=customer_headers)
    assert res.status_code == 403
    assert res.json() == {"error": "Admin role required"}


def test_create_size_unexpected_database_error(client, db, admin_headers):
    db.fail("sizes", "insert")
    res = client.post("/api/sizes", json={"name": "XL"}, headers=admin_headers)
    assert res.status_code == 500
    assert res.json() == {"error": "Failed to create size"}


def test_update_size(client, db, admin_headers):
    (size,) = db.seed("sizes", {"name": "S", "display_order": 1})
    res = client.put(f"/api/sizes/{size['id']}", json={"name": " s ", "display_order": 5}, headers=admin_headers)
    assert res.status_code == 200
    assert res.json()["size"]["display_order"] == 5


def test_update_size_name_clash(client, db, admin_headers):
    small, medium = db.seed("sizes", {"name": "S", "display_order": 1}, {"name": "M", "display_order": 2})
    res = client.put(f"/api/sizes/{medium['id']}", json={"name": "s"}, headers=admin_headers)
    assert res.status_code == 400
    assert res.json()["error"] == "Size name already exists"


def test_update_missing_size(client, admin_headers):
    res = client.put("/api/sizes/999", json={"name": "XXL"}, headers=admin_headers)
    assert res.status_code == 404
    assert res.json() == {"error": "Size not found"}


def test_update_size_bad_id(client, admin_headers):
    res = client.put("/api/sizes/abc", json={"name": "XXL"}, headers=admin_headers)
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid size ID"}


def test_delete_size_in_use_is_refused(client, db, admin_headers):
    (size,) = db.seed("sizes", {"name": "M", "display_order": 2})
    db.seed("product_sizes", {"product_id": 1, "size_id": size["id"], "available": True})
    res = client.delete(f"/api/sizes/{size['id']}", headers=admin_headers)
    assert res.status_code == 400
    assert res.json() == {"error": "Cannot delete size that is being used by products"}
    assert len(db.rows("sizes")) == 1


def test_delete_unused_size(client, db, admin_headers):
    (size,) = db.seed("sizes", {"name": "M", "display_order": 2})
    res = client.delete(f"/api/sizes/{size['id']}", headers=admin_headers)
    assert res.status_code == 200
    assert res.json() == {"message": "Size deleted successfully"}
    assert db.rows("sizes") == []
