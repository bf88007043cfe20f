from types import SimpleNamespace

from conftest import ADMIN_ID, CUSTOMER_ID, OTHER_ID, bearer


def test_create_profile(client, db):
    headers = bearer(OTHER_ID, "new@shopmail.in")
    res = client.post(
        "/api/auth/create-profile",
        json={"user_id": OTHER_ID, "email": "new@shopmail.in", "first_name": "Nia"},
        headers=headers,
    )
    assert res.status_code == 200
    body = res.json()
    assert body["action"] == "created"
    assert body["profile"]["role"] == "customer"
    assert body["profile"]["first_name"] == "Nia"


def test_existing_profile_is_updated(client, db, customer_headers):
    res = client.post(
        "/api/auth/create-profile",
        json={"user_id": CUSTOMER_ID, "email": "cust@shopmail.in", "phone": "12345"},
        headers=customer_headers,
    )
    body = res.json()
    assert body["action"] == "updated"
    assert body["profile"]["phone"] == "12345"
    assert body["profile"]["first_name"] == "Cy"


def test_create_profile_requires_ids(client):
    headers = bearer(OTHER_ID, "new@shopmail.in")
    res = client.post("/api/auth/create-profile", json={"user_id": OTHER_ID}, headers=headers)
    assert res.status_code == 400
    assert res.json() == {"error": "User ID and email are required"}


def test_create_profile_rejects_bad_email(client):
    res = client.post(
        "/api/auth/create-profile",
        json={"user_id": OTHER_ID, "email": "nope"},
        headers=bearer(OTHER_ID, "new@shopmail.in"),
    )
    assert res.status_code == 400


def test_backfill_profiles(client, db, admin_headers):
    db.auth.admin.users = [
        SimpleNamespace(id=CUSTOMER_ID, email="cust@shopmail.in", user_metadata={}),
        SimpleNamespace(id=OTHER_ID, email="admin.helper@shopmail.in", user_metadata={"first_name": "Hal"}),
    ]
    body = client.get("/api/auth/create-profile", headers=admin_headers).json()
    assert body["created"] == 1
    (profile,) = body["profiles"]
    assert profile["id"] == OTHER_ID
    assert profile["role"] == "customer"
    assert profile["first_name"] == "Hal"


def test_backfill_with_nothing_missing(client, db, admin_headers):
    db.auth.admin.users = [SimpleNamespace(id=CUSTOMER_ID, email="cust@shopmail.in", user_metadata={})]
    body = client.get("/api/auth/create-profile", headers=admin_headers).json()
    assert body == {"message": "All users already have profiles", "created": 0}


def test_create_profile_needs_session(client, db):
    res = client.post("/api/auth/create-profile", json={"user_id": OTHER_ID, "email": "mallory+admin@gmail.com"})
    assert res.status_code == 401
    assert [p["id"] for p in db.rows("user_profiles")] == [ADMIN_ID, CUSTOMER_ID]


def test_create_profile_for_another_user(client, db, customer_headers):
    res = client.post(
        "/api/auth/create-profile",
        json={"user_id": OTHER_ID, "email": "other@shopmail.in"},
        headers=customer_headers,
    )
    assert res.status_code == 403


def test_admin_looking_email_gets_customer_role(client):
    headers = bearer(OTHER_ID, "site.admin@shopmail.in")
    res = client.post(
        "/api/auth/create-profile",
        json={"user_id": OTHER_ID, "email": "site.admin@shopmail.in"},
        headers=headers,
    )
    assert res.json()["profile"]["role"] == "customer"
