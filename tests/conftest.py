import time

import pytest
from fastapi.testclient import TestClient

from fakes import FakeSupabase
from storefront.core.config import Settings, get_settings
from storefront.core.security import create_token
from storefront.db.supabase import get_admin_client, get_client, get_user_client_factory
from storefront.main import app

JWT_SECRET = "test-jwt-secret-with-enough-length-for-hs256"

ADMIN_ID = "11111111-1111-1111-1111-111111111111"
CUSTOMER_ID = "22222222-2222-2222-2222-222222222222"
OTHER_ID = "33333333-3333-3333-3333-333333333333"


def bearer(user_id: str, email: str, expires_in: int = 3600) -> dict:
    token = create_token(user_id, email, JWT_SECRET, int(time.time()) + expires_in)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def settings():
    s = Settings()
    s.SUPABASE_URL = "https://example.supabase.co"
    s.SUPABASE_ANON_KEY = "anon-key"
    s.SUPABASE_SERVICE_ROLE_KEY = "service-key"
    s.SUPABASE_JWT_SECRET = JWT_SECRET
    s.DEBUG_ENDPOINTS = True
    s.ENVIRONMENT = "development"
    return s


@pytest.fixture
def db():
    fake = FakeSupabase()
    fake.seed(
        "user_profiles",
        {"id": ADMIN_ID, "email": "owner@shopmail.in", "role": "admin", "first_name": "Ada", "last_name": "Owner"},
        {"id": CUSTOMER_ID, "email": "cust@shopmail.in", "role": "customer", "first_name": "Cy", "last_name": "Buyer"},
    )
    return fake


@pytest.fixture
def client(db, settings):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_client] = lambda: db
    app.dependency_overrides[get_admin_client] = lambda: db
    app.dependency_overrides[get_user_client_factory] = lambda: (lambda token: db)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return bearer(ADMIN_ID, "owner@shopmail.in")


@pytest.fixture
def customer_headers():
    return bearer(CUSTOMER_ID, "cust@shopmail.in")
