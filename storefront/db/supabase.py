from fastapi import HTTPException
from supabase import Client, ClientOptions, create_client

from storefront.core.config import get_settings

_client = None
_admin_client = None


def get_client() -> Client:
    """Anon client, scoped by row-level security."""
    global _client
    if _client is None:
        settings = get_settings()
        if not settings.SUPABASE_URL or not settings.SUPABASE_ANON_KEY:
            raise HTTPException(status_code=500, detail="Supabase URL/Key not configured")
        _client = create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
    return _client


def get_admin_client() -> Client:
    """
    Service-role client. Bypasses row-level security, so only server-side
    handlers may use it. Raises a 500 when the service key is missing.
    """
    global _admin_client
    if _admin_client is None:
        settings = get_settings()
        if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
            raise HTTPException(status_code=500, detail="Service role not configured")
        _admin_client = create_client(
            settings.SUPABASE_URL,
            settings.SUPABASE_SERVICE_ROLE_KEY,
            options=ClientOptions(auto_refresh_token=False, persist_session=False),
        )
    return _admin_client


def get_user_client(access_token: str) -> Client:
    """Anon client acting as the signed-in user, so row-level security applies to them."""
    settings = get_settings()
    if not settings.SUPABASE_URL or not settings.SUPABASE_ANON_KEY:
        raise RuntimeError("Supabase URL/Key not configured. See .env")
    client = create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
    client.postgrest.auth(access_token)
    return client


def get_user_client_factory():
    return get_user_client
