import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from postgrest.exceptions import APIError

from storefront.core.config import Settings, get_settings
from storefront.core.errors import describe
from storefront.core.security import TokenError, decode_token
from storefront.db.supabase import get_admin_client

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    settings: Settings = Depends(get_settings),
) -> Optional[dict]:
    if credentials is None:
        return None
    try:
        payload = decode_token(credentials.credentials, settings.SUPABASE_JWT_SECRET)
    except TokenError as e:
        logger.warning(f"Rejected access token: {e}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return {
        "id": payload["sub"],
        "email": payload.get("email"),
        "expires_at": payload.get("exp"),
        "access_token": credentials.credentials,
    }


def get_current_user(user: Optional[dict] = Depends(get_optional_user)) -> dict:
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return user


def get_admin_user(user: dict = Depends(get_current_user), db=Depends(get_admin_client)) -> dict:
    try:
        res = db.table("user_profiles").select("id, email, role").eq("id", user["id"]).limit(1).execute()
    except APIError as e:
        logger.error(f"Role lookup for {user['id']} failed: {describe(e)}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to verify admin role")
    if not res.data or res.data[0].get("role") != "admin":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin role required")
    return {**user, "profile": res.data[0]}


def require_debug_endpoints(settings: Settings = Depends(get_settings)) -> None:
    if not settings.DEBUG_ENDPOINTS:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not available in production")


def parse_id(value: str, resource: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid {resource} ID")


def check_owner(user: Optional[dict], user_id: str) -> None:
    """A signed-in caller may only act on their own rows."""
    if user is not None and user["id"] != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
