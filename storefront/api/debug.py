"""
Diagnostic endpoints for setting up a store: session/profile dumps, role
promotion and catalog seeding. Mounted only behind `require_debug_endpoints`,
so they answer 403 unless DEBUG_ENDPOINTS is switched on.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from postgrest.exceptions import APIError

from storefront.api.deps import get_current_user, get_optional_user
from storefront.core.config import Settings, get_settings
from storefront.core.errors import describe
from storefront.db.supabase import get_admin_client, get_user_client_factory
from storefront.models.schemas import ConfirmIn, EmailLookup, MakeAdminIn
from storefront.services.catalog import join_rows
from storefront.services.samples import CATALOG, STARTER_PRODUCTS

logger = logging.getLogger(__name__)

router = APIRouter()


def _profile(db, user_id: str):
    """(profile, error message) for a user id."""
    try:
        res = db.table("user_profiles").select("*").eq("id", user_id).limit(1).execute()
    except APIError as e:
        return None, e.message
    if not res.data:
        return None, "Profile not found"
    return res.data[0], None


def _profile_by_email(db, email: str):
    try:
        res = db.table("user_profiles").select("*").eq("email", email).limit(1).execute()
    except APIError as e:
        return None, e.message
    return (res.data[0], None) if res.data else (None, None)


def _status(value) -> str:
    return "Set ✓" if value else "Missing ✗"


@router.get("/env")
def env(settings: Settings = Depends(get_settings)):
    return {
        "env_check": {
            "SUPABASE_URL": _status(settings.SUPABASE_URL),
            "SUPABASE_ANON_KEY": _status(settings.SUPABASE_ANON_KEY),
            "SUPABASE_SERVICE_ROLE_KEY": _status(settings.SUPABASE_SERVICE_ROLE_KEY),
            "SUPABASE_JWT_SECRET": _status(settings.SUPABASE_JWT_SECRET),
        },
        "url_length": len(settings.SUPABASE_URL or ""),
        "anon_length": len(settings.SUPABASE_ANON_KEY or ""),
        "service_length": len(settings.SUPABASE_SERVICE_ROLE_KEY or ""),
        "environment": settings.ENVIRONMENT,
    }


@router.get("/auth-status")
def auth_status(
    request: Request,
    user: Optional[dict] = Depends(get_optional_user),
    db=Depends(get_admin_client),
    settings: Settings = Depends(get_settings),
):
    profile, profile_error = (None, None)
    if user:
        profile, profile_error = _profile(db, user["id"])
    now = datetime.now(timezone.utc)
    expires_at = user.get("expires_at") if user else None
    profile = profile or {}
    return {
        "timestamp": now.isoformat(),
        "environment": {
            "supabaseUrl": bool(settings.SUPABASE_URL),
            "supabaseAnonKey": bool(settings.SUPABASE_ANON_KEY),
            "environment": settings.ENVIRONMENT,
        },
        "session": {
            "exists": user is not None,
            "userId": user["id"] if user else None,
            "email": user["email"] if user else None,
            "expiresAt": expires_at,
            "isExpired": expires_at < now.timestamp() if expires_at else None,
        },
        "profile": {
            "exists": bool(profile),
            "id": profile.get("id"),
            "email": profile.get("email"),
            "role": profile.get("role"),
            "firstName": profile.get("first_name"),
            "lastName": profile.get("last_name"),
        },
        "profileError": profile_error,
        "cookies": {
            "hasAuthCookie": "sb-access-token" in request.cookies,
            "hasRefreshCookie": "sb-refresh-token" in request.cookies,
        },
        "headers": {
            "userAgent": request.headers.get("user-agent"),
            "origin": request.headers.get("origin"),
            "referer": request.headers.get("referer"),
        },
    }


@router.get("/user-role")
def user_role(user: Optional[dict] = Depends(get_optional_user), db=Depends(get_admin_client)):
    if user is None:
        return {
            "authenticated": False,
            "user": None,
            "profile": None,
            "isAdmin": False,
            "message": "No user session found",
        }
    summary = {"id": user["id"], "email": user["email"]}
    profile, error = _profile(db, user["id"])
    if profile is None:
        return {
            "authenticated": True,
            "user": summary,
            "profile": None,
            "profileError": error,
            "isAdmin": False,
            "message": "User authenticated but profile not found",
        }
    return {
        "authenticated": True,
        "user": summary,
        "profile": profile,
        "isAdmin": profile.get("role") == "admin",
        "message": f"User authenticated with role: {profile.get('role') or 'none'}",
    }


@router.get("/test-auth")
def test_auth(request: Request, user: Optional[dict] = Depends(get_optional_user)):
    cookie = request.headers.get("cookie")
    return {
        "session_check": {
            "session": {"user_id": user["id"], "expires_at": user["expires_at"]} if user else None,
        },
        "request_info": {
            "method": request.method,
            "url": str(request.url),
            "has_cookie_header": cookie is not None,
            "has_auth_header": request.headers.get("authorization") is not None,
            "cookie_length": len(cookie or ""),
        },
    }


@router.post("/test-auth")
def test_auth_by_email(payload: EmailLookup, db=Depends(get_admin_client)):
    if not payload.email:
        raise HTTPException(status_code=400, detail="Email is required for this test")
    profile, error = _profile_by_email(db, payload.email)
    role = profile.get("role") if profile else None
    return {
        "success": True,
        "email": payload.email,
        "profile": profile,
        "isAdmin": role == "admin",
        "error": error,
        "message": f"Direct database lookup for {payload.email}: {role or 'not found'}",
    }


@router.post("/check-admin-by-email")
def check_admin_by_email(payload: EmailLookup, db=Depends(get_admin_client)):
    if not payload.email:
        raise HTTPException(status_code=400, detail="Email is required")
    profile, error = _profile_by_email(db, payload.email)
    role = profile.get("role") if profile else None
    return {
        "success": True,
        "email": payload.email,
        "found": profile is not None,
        "profile": profile,
        "isAdmin": role == "admin",
        "role": role,
        "error": error,
    }


@router.post("/refresh-profile")
def refresh_profile(
    user: dict = Depends(get_current_user),
    db=Depends(get_admin_client),
    user_client=Depends(get_user_client_factory),
):
    """Compare the profile seen through the service role with the one row-level security lets the user read."""
    admin_profile, admin_error = _profile(db, user["id"])
    regular_profile, regular_error = _profile(user_client(user["access_token"]), user["id"])
    admin_role = admin_profile.get("role") if admin_profile else None
    regular_role = regular_profile.get("role") if regular_profile else None
    return {
        "success": True,
        "user_id": user["id"],
        "email": user["email"],
        "admin_client_result": {"profile": admin_profile, "error": admin_error},
        "regular_client_result": {"profile": regular_profile, "error": regular_error},
        "comparison": {
            "same_role": admin_role == regular_role,
            "admin_role": admin_role,
            "regular_role": regular_role,
        },
    }


@router.post("/make-admin")
def make_admin(payload: MakeAdminIn, user: dict = Depends(get_current_user), db=Depends(get_admin_client)):
    if not payload.email:
        raise HTTPException(status_code=400, detail="Email is required")
    if payload.confirm != "YES_MAKE_ADMIN":
        raise HTTPException(
            status_code=400,
            detail='Confirmation required. Send { "email": "your@email.com", "confirm": "YES_MAKE_ADMIN" }',
        )
    if payload.email != user["email"]:
        raise HTTPException(status_code=403, detail="Can only make yourself admin")
    try:
        res = db.table("user_profiles").update({"role": "admin"}).eq("email", payload.email).execute()
    except APIError as e:
        logger.error(f"Make admin failed for {payload.email}: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to make user admin")
    if not res.data:
        raise HTTPException(status_code=404, detail="User not found with that email")
    logger.warning(f"User {payload.email} promoted to admin via debug endpoint")
    return {"success": True, "message": f"User {payload.email} has been made an admin", "profile": res.data[0]}


@router.get("/categories")
def categories_summary(db=Depends(get_admin_client)):
    try:
        categories = db.table("categories").select("*").order("name").execute().data or []
        products = db.table("products").select("id, name, category, is_active").order("category").execute().data or []
    except APIError as e:
        logger.error(f"Error loading category summary: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch categories")
    product_categories = sorted({p["category"] for p in products if p.get("category")})
    return {
        "categories": categories,
        "products": products,
        "productCategories": product_categories,
        "summary": {
            "totalCategories": len(categories),
            "totalProducts": len(products),
            "uniqueProductCategories": len(product_categories),
            "activeProducts": sum(1 for p in products if p.get("is_active")),
        },
    }


@router.post("/add-sample-products")
def add_sample_products(db=Depends(get_admin_client), user: dict = Depends(get_current_user)):
    try:
        res = db.table("products").insert(STARTER_PRODUCTS).execute()
    except APIError as e:
        logger.error(f"Error inserting sample products: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to insert sample products")
    return {"message": "Sample products added successfully", "products": res.data}


@router.post("/populate-products")
def populate_products(payload: ConfirmIn, db=Depends(get_admin_client), user: dict = Depends(get_current_user)):
    if payload.confirm != "YES_POPULATE":
        raise HTTPException(status_code=400, detail='Confirmation required. Send { "confirm": "YES_POPULATE" }')
    try:
        existing = db.table("products").select("id").limit(1).execute()
    except APIError as e:
        logger.error(f"Error checking products: {describe(e)}")
        raise HTTPException(status_code=500, detail="Internal server error")
    if existing.data:
        raise HTTPException(
            status_code=400,
            detail="Products already exist in database. Use clear endpoint first if needed.",
        )

    created, errors = [], []
    for fields, colors, sizes in CATALOG:
        try:
            product = db.table("products").insert(fields).execute().data[0]
        except APIError as e:
            errors.append(f"Failed to create {fields['name']}: {e.message}")
            continue
        for table, key, ids in (("product_colors", "color_id", colors), ("product_sizes", "size_id", sizes)):
            try:
                db.table(table).insert(join_rows(product["id"], key, ids)).execute()
            except APIError as e:
                errors.append(f"Failed to add {table} for {fields['name']}: {e.message}")
        created.append(product)

    return {
        "message": f"Successfully created {len(created)} products",
        "products": created,
        "errors": errors or None,
    }


@router.delete("/populate-products")
def clear_products(payload: ConfirmIn = Body(...), db=Depends(get_admin_client), user: dict = Depends(get_current_user)):
    if payload.confirm != "YES_DELETE_ALL":
        raise HTTPException(status_code=400, detail='Confirmation required. Send { "confirm": "YES_DELETE_ALL" }')
    try:
        # product_colors / product_sizes rows cascade
        db.table("products").delete().neq("id", 0).execute()
    except APIError as e:
        logger.error(f"Error deleting products: {describe(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to delete products: {e.message}")
    return {"message": "All products deleted successfully"}
