import logging

from fastapi import APIRouter, Depends, HTTPException
from postgrest.exceptions import APIError

from storefront.api.deps import check_owner, get_admin_user, get_current_user
from storefront.core.errors import describe
from storefront.db.supabase import get_admin_client
from storefront.models.schemas import ProfileIn

logger = logging.getLogger(__name__)

router = APIRouter()


def new_profile(user_id: str, email: str, metadata=None, **fields) -> dict:
    metadata = metadata or {}
    return {
        "id": user_id,
        "email": email or "",
        "first_name": fields.get("first_name") or metadata.get("first_name") or "",
        "last_name": fields.get("last_name") or metadata.get("last_name") or "",
        "phone": fields.get("phone") or metadata.get("phone") or "",
        # admin is granted only through make-admin or the database
        "role": "customer",
    }


@router.post("/create-profile")
def create_profile(payload: ProfileIn, db=Depends(get_admin_client), user=Depends(get_current_user)):
    if not payload.user_id or not payload.email:
        raise HTTPException(status_code=400, detail="User ID and email are required")
    check_owner(user, payload.user_id)

    try:
        found = db.table("user_profiles").select("*").eq("id", payload.user_id).limit(1).execute()
    except APIError as e:
        logger.error(f"Error looking up profile {payload.user_id}: {describe(e)}")
        raise HTTPException(status_code=500, detail="Internal server error")

    if found.data:
        existing = found.data[0]
        changes = {
            "first_name": payload.first_name or existing.get("first_name"),
            "last_name": payload.last_name or existing.get("last_name"),
            "phone": payload.phone or existing.get("phone"),
        }
        try:
            res = db.table("user_profiles").update(changes).eq("id", payload.user_id).execute()
        except APIError as e:
            logger.error(f"Error updating profile: {describe(e)}")
            raise HTTPException(status_code=500, detail="Failed to update profile")
        return {"profile": res.data[0], "action": "updated"}

    row = new_profile(
        payload.user_id,
        str(payload.email),
        first_name=payload.first_name,
        last_name=payload.last_name,
        phone=payload.phone,
    )
    try:
        res = db.table("user_profiles").insert(row).execute()
    except APIError as e:
        logger.error(f"Error creating profile: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to create profile")
    return {"profile": res.data[0], "action": "created"}


@router.get("/create-profile")
def backfill_profiles(db=Depends(get_admin_client), admin=Depends(get_admin_user)):
    """Create a profile for every auth user that does not have one yet."""
    try:
        auth_users = db.auth.admin.list_users()
    except Exception as e:
        logger.error(f"Error fetching auth users: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch auth users")

    try:
        existing = db.table("user_profiles").select("id").execute()
    except APIError as e:
        logger.error(f"Error fetching profiles: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch profiles")

    have = {p["id"] for p in existing.data or []}
    missing = [u for u in auth_users if u.id not in have]
    if not missing:
        return {"message": "All users already have profiles", "created": 0}

    rows = [new_profile(u.id, u.email, u.user_metadata) for u in missing]
    try:
        res = db.table("user_profiles").insert(rows).execute()
    except APIError as e:
        logger.error(f"Error creating profiles: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to create profiles")
    created = res.data or []
    logger.info(f"Backfilled {len(created)} user profiles")
    return {"message": "Successfully created missing profiles", "created": len(created), "profiles": created}
