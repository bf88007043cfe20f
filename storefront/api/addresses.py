import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from postgrest.exceptions import APIError

from storefront.api.deps import check_owner, get_optional_user
from storefront.core.errors import describe
from storefront.db.supabase import get_admin_client
from storefront.models.schemas import AddressIn, provided_fields

logger = logging.getLogger(__name__)

router = APIRouter()

REQUIRED = ("user_id", "first_name", "last_name", "address_line1", "city", "state", "postal_code")


@router.get("")
def list_addresses(user_id: Optional[str] = None, db=Depends(get_admin_client), user=Depends(get_optional_user)):
    if not user_id:
        raise HTTPException(status_code=400, detail="User ID is required")
    check_owner(user, user_id)
    try:
        res = (
            db.table("shipping_addresses")
            .select("*")
            .eq("user_id", user_id)
            .order("is_default", desc=True)
            .order("created_at", desc=True)
            .execute()
        )
    except APIError as e:
        logger.error(f"Error fetching addresses: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch addresses")
    addresses = res.data or []
    return {"addresses": addresses, "count": len(addresses)}


@router.post("", status_code=201)
def create_address(payload: AddressIn, db=Depends(get_admin_client), user=Depends(get_optional_user)):
    if any(not getattr(payload, f) for f in REQUIRED):
        raise HTTPException(status_code=400, detail="Missing required fields")
    check_owner(user, payload.user_id)
    row = payload.model_dump(exclude={"id"})
    row["title"] = payload.title or "Home"
    row["country"] = payload.country or "India"
    row["is_default"] = bool(payload.is_default)
    try:
        res = db.table("shipping_addresses").insert(row).execute()
    except APIError as e:
        logger.error(f"Error creating address: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to create address")
    return {"address": res.data[0], "message": "Address created successfully"}


@router.put("")
def update_address(payload: AddressIn, db=Depends(get_admin_client), user=Depends(get_optional_user)):
    if not payload.id or not payload.user_id:
        raise HTTPException(status_code=400, detail="Address ID and User ID are required")
    check_owner(user, payload.user_id)
    fields = provided_fields(payload)
    fields.pop("id", None)
    fields.pop("user_id", None)
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")
    try:
        res = (
            db.table("shipping_addresses")
            .update(fields)
            .eq("id", payload.id)
            .eq("user_id", payload.user_id)
            .execute()
        )
    except APIError as e:
        logger.error(f"Error updating address: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to update address")
    if not res.data:
        raise HTTPException(status_code=404, detail="Address not found")
    return {"address": res.data[0], "message": "Address updated successfully"}


@router.delete("")
def delete_address(
    id: Optional[str] = None,
    user_id: Optional[str] = None,
    db=Depends(get_admin_client),
    user=Depends(get_optional_user),
):
    if not id or not user_id:
        raise HTTPException(status_code=400, detail="Address ID and User ID are required")
    check_owner(user, user_id)
    try:
        db.table("shipping_addresses").delete().eq("id", id).eq("user_id", user_id).execute()
    except APIError as e:
        logger.error(f"Error deleting address: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to delete address")
    return {"message": "Address deleted successfully"}
