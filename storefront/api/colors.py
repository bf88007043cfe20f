import logging

from fastapi import APIRouter, Depends, HTTPException
from postgrest.exceptions import APIError

from storefront.api.deps import get_admin_user, parse_id
from storefront.core.errors import describe, is_unique_violation
from storefront.db.supabase import get_admin_client, get_client
from storefront.models.schemas import ColorIn
from storefront.services.catalog import is_hex_color

logger = logging.getLogger(__name__)

router = APIRouter()


def _validated(payload: ColorIn):
    if not payload.name or not payload.name.strip() or not payload.value:
        raise HTTPException(status_code=400, detail="Name and color value are required")
    if not is_hex_color(payload.value):
        raise HTTPException(status_code=400, detail="Color value must be a valid hex code (e.g., #FF0000)")
    return {"name": payload.name.strip(), "value": payload.value.upper()}


@router.get("")
def list_colors(db=Depends(get_client)):
    try:
        res = db.table("colors").select("*").order("name").execute()
    except APIError as e:
        logger.error(f"Error fetching colors: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch colors")
    return {"colors": res.data}


@router.post("", status_code=201)
def create_color(payload: ColorIn, db=Depends(get_admin_client), admin=Depends(get_admin_user)):
    row = _validated(payload)
    try:
        res = db.table("colors").insert(row).execute()
    except APIError as e:
        if is_unique_violation(e):
            raise HTTPException(status_code=400, detail="Color name already exists")
        logger.error(f"Error creating color: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to create color")
    return {"color": res.data[0]}


@router.put("/{color_id}")
def update_color(color_id: str, payload: ColorIn, db=Depends(get_admin_client), admin=Depends(get_admin_user)):
    cid = parse_id(color_id, "color")
    row = _validated(payload)
    try:
        existing = db.table("colors").select("id").eq("name", row["name"]).neq("id", cid).limit(1).execute()
        if existing.data:
            raise HTTPException(status_code=400, detail="Color name already exists")
        res = db.table("colors").update(row).eq("id", cid).execute()
    except APIError as e:
        if is_unique_violation(e):
            raise HTTPException(status_code=400, detail="Color name already exists")
        logger.error(f"Error updating color {cid}: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to update color")
    if not res.data:
        raise HTTPException(status_code=404, detail="Color not found")
    return {"color": res.data[0]}


@router.delete("/{color_id}")
def delete_color(color_id: str, db=Depends(get_admin_client), admin=Depends(get_admin_user)):
    cid = parse_id(color_id, "color")
    try:
        in_use = db.table("product_colors").select("id").eq("color_id", cid).limit(1).execute()
        if in_use.data:
            raise HTTPException(status_code=400, detail="Cannot delete color that is being used by products")
        db.table("colors").delete().eq("id", cid).execute()
    except APIError as e:
        logger.error(f"Error deleting color {cid}: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to delete color")
    return {"message": "Color deleted successfully"}
