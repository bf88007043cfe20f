import logging

from fastapi import APIRouter, Depends, HTTPException
from postgrest.exceptions import APIError

from storefront.api.deps import get_admin_user, parse_id
from storefront.core.errors import describe, is_unique_violation
from storefront.db.supabase import get_admin_client, get_client
from storefront.models.schemas import SizeIn
from storefront.services.catalog import normalize_size_name, parse_int

logger = logging.getLogger(__name__)

router = APIRouter()


def _validated(payload: SizeIn):
    if not payload.name or not payload.name.strip():
        raise HTTPException(status_code=400, detail="Size name is required")
    display_order = parse_int(payload.display_order)
    if display_order is None:
        raise HTTPException(status_code=400, detail="Display order must be a number")
    return normalize_size_name(payload.name), display_order


def _name_taken(db, name: str, exclude_id=None) -> bool:
    q = db.table("sizes").select("id").eq("name", name)
    if exclude_id is not None:
        q = q.neq("id", exclude_id)
    return bool(q.limit(1).execute().data)


@router.get("")
def list_sizes(db=Depends(get_client)):
    try:
        res = db.table("sizes").select("*").order("display_order").execute()
    except APIError as e:
        logger.error(f"Error fetching sizes: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch sizes")
    return {"sizes": res.data}


@router.post("", status_code=201)
def create_size(payload: SizeIn, db=Depends(get_admin_client), admin=Depends(get_admin_user)):
    name, display_order = _validated(payload)
    try:
        if _name_taken(db, name):
            raise HTTPException(status_code=400, detail="Size name already exists")
        res = db.table("sizes").insert({"name": name, "display_order": display_order}).execute()
    except APIError as e:
        if is_unique_violation(e):
            raise HTTPException(status_code=400, detail="Size name already exists")
        logger.error(f"Error creating size: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to create size")
    return {"size": res.data[0]}


@router.put("/{size_id}")
def update_size(size_id: str, payload: SizeIn, db=Depends(get_admin_client), admin=Depends(get_admin_user)):
    sid = parse_id(size_id, "size")
    name, display_order = _validated(payload)
    try:
        if _name_taken(db, name, exclude_id=sid):
            raise HTTPException(status_code=400, detail="Size name already exists")
        res = db.table("sizes").update({"name": name, "display_order": display_order}).eq("id", sid).execute()
    except APIError as e:
        if is_unique_violation(e):
            raise HTTPException(status_code=400, detail="Size name already exists")
        logger.error(f"Error updating size {sid}: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to update size")
    if not res.data:
        raise HTTPException(status_code=404, detail="Size not found")
    return {"size": res.data[0]}


@router.delete("/{size_id}")
def delete_size(size_id: str, db=Depends(get_admin_client), admin=Depends(get_admin_user)):
    sid = parse_id(size_id, "size")
    try:
        in_use = db.table("product_sizes").select("id").eq("size_id", sid).limit(1).execute()
        if in_use.data:
            raise HTTPException(status_code=400, detail="Cannot delete size that is being used by products")
        db.table("sizes").delete().eq("id", sid).execute()
    except APIError as e:
        logger.error(f"Error deleting size {sid}: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to delete size")
    return {"message": "Size deleted successfully"}
