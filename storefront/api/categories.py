import logging

from fastapi import APIRouter, Depends, HTTPException
from postgrest.exceptions import APIError

from storefront.api.deps import get_admin_user, parse_id
from storefront.core.errors import describe, is_unique_violation
from storefront.db.supabase import get_admin_client, get_client
from storefront.models.schemas import CategoryIn
from storefront.services.catalog import slug_from_name

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
def list_categories(db=Depends(get_client)):
    try:
        res = db.table("categories").select("*").order("name").execute()
    except APIError as e:
        logger.error(f"Error fetching categories: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch categories")
    return {"categories": res.data}


@router.post("", status_code=201)
def create_category(payload: CategoryIn, db=Depends(get_admin_client), admin=Depends(get_admin_user)):
    if not payload.name or not payload.slug:
        raise HTTPException(status_code=400, detail="Name and slug are required")
    row = {"name": payload.name, "slug": payload.slug, "description": payload.description}
    try:
        res = db.table("categories").insert(row).execute()
    except APIError as e:
        if is_unique_violation(e):
            raise HTTPException(status_code=400, detail="Category name or slug already exists")
        logger.error(f"Error creating category: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to create category")
    return {"category": res.data[0]}


@router.put("/{category_id}")
def update_category(category_id: str, payload: CategoryIn, db=Depends(get_admin_client), admin=Depends(get_admin_user)):
    cid = parse_id(category_id, "category")
    if not payload.name or not payload.name.strip():
        raise HTTPException(status_code=400, detail="Category name is required")
    name = payload.name.strip()
    description = (payload.description or "").strip() or None
    row = {"name": name, "slug": slug_from_name(name), "description": description}
    try:
        existing = db.table("categories").select("id").eq("name", name).neq("id", cid).limit(1).execute()
        if existing.data:
            raise HTTPException(status_code=400, detail="Category name already exists")
        res = db.table("categories").update(row).eq("id", cid).execute()
    except APIError as e:
        if is_unique_violation(e):
            raise HTTPException(status_code=400, detail="Category name or slug already exists")
        logger.error(f"Error updating category {cid}: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to update category")
    if not res.data:
        raise HTTPException(status_code=404, detail="Category not found")
    return {"category": res.data[0]}


@router.delete("/{category_id}")
def delete_category(category_id: str, db=Depends(get_admin_client), admin=Depends(get_admin_user)):
    cid = parse_id(category_id, "category")
    try:
        found = db.table("categories").select("id, name, slug").eq("id", cid).limit(1).execute()
        if not found.data:
            raise HTTPException(status_code=404, detail="Category not found")
        category = found.data[0]
        # products reference a category by id, name or slug
        refs = [str(cid), category["name"], category["slug"]]
        in_use = db.table("products").select("id").in_("category", refs).limit(1).execute()
        if in_use.data:
            raise HTTPException(status_code=400, detail="Cannot delete category that is being used by products")
        db.table("categories").delete().eq("id", cid).execute()
    except APIError as e:
        logger.error(f"Error deleting category {cid}: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to delete category")
    return {"message": "Category deleted successfully"}
