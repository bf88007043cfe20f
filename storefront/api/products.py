import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from postgrest.exceptions import APIError

from storefront.api.deps import get_admin_user, parse_id
from storefront.core.errors import describe, is_not_found
from storefront.db.supabase import get_admin_client, get_client
from storefront.models.schemas import ProductIn, provided_fields
from storefront.services.catalog import clean_sku, join_rows, parse_int, parse_price

logger = logging.getLogger(__name__)

router = APIRouter()

COLOR_JOIN = "id, color_id, available, colors:color_id(id, name, value)"
SIZE_JOIN = "id, size_id, available, sizes:size_id(id, name, display_order)"
PRODUCT_WITH_RELATIONS = f"*, product_colors:product_colors({COLOR_JOIN}), product_sizes:product_sizes({SIZE_JOIN})"
PRODUCT_SUMMARY = "id, name, price, images, category, stock_quantity, is_featured, is_active, created_at, updated_at"


def _sku_taken(db, sku: str, exclude_id=None) -> bool:
    q = db.table("products").select("id").eq("sku", sku)
    if exclude_id is not None:
        q = q.neq("id", exclude_id)
    return bool(q.limit(1).execute().data)


def _replace_links(db, product_id: int, table: str, key: str, ids, replace: bool):
    # join rows are best effort: the product itself is already saved
    try:
        if replace:
            db.table(table).delete().eq("product_id", product_id).execute()
        if ids:
            db.table(table).insert(join_rows(product_id, key, ids)).execute()
    except APIError as e:
        logger.error(f"Error saving {table} for product {product_id}: {describe(e)}")


@router.get("")
def list_products(
    category: Optional[str] = None,
    featured: Optional[str] = None,
    active: str = "true",
    page: int = 0,
    limit: int = 0,
    include_relations: str = "true",
    db=Depends(get_client),
):
    page = max(page, 0)
    columns = PRODUCT_SUMMARY if include_relations == "false" else PRODUCT_WITH_RELATIONS
    q = db.table("products").select(columns, count="exact").eq("is_active", active != "false")
    if category:
        q = q.eq("category", category)
    if featured == "true":
        q = q.eq("is_featured", True)
    q = q.order("created_at", desc=True)
    if limit > 0:
        offset = page * limit
        q = q.range(offset, offset + limit - 1)
    try:
        res = q.execute()
    except APIError as e:
        logger.error(f"Error fetching products: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch products")
    products = res.data or []
    return {
        "products": products,
        "totalCount": res.count,
        "page": page,
        "limit": limit,
        "hasMore": len(products) == limit if limit > 0 else False,
    }


@router.post("", status_code=201)
def create_product(payload: ProductIn, db=Depends(get_admin_client), admin=Depends(get_admin_user)):
    if not payload.name or payload.price in (None, "") or not payload.category:
        raise HTTPException(status_code=400, detail="Name, price, and category are required")
    price = parse_price(payload.price)
    if price is None or price <= 0:
        raise HTTPException(status_code=400, detail="Price must be greater than 0")
    stock = parse_int(payload.stock_quantity)
    if stock is None:
        raise HTTPException(status_code=400, detail="Stock quantity must be a number")
    sku = clean_sku(payload.sku)

    try:
        if sku and _sku_taken(db, sku):
            raise HTTPException(status_code=400, detail="SKU already exists")
        res = db.table("products").insert({
            "name": payload.name,
            "description": payload.description,
            "price": price,
            "images": payload.images or [],
            "category": payload.category,
            "stock_quantity": stock,
            "sku": sku,
            "is_featured": bool(payload.is_featured),
            "is_active": payload.is_active is not False,
        }).execute()
    except APIError as e:
        logger.error(f"Error creating product: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to create product")

    product = res.data[0]
    _replace_links(db, product["id"], "product_colors", "color_id", payload.selectedColors, replace=False)
    _replace_links(db, product["id"], "product_sizes", "size_id", payload.selectedSizes, replace=False)
    return {"product": product}


@router.get("/{product_id}")
def get_product(product_id: str, db=Depends(get_client)):
    pid = parse_id(product_id, "product")
    try:
        res = db.table("products").select(PRODUCT_WITH_RELATIONS).eq("id", pid).single().execute()
    except APIError as e:
        if is_not_found(e):
            raise HTTPException(status_code=404, detail="Product not found")
        logger.error(f"Error fetching product {pid}: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch product")
    return {"product": res.data}


@router.put("/{product_id}")
def update_product(product_id: str, payload: ProductIn, db=Depends(get_admin_client), admin=Depends(get_admin_user)):
    pid = parse_id(product_id, "product")
    fields = provided_fields(payload)
    colors = fields.pop("selectedColors", None)
    sizes = fields.pop("selectedSizes", None)

    if "name" in fields and not (fields["name"] or "").strip():
        raise HTTPException(status_code=400, detail="Name cannot be empty")
    if fields.get("price") not in (None, ""):
        price = parse_price(fields["price"])
        if price is None or price <= 0:
            raise HTTPException(status_code=400, detail="Price must be greater than 0")
        fields["price"] = price
    if "stock_quantity" in fields:
        stock = parse_int(fields["stock_quantity"])
        if stock is None:
            raise HTTPException(status_code=400, detail="Stock quantity must be a number")
        fields["stock_quantity"] = stock
    if "sku" in fields:
        fields["sku"] = clean_sku(fields["sku"])

    try:
        if fields.get("sku") and _sku_taken(db, fields["sku"], exclude_id=pid):
            raise HTTPException(status_code=400, detail="SKU already exists for another product")
        if fields:
            res = db.table("products").update(fields).eq("id", pid).execute()
        else:
            res = db.table("products").select("*").eq("id", pid).limit(1).execute()
    except APIError as e:
        logger.error(f"Error updating product {pid}: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to update product")
    if not res.data:
        raise HTTPException(status_code=404, detail="Product not found")

    if colors is not None:
        _replace_links(db, pid, "product_colors", "color_id", colors, replace=True)
    if sizes is not None:
        _replace_links(db, pid, "product_sizes", "size_id", sizes, replace=True)
    return {"product": res.data[0]}


@router.delete("/{product_id}")
def delete_product(product_id: str, db=Depends(get_admin_client), admin=Depends(get_admin_user)):
    pid = parse_id(product_id, "product")
    try:
        db.table("products").delete().eq("id", pid).execute()
    except APIError as e:
        logger.error(f"Error deleting product {pid}: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to delete product")
    return {"message": "Product deleted successfully"}


@router.get("/{product_id}/colors")
def list_product_colors(product_id: str, db=Depends(get_client)):
    pid = parse_id(product_id, "product")
    try:
        res = db.table("product_colors").select(COLOR_JOIN).eq("product_id", pid).execute()
    except APIError as e:
        logger.error(f"Error fetching product colors: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch product colors")
    return {"colors": res.data}


@router.get("/{product_id}/sizes")
def list_product_sizes(product_id: str, db=Depends(get_client)):
    pid = parse_id(product_id, "product")
    try:
        res = db.table("product_sizes").select(SIZE_JOIN).eq("product_id", pid).execute()
    except APIError as e:
        logger.error(f"Error fetching product sizes: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch product sizes")
    return {"sizes": res.data}
