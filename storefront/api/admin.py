import logging
import math
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from postgrest.exceptions import APIError

from storefront.api.deps import get_admin_user
from storefront.core.errors import describe, is_not_found
from storefront.db.supabase import get_admin_client
from storefront.models.schemas import OrderUpdate, SampleOrderIn, provided_fields
from storefront.services.orders_service import (
    ORDER_STATUSES,
    PAYMENT_STATUSES,
    dashboard_stats,
    sample_order,
    status_breakdown,
)

logger = logging.getLogger(__name__)

# every admin route requires an admin profile
router = APIRouter(dependencies=[Depends(get_admin_user)])

ADMIN_ORDER_COLUMNS = (
    "id, user_id, order_number, status, subtotal, shipping_cost, tax_amount, total_amount, "
    "payment_method, payment_status, shipping_address, billing_address, notes, created_at, updated_at, "
    "order_items(id, product_id, product_name, product_price, quantity, selected_color, selected_size, item_total), "
    "user_profiles!orders_user_id_fkey(id, first_name, last_name, email)"
)
SORTABLE = ("created_at", "total_amount", "status")


@router.get("/stats")
def stats(db=Depends(get_admin_client)):
    logger.info("Loading dashboard stats")
    try:
        orders = db.table("orders").select("total_amount, status").execute()
        users = db.table("user_profiles").select("id", count="exact", head=True).execute()
    except APIError as e:
        logger.error(f"Error loading dashboard stats: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to load dashboard statistics")
    result = dashboard_stats(orders.data or [], users.count)
    logger.info(f"Dashboard stats: {result}")
    return {"stats": result}


@router.get("/users")
def list_users(db=Depends(get_admin_client)):
    try:
        res = db.table("user_profiles").select("*").order("created_at", desc=True).execute()
    except APIError as e:
        logger.error(f"Error loading users: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to load users")
    return {"users": res.data or []}


@router.get("/orders")
def list_orders(
    page: int = 1,
    limit: int = 20,
    status: Optional[str] = None,
    payment_status: Optional[str] = None,
    search: Optional[str] = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    db=Depends(get_admin_client),
):
    page = max(page, 1)
    limit = max(limit, 1)
    offset = (page - 1) * limit
    sort_column = sort_by if sort_by in SORTABLE else "created_at"

    q = db.table("orders").select(ADMIN_ORDER_COLUMNS, count="exact")
    if status and status != "all":
        q = q.eq("status", status)
    if payment_status and payment_status != "all":
        q = q.eq("payment_status", payment_status)
    if search and search.strip():
        q = q.ilike("order_number", f"%{search.strip()}%")
    q = q.order(sort_column, desc=sort_order != "asc").range(offset, offset + limit - 1)

    try:
        res = q.execute()
        totals = db.table("orders").select("total_amount, status").execute()
    except APIError as e:
        logger.error(f"Error loading orders: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to load orders")

    count = res.count or 0
    return {
        "orders": res.data or [],
        "count": count,
        "stats": status_breakdown(totals.data or []),
        "pagination": {
            "page": page,
            "limit": limit,
            "total": count,
            "totalPages": math.ceil(count / limit),
            "hasNext": page * limit < count,
            "hasPrev": page > 1,
        },
    }


@router.post("/orders")
def create_test_order(payload: SampleOrderIn, db=Depends(get_admin_client)):
    if not payload.user_id:
        raise HTTPException(status_code=400, detail="User ID is required")
    try:
        res = db.table("orders").insert(sample_order(payload.user_id)).execute()
    except APIError as e:
        logger.error(f"Error creating test order: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to create test order")
    return {"order": res.data[0]}


@router.get("/orders/{order_id}")
def get_order(order_id: str, db=Depends(get_admin_client)):
    try:
        res = db.table("orders").select("*, order_items(*)").eq("id", order_id).single().execute()
    except APIError as e:
        if is_not_found(e):
            raise HTTPException(status_code=404, detail="Order not found")
        logger.error(f"Error loading order {order_id}: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to load order")
    order = {**res.data, "user_profile": None}

    if order.get("user_id"):
        try:
            profile = (
                db.table("user_profiles")
                .select("id, first_name, last_name, email")
                .eq("id", order["user_id"])
                .limit(1)
                .execute()
            )
            order["user_profile"] = profile.data[0] if profile.data else None
        except APIError as e:
            logger.warning(f"Profile lookup for order {order_id} failed: {describe(e)}")
    return {"order": order}


@router.patch("/orders/{order_id}")
def update_order(order_id: str, payload: OrderUpdate, db=Depends(get_admin_client)):
    fields = provided_fields(payload)
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")
    if "status" in fields and fields["status"] not in ORDER_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid order status")
    if "payment_status" in fields and fields["payment_status"] not in PAYMENT_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid payment status")
    try:
        res = db.table("orders").update(fields).eq("id", order_id).execute()
    except APIError as e:
        logger.error(f"Error updating order {order_id}: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to update order")
    if not res.data:
        raise HTTPException(status_code=404, detail="Order not found")
    return {"order": res.data[0], "message": "Order updated successfully"}


@router.delete("/orders/{order_id}")
def delete_order(order_id: str, db=Depends(get_admin_client)):
    try:
        db.table("order_items").delete().eq("order_id", order_id).execute()
        db.table("orders").delete().eq("id", order_id).execute()
    except APIError as e:
        logger.error(f"Error deleting order {order_id}: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to delete order")
    return {"message": "Order deleted successfully"}
