import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from postgrest.exceptions import APIError

from storefront.api.deps import check_owner, get_current_user, get_optional_user
from storefront.core.errors import describe, is_not_found
from storefront.db.supabase import get_admin_client
from storefront.models.schemas import OrderCancel, OrderCreate
from storefront.services.orders_service import (
    OrderStateError,
    build_order_items,
    build_order_row,
    check_cancellable,
    now_iso,
)

logger = logging.getLogger(__name__)

router = APIRouter()

ORDER_SUMMARY = "id, order_number, status, total_amount, payment_method, payment_status, created_at"
ORDER_ITEMS = "order_items(id, product_name, product_price, quantity, selected_color, selected_size, item_total)"


@router.post("", status_code=201)
def create_order(payload: OrderCreate, db=Depends(get_admin_client), user=Depends(get_optional_user)):
    required = (payload.user_id, payload.cart_items, payload.customer_info, payload.shipping_info, payload.payment_info)
    if any(v is None for v in required) or not payload.user_id:
        raise HTTPException(status_code=400, detail="Missing required fields")
    check_owner(user, payload.user_id)

    try:
        res = db.table("orders").insert(build_order_row(payload)).execute()
    except APIError as e:
        logger.error(f"Error creating order: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to create order")
    order = res.data[0]

    items = build_order_items(order["id"], payload.cart_items)
    if items:
        try:
            db.table("order_items").insert(items).execute()
        except APIError as e:
            logger.error(f"Error creating order items for order {order['id']}: {describe(e)}")
            # roll back the order so it is not left without items
            try:
                db.table("orders").delete().eq("id", order["id"]).execute()
            except APIError as rollback_err:
                logger.error(f"Rollback of order {order['id']} failed: {describe(rollback_err)}")
            raise HTTPException(status_code=500, detail="Failed to create order items")

    return {"order": {**order, "order_items": items}}


@router.get("")
def list_orders(
    user_id: Optional[str] = None,
    page: int = 0,
    limit: int = 10,
    include_items: str = "true",
    db=Depends(get_admin_client),
    user=Depends(get_optional_user),
):
    if not user_id:
        raise HTTPException(status_code=400, detail="User ID is required")
    check_owner(user, user_id)
    page = max(page, 0)
    limit = max(limit, 1)

    columns = ORDER_SUMMARY if include_items == "false" else f"{ORDER_SUMMARY}, {ORDER_ITEMS}"
    offset = page * limit
    try:
        counted = db.table("orders").select("id", count="exact", head=True).eq("user_id", user_id).execute()
        res = (
            db.table("orders")
            .select(columns)
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
    except APIError as e:
        logger.error(f"Error fetching orders for {user_id}: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch orders")
    orders = res.data or []
    return {
        "orders": orders,
        "totalCount": counted.count or 0,
        "page": page,
        "limit": limit,
        "hasMore": len(orders) == limit,
    }


@router.post("/{order_id}/cancel")
def cancel_order(
    order_id: str,
    payload: Optional[OrderCancel] = Body(None),
    user=Depends(get_current_user),
    db=Depends(get_admin_client),
):
    """
    Cancel one of the caller's own orders. The caller is the verified session
    user; a user_id in the body is only accepted when it names that user.
    """
    if payload is not None and payload.user_id and payload.user_id != user["id"]:
        raise HTTPException(status_code=403, detail="Cannot cancel another user's order")
    uid = user["id"]

    try:
        found = (
            db.table("orders")
            .select("id, user_id, status, payment_status")
            .eq("id", order_id)
            .eq("user_id", uid)
            .single()
            .execute()
        )
    except APIError as e:
        if is_not_found(e):
            raise HTTPException(status_code=404, detail="Order not found or access denied")
        logger.error(f"Error cancelling order {order_id}: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to cancel order")
    order = found.data

    try:
        check_cancellable(order["status"])
    except OrderStateError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        res = (
            db.table("orders")
            .update({"status": "cancelled", "updated_at": now_iso()})
            .eq("id", order_id)
            .eq("user_id", uid)
            .eq("status", order["status"])
            .execute()
        )
    except APIError as e:
        logger.error(f"Error cancelling order {order_id}: {describe(e)}")
        raise HTTPException(status_code=500, detail="Failed to cancel order")
    if not res.data:
        # status moved between the read and the write
        raise HTTPException(status_code=400, detail="Order can no longer be cancelled")

    logger.info(f"Order {order_id} cancelled by {uid}")
    return {"message": "Order cancelled successfully", "order": res.data[0]}
