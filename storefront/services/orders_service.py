from datetime import datetime, timezone
from decimal import Decimal


ORDER_STATUSES = ("pending", "confirmed", "processing", "shipped", "delivered", "cancelled")
PAYMENT_STATUSES = ("pending", "paid", "failed", "refunded")

# statuses from which a customer may not cancel, with the reason shown to them
CANCEL_BLOCKED = {
    "cancelled": "Order is already cancelled",
    "delivered": "Cannot cancel a delivered order",
    "shipped": "Cannot cancel a shipped order. Please contact support for returns.",
}


class OrderStateError(Exception):
    pass


def check_cancellable(status: str) -> None:
    reason = CANCEL_BLOCKED.get(status)
    if reason:
        raise OrderStateError(reason)


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _address(customer, shipping) -> dict:
    return {
        "first_name": customer.firstName,
        "last_name": customer.lastName,
        "email": customer.email,
        "phone": customer.phone,
        "address": shipping.address,
        "city": shipping.city,
        "state": shipping.state,
        "postal_code": shipping.pincode,
        "country": shipping.country,
    }


def build_order_row(payload) -> dict:
    address = _address(payload.customer_info, payload.shipping_info)
    method = payload.payment_info.method
    return {
        "user_id": payload.user_id,
        "subtotal": payload.subtotal or 0,
        "shipping_cost": payload.shipping_cost or 0,
        "total_amount": payload.total_amount or 0,
        "payment_method": method,
        "payment_status": "pending" if method == "cod" else "paid",
        "shipping_address": address,
        "billing_address": dict(address),
    }


def build_order_items(order_id, cart_items) -> list:
    items = []
    for it in cart_items:
        price = Decimal(str(it.product.price))
        items.append({
            "order_id": order_id,
            "product_id": it.product.id,
            "product_name": it.product.name,
            "product_price": float(price),
            "quantity": it.quantity,
            "selected_color": it.selectedColor,
            "selected_size": it.selectedSize,
            "item_total": float(price * it.quantity),
        })
    return items


def sample_order(user_id: str) -> dict:
    return {
        "user_id": user_id,
        "order_number": f"TEST-{int(datetime.now(timezone.utc).timestamp() * 1000)}",
        "status": "pending",
        "subtotal": 100.00,
        "shipping_cost": 10.00,
        "tax_amount": 11.00,
        "total_amount": 121.00,
        "payment_method": "card",
        "payment_status": "pending",
        "shipping_address": {
            "name": "Test User",
            "address": "123 Test St",
            "city": "Test City",
            "state": "Test State",
            "postal_code": "12345",
        },
    }


def _amount(order) -> Decimal:
    value = order.get("total_amount")
    return Decimal(str(value)) if value is not None else Decimal(0)


def dashboard_stats(orders, users_count) -> dict:
    """Totals for the admin dashboard, computed over every order row."""
    revenue = sum((_amount(o) for o in orders), Decimal(0))
    return {
        "totalOrders": len(orders),
        "totalRevenue": float(revenue),
        "totalUsers": users_count or 0,
        "pendingOrders": sum(1 for o in orders if o.get("status") == "pending"),
    }


def status_breakdown(orders) -> dict:
    counts = {s: 0 for s in ORDER_STATUSES}
    for o in orders:
        if o.get("status") in counts:
            counts[o["status"]] += 1
    stats = {"total": len(orders)}
    stats.update(counts)
    stats["totalRevenue"] = float(sum((_amount(o) for o in orders), Decimal(0)))
    return stats
