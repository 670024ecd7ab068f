from __future__ import annotations

from typing import Any

from apps.restaurants.serializers import serialize_restaurant_summary
from .models import Order, OrderItem, OrderStatusChange


def serialize_order_item(item: OrderItem) -> dict[str, Any]:
    return {
        "id": str(item.id),
        "menu_item_id": str(item.menu_item_id) if item.menu_item_id else None,
        "name": item.name,
        "quantity": item.quantity,
        "price": str(item.price),
    }


def serialize_order(order: Order) -> dict[str, Any]:
    return {
        "id": str(order.id),
        "customer_id": str(order.customer_id),
        "restaurant_id": str(order.restaurant_id),
        "restaurant": serialize_restaurant_summary(order.restaurant),
        "driver_id": str(order.driver_id) if order.driver_id else None,
        "status": order.status,
        "items": [serialize_order_item(i) for i in order.items.all()],
        "subtotal": str(order.subtotal),
        "delivery_fee": str(order.delivery_fee),
        "total": str(order.total),
        "delivery_address": order.delivery_address,
        "customer_phone": order.customer_phone,
        "notes": order.notes or None,
        "created_at": order.created_at.isoformat(),
        "updated_at": order.updated_at.isoformat(),
    }


def serialize_status_change(change: OrderStatusChange) -> dict[str, Any]:
    return {
        "sequence": change.sequence,
        "status": change.status,
        "source": change.source,
        "note": change.note,
        "at": change.created_at.isoformat(),
    }
