from __future__ import annotations

from typing import Any

from .models import Restaurant


def serialize_restaurant(restaurant: Restaurant) -> dict[str, Any]:
    return {
        "id": str(restaurant.id),
        "user_id": str(restaurant.owner_id),
        "name": restaurant.name,
        "description": restaurant.description,
        "image": restaurant.image,
        "town": restaurant.town,
        "address": restaurant.address,
        "phone": restaurant.phone,
        "rating": float(restaurant.rating),
        "delivery_time": restaurant.delivery_time,
        "delivery_fee": str(restaurant.delivery_fee),
        "min_order": str(restaurant.min_order),
        "categories": list(restaurant.categories or []),
        "is_active": restaurant.is_active,
        "created_at": restaurant.created_at.isoformat(),
        "updated_at": restaurant.updated_at.isoformat(),
    }


def serialize_restaurant_summary(restaurant: Restaurant) -> dict[str, Any]:
    return {"id": str(restaurant.id), "name": restaurant.name, "phone": restaurant.phone, "address": restaurant.address}
