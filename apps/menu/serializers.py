from __future__ import annotations

from typing import Any

from .models import MenuItem


def serialize_menu_item(item: MenuItem) -> dict[str, Any]:
    return {
        "id": str(item.id),
        "restaurant_id": str(item.restaurant_id),
        "name": item.name,
        "description": item.description,
        "category": item.category,
        "price": str(item.price),
        "image": item.image,
        "available": item.available,
        "created_at": item.created_at.isoformat(),
        "updated_at": item.updated_at.isoformat(),
    }
