from __future__ import annotations

from typing import Any

from .models import Review


def serialize_review(review: Review) -> dict[str, Any]:
    return {
        "id": str(review.id),
        "restaurant_id": str(review.restaurant_id),
        "customer_id": str(review.customer_id),
        "customer": {"name": review.customer.name},
        "order_id": str(review.order_id),
        "rating": review.rating,
        "comment": review.comment or None,
        "created_at": review.created_at.isoformat(),
    }
