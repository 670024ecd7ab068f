from __future__ import annotations

import logging
import uuid
from typing import Any, Mapping

from django.db import transaction
from django.db.models import Avg, Exists, FloatField, OuterRef, Subquery
from django.utils import timezone

from apps.common.errors import Forbidden, InvalidInput, NotFound, translate_db_errors
from apps.common.validators import is_blank
from apps.orders.models import Order, OrderStatus
from apps.restaurants.models import Restaurant
from .models import RATING_MAX, RATING_MIN, Review

logger = logging.getLogger(__name__)


def _parse_rating(value) -> int:
    try:
        if isinstance(value, bool) or value is None:
            raise ValueError
        rating = int(str(value).strip())
    except ValueError:
        raise InvalidInput(errors=["Rating must be a whole number"])
    if not RATING_MIN <= rating <= RATING_MAX:
        raise InvalidInput(errors=[f"Rating must be between {RATING_MIN} and {RATING_MAX}"])
    return rating


def _as_uuid(value, message: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise NotFound(message)


@translate_db_errors
def list_restaurant_reviews(restaurant_id) -> list[Review]:
    pk = _as_uuid(restaurant_id, "Restaurant not found")
    return list(Review.objects.filter(restaurant_id=pk).select_related("customer").order_by("-created_at"))


@translate_db_errors
def recompute_restaurant_rating(restaurant_id) -> float | None:
    """Set the restaurant's rating to the mean of its reviews.

    The mean is computed by the database inside the UPDATE itself, so reviews
    inserted concurrently are never lost to a stale read. Returns the new
    rating, or None when the restaurant has no reviews (the rating is left
    untouched).
    """
    reviews = Review.objects.filter(restaurant=OuterRef("pk"))
    mean = Subquery(
        reviews.values("restaurant").annotate(mean=Avg("rating")).values("mean")[:1],
        output_field=FloatField(),
    )
    updated = (
        Restaurant.objects.filter(pk=restaurant_id)
        .filter(Exists(reviews))
        .update(rating=mean, updated_at=timezone.now())
    )
    if not updated:
        return None
    rating = Restaurant.objects.values_list("rating", flat=True).get(pk=restaurant_id)
    logger.info("Restaurant rating recomputed id=%s rating=%.3f", restaurant_id, rating)
    return rating


@translate_db_errors
@transaction.atomic
def create_review(actor, data: Mapping[str, Any]) -> Review:
    """Review a delivered order of the actor's and refresh the restaurant rating.

    The restaurant row is locked before the insert, and the insert and the
    rating update commit together. A failure in either rolls both back and
    surfaces to the caller.
    """
    rating = _parse_rating(data.get("rating"))
    if is_blank(data.get("order_id")):
        raise InvalidInput(errors=["Order is required"])

    order = Order.objects.select_for_update().filter(pk=_as_uuid(data["order_id"], "Order not found")).first()
    if order is None:
        raise NotFound("Order not found")
    if order.customer_id != actor.pk:
        logger.warning("Review rejected: user_id=%s is not the customer of order_id=%s", actor.pk, order.pk)
        raise Forbidden("Only the order's customer can review it")
    if order.status != OrderStatus.DELIVERED:
        logger.warning("Review rejected: order_id=%s is %s", order.pk, order.status)
        raise Forbidden("Only delivered orders can be reviewed")
    claimed_restaurant = data.get("restaurant_id")
    if not is_blank(claimed_restaurant) and str(claimed_restaurant) != str(order.restaurant_id):
        raise InvalidInput(errors=["Restaurant does not match the order"])

    # Reviews of one restaurant commit one at a time, so each recompute sees
    # every review committed before it.
    Restaurant.objects.select_for_update().only("pk").get(pk=order.restaurant_id)
    review = Review.objects.create(
        restaurant_id=order.restaurant_id,
        customer=actor,
        order=order,
        rating=rating,
        comment=str(data.get("comment") or "").strip(),
    )
    recompute_restaurant_rating(order.restaurant_id)
    logger.info("Review created id=%s order_id=%s rating=%s", review.id, order.pk, rating)
    return review
