from __future__ import annotations

import logging
import uuid
from typing import Any, Mapping

from django.db import transaction
from django.db.models import Q, QuerySet

from apps.accounts.models import Role
from apps.common.errors import Forbidden, InvalidInput, NotFound, translate_db_errors
from apps.common.phone import to_e164
from apps.common.validators import clean_categories, is_blank, missing_fields, parse_amount, parse_bool, reject_fields
from .models import Restaurant

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "name",
    "description",
    "town",
    "address",
    "phone",
    "delivery_time",
    "delivery_fee",
    "min_order",
    "categories",
)
TEXT_FIELDS = ("name", "description", "image", "town", "address", "phone", "delivery_time")
UPDATABLE_FIELDS = (*TEXT_FIELDS, "delivery_fee", "min_order", "categories", "is_active")


def _as_uuid(value, label: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        raise NotFound(f"{label} not found")


def visible_restaurants(actor=None) -> QuerySet[Restaurant]:
    """Active restaurants, plus the actor's own inactive ones."""
    cond = Q(is_active=True)
    if actor is not None and getattr(actor, "is_authenticated", False):
        cond |= Q(owner=actor)
    return Restaurant.objects.filter(cond)


def _clean(data: Mapping[str, Any], *, partial: bool) -> dict[str, Any]:
    errors = [] if partial else missing_fields(data, REQUIRED_FIELDS)
    cleaned: dict[str, Any] = {}
    for field in TEXT_FIELDS:
        if field in data:
            value = "" if data[field] is None else str(data[field]).strip()
            if partial and field in REQUIRED_FIELDS and not value:
                errors.append(f"{field.replace('_', ' ').capitalize()} is required")
            cleaned[field] = value
    for field in ("delivery_fee", "min_order"):
        if field not in data:
            continue
        if is_blank(data[field]):
            if partial:
                errors.append(f"Valid {field.replace('_', ' ')} is required")
        else:
            try:
                cleaned[field] = parse_amount(data[field], field)
            except InvalidInput as exc:
                errors.extend(exc.errors)
    if "categories" in data and (partial or not is_blank(data["categories"])):
        try:
            cleaned["categories"] = clean_categories(data["categories"])
        except InvalidInput as exc:
            errors.extend(exc.errors)
    if cleaned.get("phone"):
        try:
            cleaned["phone"] = to_e164(cleaned["phone"])
        except InvalidInput as exc:
            errors.extend(exc.errors)
    if "is_active" in data:
        try:
            cleaned["is_active"] = parse_bool(data["is_active"], "is_active")
        except InvalidInput as exc:
            errors.extend(exc.errors)
    if errors:
        raise InvalidInput(errors=errors)
    return cleaned


@translate_db_errors
def list_active_restaurants(town: str | None = None) -> list[Restaurant]:
    qs = Restaurant.objects.filter(is_active=True)
    if town:
        qs = qs.filter(town__iexact=town.strip())
    return list(qs.order_by("-created_at"))


@translate_db_errors
def get_restaurant(restaurant_id, actor=None) -> Restaurant:
    restaurant = visible_restaurants(actor).filter(pk=_as_uuid(restaurant_id, "Restaurant")).first()
    if restaurant is None:
        raise NotFound("Restaurant not found")
    return restaurant


@translate_db_errors
def get_my_restaurant(actor) -> Restaurant | None:
    return Restaurant.objects.filter(owner=actor).order_by("created_at").first()


@translate_db_errors
def get_owned_restaurant(actor, restaurant_id) -> Restaurant:
    """Return the restaurant if the actor owns it; 404 if invisible, 403 if merely visible."""
    restaurant = get_restaurant(restaurant_id, actor)
    if not restaurant.is_owned_by(actor):
        raise Forbidden("Only the restaurant owner can do this")
    return restaurant


@translate_db_errors
def create_restaurant(actor, data: Mapping[str, Any]) -> Restaurant:
    cleaned = _clean(data, partial=False)
    if actor.role != Role.OWNER:
        raise Forbidden("Only restaurant owners can create restaurants")
    restaurant = Restaurant.objects.create(owner=actor, is_active=True, **cleaned)
    logger.info("Restaurant created id=%s owner_id=%s", restaurant.id, actor.id)
    return restaurant


@translate_db_errors
@transaction.atomic
def update_restaurant(actor, restaurant_id, updates: Mapping[str, Any]) -> Restaurant:
    reject_fields(updates, UPDATABLE_FIELDS)
    cleaned = _clean(updates, partial=True)
    restaurant = get_owned_restaurant(actor, restaurant_id)
    for key, value in cleaned.items():
        setattr(restaurant, key, value)
    restaurant.save(update_fields=[*cleaned, "updated_at"])
    logger.info("Restaurant updated id=%s fields=%s", restaurant.id, sorted(cleaned))
    return restaurant
