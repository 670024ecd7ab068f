from __future__ import annotations

import logging
import uuid
from typing import Any, Mapping

from django.db import transaction

from apps.common.errors import InvalidInput, NotFound, translate_db_errors
from apps.common.validators import is_blank, missing_fields, parse_amount, parse_bool, reject_fields
from apps.restaurants.services import get_owned_restaurant, get_restaurant
from .models import MenuItem

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("restaurant_id", "name", "description", "price", "category")
UPDATABLE_FIELDS = ("name", "description", "category", "price", "image", "available")


def _clean(data: Mapping[str, Any], *, partial: bool) -> dict[str, Any]:
    errors = [] if partial else missing_fields(data, REQUIRED_FIELDS)
    cleaned: dict[str, Any] = {}
    for field in ("name", "description", "category", "image"):
        if field in data:
            value = "" if data[field] is None else str(data[field]).strip()
            if field != "image" and not value and partial:
                errors.append(f"{field.capitalize()} is required")
            cleaned[field] = value
    if "price" in data and (partial or not is_blank(data["price"])):
        try:
            cleaned["price"] = parse_amount(data["price"], "item price", allow_zero=False)
        except InvalidInput as exc:
            errors.extend(exc.errors)
    if "available" in data:
        try:
            cleaned["available"] = parse_bool(data["available"], "available")
        except InvalidInput as exc:
            errors.extend(exc.errors)
    if errors:
        raise InvalidInput(errors=errors)
    return cleaned


def _owned_item(actor, item_id, *, lock: bool = False) -> MenuItem:
    try:
        pk = uuid.UUID(str(item_id))
    except ValueError:
        raise NotFound("Menu item not found")
    qs = MenuItem.objects.select_related("restaurant")
    if lock:
        qs = qs.select_for_update(of=("self",))
    item = qs.filter(pk=pk).first()
    if item is None:
        raise NotFound("Menu item not found")
    # Unavailable items are invisible to everyone but the owner.
    if not item.available and not item.restaurant.is_owned_by(actor):
        raise NotFound("Menu item not found")
    get_owned_restaurant(actor, item.restaurant_id)
    return item


@translate_db_errors
def list_menu_items(restaurant_id, actor=None) -> list[MenuItem]:
    restaurant = get_restaurant(restaurant_id, actor)
    qs = MenuItem.objects.filter(restaurant=restaurant)
    if not restaurant.is_owned_by(actor):
        qs = qs.filter(available=True)
    return list(qs.order_by("category", "name"))


@translate_db_errors
def create_menu_item(actor, data: Mapping[str, Any]) -> MenuItem:
    cleaned = _clean(data, partial=False)
    restaurant = get_owned_restaurant(actor, data["restaurant_id"])
    cleaned.setdefault("available", True)
    item = MenuItem.objects.create(restaurant=restaurant, **cleaned)
    logger.info("Menu item created id=%s restaurant_id=%s", item.id, restaurant.id)
    return item


@translate_db_errors
@transaction.atomic
def update_menu_item(actor, item_id, updates: Mapping[str, Any]) -> MenuItem:
    reject_fields(updates, UPDATABLE_FIELDS)
    cleaned = _clean(updates, partial=True)
    item = _owned_item(actor, item_id, lock=True)
    for key, value in cleaned.items():
        setattr(item, key, value)
    item.save(update_fields=[*cleaned, "updated_at"])
    logger.info("Menu item updated id=%s fields=%s", item.id, sorted(cleaned))
    return item


@translate_db_errors
@transaction.atomic
def delete_menu_item(actor, item_id) -> None:
    item = _owned_item(actor, item_id, lock=True)
    item.delete()
    logger.info("Menu item deleted id=%s", item_id)
