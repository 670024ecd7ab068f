from __future__ import annotations

import logging
import uuid
from decimal import Decimal
from typing import Any, Mapping

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Max, Q, QuerySet
from django.utils import timezone

from apps.common.errors import Conflict, Forbidden, InvalidInput, InvalidTransition, NotFound, translate_db_errors
from apps.common.phone import mask_phone, to_e164
from apps.common.validators import MAX_AMOUNT, is_blank, parse_amount
from apps.menu.models import MenuItem
from apps.restaurants.models import Restaurant
from apps.restaurants.services import get_owned_restaurant
from . import lifecycle
from .models import Order, OrderItem, OrderStatus, OrderStatusChange

User = get_user_model()
logger = logging.getLogger(__name__)

MONEY_FIELDS = ("subtotal", "delivery_fee", "total")
MAX_QUANTITY = 99


def _as_uuid(value, error: type = NotFound, message: str = "Order not found") -> uuid.UUID:
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        raise error(message)


def visible_orders(actor) -> QuerySet[Order]:
    """Orders the actor may read: as customer, assigned driver or restaurant owner."""
    return Order.objects.filter(Q(customer=actor) | Q(driver=actor) | Q(restaurant__owner=actor))


def _record_status(order_id, status: str, source: str, note: str = "") -> OrderStatusChange:
    """Append to the order's history. Callers hold the order row (fresh insert or conditional UPDATE)."""
    last = OrderStatusChange.objects.filter(order_id=order_id).aggregate(last=Max("sequence"))["last"]
    return OrderStatusChange.objects.create(
        order_id=order_id,
        sequence=0 if last is None else last + 1,
        status=status,
        source=source,
        note=note[:200],
    )


def _parse_lines(items: list) -> list[tuple[uuid.UUID, int]]:
    lines: list[tuple[uuid.UUID, int]] = []
    errors: list[str] = []
    for idx, entry in enumerate(items, start=1):
        if not isinstance(entry, Mapping):
            errors.append(f"Item {idx} is malformed")
            continue
        try:
            menu_item_id = uuid.UUID(str(entry.get("menu_item_id")))
        except ValueError:
            errors.append(f"Item {idx} must reference a menu item")
            continue
        raw_qty = entry.get("quantity", 1)
        try:
            if isinstance(raw_qty, bool):
                raise ValueError
            quantity = int(raw_qty)
        except (TypeError, ValueError):
            quantity = 0
        if quantity < 1:
            errors.append(f"Item {idx} quantity must be at least 1")
            continue
        if quantity > MAX_QUANTITY:
            errors.append(f"Item {idx} quantity cannot exceed {MAX_QUANTITY}")
            continue
        lines.append((menu_item_id, quantity))
    if errors:
        raise InvalidInput(errors=errors)
    return lines


def _validate_order_input(data: Mapping[str, Any]) -> dict[str, Any]:
    errors = []
    if is_blank(data.get("restaurant_id")):
        errors.append("Restaurant is required")
    items = data.get("items")
    if not isinstance(items, list) or not items:
        errors.append("Order items are required")
    if is_blank(data.get("delivery_address")):
        errors.append("Delivery address is required")
    if is_blank(data.get("customer_phone")):
        errors.append("Phone number is required")
    if errors:
        raise InvalidInput(errors=errors)

    claimed = {}
    for field in MONEY_FIELDS:
        if not is_blank(data.get(field)):
            claimed[field] = parse_amount(data[field], field)
    return {
        "restaurant_id": _as_uuid(data["restaurant_id"], NotFound, "Restaurant not found"),
        "lines": _parse_lines(items),
        "delivery_address": str(data["delivery_address"]).strip(),
        "customer_phone": to_e164(str(data["customer_phone"])),
        "notes": str(data.get("notes") or "").strip(),
        "claimed": claimed,
    }


@translate_db_errors
@transaction.atomic
def create_order(actor, data: Mapping[str, Any]) -> Order:
    """Place a pending order for the actor.

    Prices and names are taken from the restaurant's menu. Amounts the caller
    supplies (subtotal, delivery_fee, total) must match the computed ones.
    """
    cleaned = _validate_order_input(data)

    restaurant = Restaurant.objects.filter(pk=cleaned["restaurant_id"], is_active=True).first()
    if restaurant is None:
        raise NotFound("Restaurant not found")

    menu = {
        m.pk: m
        for m in MenuItem.objects.filter(restaurant=restaurant, pk__in=[mid for mid, _ in cleaned["lines"]])
    }
    missing = [str(mid) for mid, _ in cleaned["lines"] if mid not in menu or not menu[mid].available]
    if missing:
        raise InvalidInput(errors=[f"Menu item {mid} is not available" for mid in missing])

    subtotal = sum((menu[mid].price * qty for mid, qty in cleaned["lines"]), Decimal("0.00"))
    computed = {"subtotal": subtotal, "delivery_fee": restaurant.delivery_fee, "total": subtotal + restaurant.delivery_fee}
    if computed["total"] > MAX_AMOUNT:
        raise InvalidInput(errors=[f"Order total cannot exceed {MAX_AMOUNT}"])
    mismatched = [f for f, amount in cleaned["claimed"].items() if amount != computed[f]]
    if mismatched:
        raise InvalidInput(
            errors=[f"{f.replace('_', ' ').capitalize()} does not match: expected {computed[f]}" for f in mismatched]
        )
    if subtotal < restaurant.min_order:
        raise InvalidInput(errors=[f"Minimum order is {restaurant.min_order}"])

    order = Order.objects.create(
        customer=actor,
        restaurant=restaurant,
        status=OrderStatus.PENDING,
        subtotal=computed["subtotal"],
        delivery_fee=computed["delivery_fee"],
        total=computed["total"],
        delivery_address=cleaned["delivery_address"],
        customer_phone=cleaned["customer_phone"],
        notes=cleaned["notes"],
    )
    OrderItem.objects.bulk_create(
        [
            OrderItem(order=order, menu_item=menu[mid], position=pos, name=menu[mid].name, quantity=qty, price=menu[mid].price)
            for pos, (mid, qty) in enumerate(cleaned["lines"])
        ]
    )
    _record_status(order.id, order.status, "initial")
    logger.info(
        "Order created id=%s restaurant_id=%s customer_id=%s total=%s phone=%s",
        order.id, restaurant.id, actor.id, order.total, mask_phone(order.customer_phone),
    )
    return order


@translate_db_errors
def get_order(actor, order_id) -> Order:
    order = visible_orders(actor).select_related("restaurant").filter(pk=_as_uuid(order_id)).first()
    if order is None:
        raise NotFound("Order not found")
    return order


def _ordered(qs: QuerySet[Order]) -> list[Order]:
    return list(qs.select_related("restaurant").prefetch_related("items").order_by("-created_at"))


@translate_db_errors
def list_customer_orders(actor) -> list[Order]:
    return _ordered(Order.objects.filter(customer=actor))


@translate_db_errors
def list_restaurant_orders(actor, restaurant_id) -> list[Order]:
    restaurant = get_owned_restaurant(actor, restaurant_id)
    return _ordered(Order.objects.filter(restaurant=restaurant))


@translate_db_errors
def list_driver_orders(actor) -> list[Order]:
    return _ordered(Order.objects.filter(driver=actor))


@translate_db_errors
def list_available_deliveries(actor) -> list[Order]:
    """Ready orders nobody has picked up yet, restricted to the driver's town when known."""
    if not actor.is_delivery_agent:
        raise Forbidden("Only drivers can list available deliveries")
    qs = Order.objects.filter(status=OrderStatus.READY, driver__isnull=True, restaurant__is_active=True)
    if actor.town:
        qs = qs.filter(restaurant__town__iexact=actor.town)
    return list(qs.select_related("restaurant").prefetch_related("items").order_by("created_at"))


@translate_db_errors
def order_history(actor, order_id) -> list[OrderStatusChange]:
    order = get_order(actor, order_id)
    return list(order.status_changes.order_by("sequence"))


@translate_db_errors
@transaction.atomic
def update_order_status(actor, order_id, status, driver_id=None) -> Order:
    """Move an order along the lifecycle, optionally assigning its driver.

    The write is conditional on the status read here, so a concurrent
    writer that got there first turns this call into a Conflict instead of
    silently overwriting its change.
    """
    target = lifecycle.parse_status(status)
    driver_pk = None
    if not is_blank(driver_id):
        if target != OrderStatus.DELIVERING:
            raise InvalidInput(errors=["A driver can only be assigned when the order goes out for delivery"])
        driver_pk = _as_uuid(driver_id, InvalidInput, "Invalid driver id")

    order = get_order(actor, order_id)
    is_owner = order.restaurant.is_owned_by(actor)
    is_driver = order.driver_id is not None and order.driver_id == actor.pk
    if not (is_owner or is_driver):
        raise Forbidden("Only the restaurant owner or the assigned driver can update this order")
    lifecycle.ensure_transition(order.status, target)
    if not is_owner and not lifecycle.driver_may_apply(order.status, target):
        raise Forbidden("Drivers can only mark their deliveries as delivered")

    updates: dict[str, Any] = {"status": target, "updated_at": timezone.now()}
    if driver_pk is not None:
        driver = User.objects.filter(pk=driver_pk, is_active=True).first()
        if driver is None or not driver.is_delivery_agent:
            raise InvalidInput(errors=["Driver must be an active driver or agent"])
        updates["driver"] = driver
    elif target == OrderStatus.DELIVERING and order.driver_id is None:
        raise InvalidInput(errors=["A driver is required to start delivery"])

    rows = Order.objects.filter(pk=order.pk, status=order.status).update(**updates)
    if rows == 0:
        logger.warning("Order status race lost id=%s expected=%s target=%s", order.pk, order.status, target)
        raise Conflict("Order was changed by someone else; reload and retry")
    _record_status(order.pk, target, "owner" if is_owner else "driver")
    logger.info("Order id=%s moved %s -> %s by user_id=%s", order.pk, order.status, target, actor.pk)
    order.refresh_from_db()
    return order


@translate_db_errors
@transaction.atomic
def accept_delivery(actor, order_id) -> Order:
    """Claim a ready, unassigned order for the acting driver.

    Claiming is a single conditional UPDATE, so of two drivers accepting the
    same order exactly one succeeds; the other gets a Conflict.
    """
    if not actor.is_delivery_agent:
        raise Forbidden("Only drivers can accept deliveries")
    pk = _as_uuid(order_id)
    rows = Order.objects.filter(pk=pk, status=OrderStatus.READY, driver__isnull=True).update(
        status=OrderStatus.DELIVERING, driver=actor, updated_at=timezone.now()
    )
    if rows == 0:
        current = Order.objects.filter(pk=pk).values("status", "driver_id").first()
        if current is None:
            raise NotFound("Order not found")
        if current["driver_id"] is not None:
            logger.warning("Delivery already taken id=%s by driver_id=%s", pk, current["driver_id"])
            raise Conflict("Order already accepted by another driver")
        raise InvalidTransition(f"Order is {current['status']}, not ready for pickup")
    _record_status(pk, OrderStatus.DELIVERING, "driver", note="accepted")
    logger.info("Delivery accepted id=%s driver_id=%s", pk, actor.pk)
    return Order.objects.select_related("restaurant").get(pk=pk)
