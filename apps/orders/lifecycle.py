"""Order status transition table.

The restaurant owner may perform any move listed in ``TRANSITIONS``; the
assigned driver only the moves in ``DRIVER_TRANSITIONS``. ``delivered`` and
``cancelled`` are terminal.
"""
from __future__ import annotations

from apps.common.errors import InvalidInput, InvalidTransition
from .models import OrderStatus

TRANSITIONS: dict[str, frozenset[str]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.READY: frozenset({OrderStatus.DELIVERING, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERING: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

DRIVER_TRANSITIONS = frozenset({(OrderStatus.DELIVERING, OrderStatus.DELIVERED)})

TERMINAL = frozenset(s for s, targets in TRANSITIONS.items() if not targets)

# Statuses in which an order is still being worked on.
ACTIVE = frozenset(OrderStatus.values) - TERMINAL


def parse_status(value) -> OrderStatus:
    try:
        return OrderStatus(value)
    except (TypeError, ValueError):
        raise InvalidInput(errors=[f"Invalid status: {value!r}"])


def can_transition(current: str, target: str) -> bool:
    return target in TRANSITIONS.get(current, frozenset())


def ensure_transition(current: str, target: str) -> None:
    if not can_transition(current, target):
        raise InvalidTransition(f"Cannot move order from {current} to {target}")


def driver_may_apply(current: str, target: str) -> bool:
    return (current, target) in DRIVER_TRANSITIONS
