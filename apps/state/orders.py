from __future__ import annotations

from typing import Any, Mapping

from apps.accounts.models import Role
from apps.orders import services
from apps.orders.serializers import serialize_order
from .base import Store


class OrderStore(Store):
    """Order list for the current user.

    Writes are confirmed by the server before the cache changes: a status
    update replaces the cached entry with the row the service returns, and a
    failed write leaves the cache exactly as it was.
    """

    def __init__(self, session):
        super().__init__(session)
        self.orders: list[dict[str, Any]] = []

    def _reset(self) -> None:
        self.orders = []

    def _replace(self, order, *, append: bool = False) -> None:
        fresh = serialize_order(order)
        if append and all(o["id"] != fresh["id"] for o in self.orders):
            self.orders = [fresh, *self.orders]
            return
        self.orders = [fresh if o["id"] == fresh["id"] else o for o in self.orders]

    def fetch_customer_orders(self) -> list[dict[str, Any]]:
        if not self.session.is_authenticated:
            return self.orders
        with self._track("fetch customer orders", on_error=self._reset):
            self.orders = [serialize_order(o) for o in services.list_customer_orders(self.session.user)]
        return self.orders

    def fetch_restaurant_orders(self, restaurant_id) -> list[dict[str, Any]]:
        if not self.session.is_authenticated:
            return self.orders
        with self._track("fetch restaurant orders", on_error=self._reset):
            items = services.list_restaurant_orders(self.session.user, restaurant_id)
            self.orders = [serialize_order(o) for o in items]
        return self.orders

    def fetch_driver_orders(self) -> list[dict[str, Any]]:
        if not self.session.is_authenticated:
            return self.orders
        with self._track("fetch driver orders", on_error=self._reset):
            self.orders = [serialize_order(o) for o in services.list_driver_orders(self.session.user)]
        return self.orders

    def fetch_available_deliveries(self) -> list[dict[str, Any]]:
        with self._track("fetch available deliveries", loading=False):
            return [serialize_order(o) for o in services.list_available_deliveries(self.session.require_user())]

    def create_order(self, data: Mapping[str, Any]) -> str:
        with self._track("create order"):
            order = services.create_order(self.session.require_user(), data)
        if self.session.user.role == Role.CUSTOMER:
            self.fetch_customer_orders()
        return str(order.id)

    def update_order_status(self, order_id, status: str, driver_id=None) -> dict[str, Any]:
        with self._track("update order status", loading=False):
            order = services.update_order_status(self.session.require_user(), order_id, status, driver_id)
        self._replace(order)
        return serialize_order(order)

    def accept_delivery(self, order_id) -> dict[str, Any]:
        with self._track("accept delivery", loading=False):
            order = services.accept_delivery(self.session.require_user(), order_id)
        self._replace(order, append=True)
        return serialize_order(order)
