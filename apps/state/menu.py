from __future__ import annotations

from typing import Any, Mapping

from apps.menu import services
from apps.menu.serializers import serialize_menu_item
from .base import Store


class MenuStore(Store):
    def __init__(self, session):
        super().__init__(session)
        self.menu_items: list[dict[str, Any]] = []

    def _reset(self) -> None:
        self.menu_items = []

    def _find(self, item_id) -> dict[str, Any] | None:
        return next((i for i in self.menu_items if i["id"] == str(item_id)), None)

    def fetch_menu_items(self, restaurant_id) -> list[dict[str, Any]]:
        with self._track("fetch menu", on_error=self._reset):
            items = services.list_menu_items(restaurant_id, self.session.user)
            self.menu_items = [serialize_menu_item(i) for i in items]
        return self.menu_items

    def get_menu_by_restaurant(self, restaurant_id) -> list[dict[str, Any]]:
        """Read a menu without touching the cached one."""
        with self._track("get menu", loading=False):
            return [serialize_menu_item(i) for i in services.list_menu_items(restaurant_id, self.session.user)]

    def add_menu_item(self, data: Mapping[str, Any]) -> str:
        with self._track("add menu item"):
            item = services.create_menu_item(self.session.require_user(), data)
        self.fetch_menu_items(item.restaurant_id)
        return str(item.id)

    def update_menu_item(self, item_id, updates: Mapping[str, Any]) -> None:
        with self._track("update menu item", loading=False):
            item = services.update_menu_item(self.session.require_user(), item_id, updates)
        self.fetch_menu_items(item.restaurant_id)

    def delete_menu_item(self, item_id) -> None:
        cached = self._find(item_id)
        with self._track("delete menu item", loading=False):
            services.delete_menu_item(self.session.require_user(), item_id)
        if cached is not None:
            self.fetch_menu_items(cached["restaurant_id"])

    def toggle_availability(self, item_id) -> None:
        cached = self._find(item_id)
        if cached is None:
            return
        self.update_menu_item(item_id, {"available": not cached["available"]})
