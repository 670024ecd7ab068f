from __future__ import annotations

from typing import Any, Mapping

from apps.restaurants import services
from apps.restaurants.serializers import serialize_restaurant
from .base import Store


class RestaurantStore(Store):
    def __init__(self, session):
        super().__init__(session)
        self.restaurants: list[dict[str, Any]] = []
        self.my_restaurant: dict[str, Any] | None = None

    def _reset_list(self) -> None:
        self.restaurants = []

    def _reset_mine(self) -> None:
        self.my_restaurant = None

    def fetch_restaurants(self, town: str | None = None) -> list[dict[str, Any]]:
        with self._track("fetch restaurants", on_error=self._reset_list):
            self.restaurants = [serialize_restaurant(r) for r in services.list_active_restaurants(town=town)]
        return self.restaurants

    def fetch_my_restaurant(self) -> dict[str, Any] | None:
        if not self.session.is_authenticated:
            return None
        with self._track("fetch my restaurant", loading=False, on_error=self._reset_mine):
            restaurant = services.get_my_restaurant(self.session.user)
            self.my_restaurant = serialize_restaurant(restaurant) if restaurant else None
        return self.my_restaurant

    def create_restaurant(self, data: Mapping[str, Any]) -> str:
        with self._track("create restaurant"):
            restaurant = services.create_restaurant(self.session.require_user(), data)
        self.fetch_my_restaurant()
        self.fetch_restaurants()
        return str(restaurant.id)

    def update_restaurant(self, restaurant_id, updates: Mapping[str, Any]) -> None:
        with self._track("update restaurant"):
            services.update_restaurant(self.session.require_user(), restaurant_id, updates)
        self.fetch_my_restaurant()
        self.fetch_restaurants()
