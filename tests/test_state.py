import pytest

from apps.accounts.session import SessionState
from apps.common.errors import Conflict, Forbidden, InvalidInput, NotAuthenticated, Unavailable
from apps.orders import services as order_services
from apps.restaurants import services as restaurant_services
from apps.state import MenuStore, OrderStore, RestaurantStore


@pytest.mark.django_db
def test_restaurant_store_create_and_fetch(owner, session_for, restaurant_data):
    store = RestaurantStore(session_for(owner))
    assert store.fetch_my_restaurant() is None

    restaurant_id = store.create_restaurant(restaurant_data)
    assert store.my_restaurant["id"] == restaurant_id
    assert [r["id"] for r in store.restaurants] == [restaurant_id]
    assert store.loading is False and store.error is None

    store.update_restaurant(restaurant_id, {"name": "Renamed"})
    assert store.my_restaurant["name"] == "Renamed"
    assert store.restaurants[0]["name"] == "Renamed"


@pytest.mark.django_db
def test_restaurant_store_records_validation_error(owner, session_for):
    store = RestaurantStore(session_for(owner))
    with pytest.raises(InvalidInput):
        store.create_restaurant({"name": "Incomplete"})
    assert "Description is required" in store.error
    assert store.loading is False
    store.clear_error()
    assert store.error is None


@pytest.mark.django_db
def test_fetch_failure_empties_cache_and_reraises(restaurant, monkeypatch):
    store = RestaurantStore(SessionState({}))
    store.fetch_restaurants()
    assert len(store.restaurants) == 1

    def boom(town=None):
        raise Unavailable()

    monkeypatch.setattr(restaurant_services, "list_active_restaurants", boom)
    with pytest.raises(Unavailable) as exc:
        store.fetch_restaurants()
    assert exc.value.retryable
    assert store.restaurants == []
    assert store.error == "Storage temporarily unavailable"


@pytest.mark.django_db
def test_menu_store_toggle_and_delete(owner, restaurant, pasta, soda, session_for):
    store = MenuStore(session_for(owner))
    store.fetch_menu_items(restaurant.id)
    assert [i["name"] for i in store.menu_items] == ["Soda", "Penne"]

    store.toggle_availability(soda.id)
    assert store.menu_items[0]["available"] is False

    store.delete_menu_item(pasta.id)
    assert [i["name"] for i in store.menu_items] == ["Soda"]


@pytest.mark.django_db
def test_menu_store_add_item_and_non_caching_read(owner, customer, restaurant, pasta, session_for):
    store = MenuStore(session_for(owner))
    item_id = store.add_menu_item(
        {"restaurant_id": str(restaurant.id), "name": "Tiramisu", "description": "Coffee", "price": "8", "category": "Dessert"}
    )
    assert item_id in {i["id"] for i in store.menu_items}

    guest = MenuStore(session_for(customer))
    assert len(guest.get_menu_by_restaurant(restaurant.id)) == 2
    assert guest.menu_items == []


@pytest.mark.django_db
def test_menu_store_failed_write_leaves_cache(customer, restaurant, pasta, session_for):
    store = MenuStore(session_for(customer))
    store.fetch_menu_items(restaurant.id)
    before = list(store.menu_items)
    with pytest.raises(Forbidden):
        store.update_menu_item(pasta.id, {"price": "0.50"})
    assert store.menu_items == before
    assert store.error == "Only the restaurant owner can do this"


@pytest.mark.django_db
def test_order_store_lifecycle(customer, owner, driver, restaurant, order_payload, session_for):
    customer_store = OrderStore(session_for(customer))
    order_id = customer_store.create_order(order_payload)
    assert [o["id"] for o in customer_store.orders] == [order_id]
    assert customer_store.orders[0]["total"] == "15.00"

    owner_store = OrderStore(session_for(owner))
    owner_store.fetch_restaurant_orders(restaurant.id)
    for status in ("confirmed", "preparing", "ready"):
        owner_store.update_order_status(order_id, status)
    assert owner_store.orders[0]["status"] == "ready"

    driver_store = OrderStore(session_for(driver))
    assert [o["id"] for o in driver_store.fetch_available_deliveries()] == [order_id]
    accepted = driver_store.accept_delivery(order_id)
    assert accepted["driver_id"] == str(driver.id)
    assert [o["id"] for o in driver_store.orders] == [order_id]

    driver_store.update_order_status(order_id, "delivered")
    assert driver_store.orders[0]["status"] == "delivered"


@pytest.mark.django_db
def test_order_store_conflict_keeps_cached_status(owner, pending_order, session_for, monkeypatch):
    store = OrderStore(session_for(owner))
    store.fetch_restaurant_orders(pending_order.restaurant_id)

    def lost_race(*args, **kwargs):
        raise Conflict("Order was changed by someone else; reload and retry")

    monkeypatch.setattr(order_services, "update_order_status", lost_race)
    with pytest.raises(Conflict):
        store.update_order_status(pending_order.id, "confirmed")
    assert store.orders[0]["status"] == "pending"
    assert store.error.startswith("Order was changed")


def test_stores_require_a_session():
    store = OrderStore(SessionState({}))
    assert store.fetch_customer_orders() == []
    with pytest.raises(NotAuthenticated):
        store.create_order({})
    assert store.error == "User not authenticated"

