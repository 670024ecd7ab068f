import pytest

from apps.accounts import services as accounts
from apps.accounts.session import SessionState
from apps.menu import services as menu
from apps.orders import services as orders
from apps.restaurants import services as restaurants

PASSWORD = "Corr3ct-Horse-Battery"
PHONE = "+5511987651234"


@pytest.fixture(autouse=True)
def _clear_cache():
    from django.core.cache import cache

    cache.clear()
    yield
    cache.clear()


def make_user(email, role="customer", **extra):
    return accounts.register(email=email, password=PASSWORD, name=email.split("@")[0].title(), role=role, **extra)


@pytest.fixture
def customer(db):
    return make_user("cleo@example.com", phone=PHONE, town="Campinas")


@pytest.fixture
def owner(db):
    return make_user("otto@example.com", role="owner")


@pytest.fixture
def driver(db):
    return make_user("dora@example.com", role="driver", town="Campinas")


@pytest.fixture
def restaurant_data():
    return {
        "name": "Cantina da Praça",
        "description": "Massas e pizzas",
        "town": "Campinas",
        "address": "Rua das Flores, 10",
        "phone": PHONE,
        "delivery_time": "30-40 min",
        "delivery_fee": "2.00",
        "min_order": "10.00",
        "categories": ["Italian", "Pizza"],
    }


@pytest.fixture
def restaurant(owner, restaurant_data):
    return restaurants.create_restaurant(owner, restaurant_data)


@pytest.fixture
def pasta(owner, restaurant):
    return menu.create_menu_item(
        owner,
        {"restaurant_id": restaurant.id, "name": "Penne", "description": "Tomato sauce", "price": "5.00", "category": "Pasta"},
    )


@pytest.fixture
def soda(owner, restaurant):
    return menu.create_menu_item(
        owner,
        {"restaurant_id": restaurant.id, "name": "Soda", "description": "Can", "price": "3.00", "category": "Drinks"},
    )


@pytest.fixture
def order_payload(restaurant, pasta, soda):
    return {
        "restaurant_id": str(restaurant.id),
        "items": [
            {"menu_item_id": str(pasta.id), "quantity": 2},
            {"menu_item_id": str(soda.id), "quantity": 1},
        ],
        "subtotal": "13.00",
        "delivery_fee": "2.00",
        "total": "15.00",
        "delivery_address": "Av. Brasil, 500",
        "customer_phone": PHONE,
    }


@pytest.fixture
def pending_order(customer, order_payload):
    return orders.create_order(customer, order_payload)


@pytest.fixture
def advance(owner):
    """Move an order through the owner's side of the lifecycle."""

    def _advance(order, *statuses, driver=None):
        for status in statuses:
            driver_id = driver.id if driver is not None and status == "delivering" else None
            order = orders.update_order_status(owner, order.id, status, driver_id)
        return order

    return _advance


@pytest.fixture
def delivered_order(pending_order, advance, driver):
    order = advance(pending_order, "confirmed", "preparing", "ready", "delivering", driver=driver)
    return orders.update_order_status(driver, order.id, "delivered")


@pytest.fixture
def session_for():
    def _session(user):
        state = SessionState({})
        state.login(user.email, PASSWORD)
        return state

    return _session


@pytest.fixture
def user_factory(db):
    return make_user
