from decimal import Decimal

import pytest

from apps.common.errors import Conflict, Forbidden, InvalidInput, InvalidTransition, NotFound
from apps.menu.services import create_menu_item
from apps.orders import lifecycle, services
from apps.orders.models import Order, OrderStatus


@pytest.mark.django_db
def test_create_order_computes_totals_from_menu(customer, restaurant, order_payload):
    order = services.create_order(customer, order_payload)
    assert order.status == OrderStatus.PENDING
    assert order.subtotal == Decimal("13.00")
    assert order.delivery_fee == Decimal("2.00")
    assert order.total == Decimal("15.00")
    assert order.customer == customer
    assert order.driver is None
    assert [(i.name, i.quantity, i.price) for i in order.items.all()] == [
        ("Penne", 2, Decimal("5.00")),
        ("Soda", 1, Decimal("3.00")),
    ]
    assert [(c.status, c.source) for c in order.status_changes.all()] == [("pending", "initial")]


@pytest.mark.django_db
def test_create_order_without_claimed_amounts(customer, order_payload):
    for field in ("subtotal", "delivery_fee", "total"):
        order_payload.pop(field)
    assert services.create_order(customer, order_payload).total == Decimal("15.00")


@pytest.mark.django_db
def test_create_order_rejects_total_mismatch(customer, order_payload):
    order_payload["total"] = "1.00"
    with pytest.raises(InvalidInput) as exc:
        services.create_order(customer, order_payload)
    assert exc.value.errors == ["Total does not match: expected 15.00"]
    assert not Order.objects.exists()


@pytest.mark.django_db
def test_create_order_collects_missing_fields(customer):
    with pytest.raises(InvalidInput) as exc:
        services.create_order(customer, {"items": []})
    assert exc.value.errors == [
        "Restaurant is required",
        "Order items are required",
        "Delivery address is required",
        "Phone number is required",
    ]


@pytest.mark.django_db
def test_create_order_rejects_bad_lines_and_phone(customer, order_payload, pasta):
    good_items = order_payload["items"]
    order_payload["items"] = [{"menu_item_id": "nope"}, {"menu_item_id": str(pasta.id), "quantity": 0}]
    with pytest.raises(InvalidInput) as exc:
        services.create_order(customer, order_payload)
    assert exc.value.errors == ["Item 1 must reference a menu item", "Item 2 quantity must be at least 1"]

    order_payload.update(items=good_items, customer_phone="12")
    with pytest.raises(InvalidInput) as exc:
        services.create_order(customer, order_payload)
    assert exc.value.errors == ["Invalid phone number"]


@pytest.mark.django_db
def test_create_order_below_minimum(customer, order_payload, soda):
    order_payload.update(items=[{"menu_item_id": str(soda.id), "quantity": 1}], subtotal=None, total=None)
    with pytest.raises(InvalidInput) as exc:
        services.create_order(customer, order_payload)
    assert exc.value.errors == ["Minimum order is 10.00"]


@pytest.mark.django_db
def test_create_order_requires_available_items_of_active_restaurant(owner, customer, restaurant, order_payload, soda):
    soda.available = False
    soda.save()
    with pytest.raises(InvalidInput) as exc:
        services.create_order(customer, order_payload)
    assert exc.value.errors == [f"Menu item {soda.id} is not available"]

    restaurant.is_active = False
    restaurant.save()
    with pytest.raises(NotFound):
        services.create_order(customer, order_payload)


@pytest.mark.django_db
def test_full_lifecycle(customer, owner, driver, restaurant, pending_order):
    order = pending_order
    for status in ("confirmed", "preparing", "ready"):
        order = services.update_order_status(owner, order.id, status)
        assert order.status == status

    order = services.update_order_status(owner, order.id, "delivering", driver.id)
    assert order.status == OrderStatus.DELIVERING
    assert order.driver == driver

    order = services.update_order_status(driver, order.id, "delivered")
    assert order.status == OrderStatus.DELIVERED

    history = services.order_history(customer, order.id)
    assert [c.status for c in history] == ["pending", "confirmed", "preparing", "ready", "delivering", "delivered"]
    assert history[-1].source == "driver"

    assert [o.id for o in services.list_customer_orders(customer)] == [order.id]
    assert [o.id for o in services.list_restaurant_orders(owner, restaurant.id)] == [order.id]
    assert [o.id for o in services.list_driver_orders(driver)] == [order.id]


@pytest.mark.django_db
def test_illegal_transitions(owner, pending_order, advance):
    with pytest.raises(InvalidTransition):
        services.update_order_status(owner, pending_order.id, "delivered")

    order = advance(pending_order, "cancelled")
    with pytest.raises(InvalidTransition) as exc:
        services.update_order_status(owner, order.id, "confirmed")
    assert exc.value.status == 409

    with pytest.raises(InvalidInput):
        services.update_order_status(owner, order.id, "teleported")


@pytest.mark.django_db
def test_delivering_requires_a_delivery_agent(owner, customer, pending_order, advance):
    order = advance(pending_order, "confirmed", "preparing", "ready")
    with pytest.raises(InvalidInput) as exc:
        services.update_order_status(owner, order.id, "delivering")
    assert exc.value.errors == ["A driver is required to start delivery"]

    with pytest.raises(InvalidInput) as exc:
        services.update_order_status(owner, order.id, "delivering", customer.id)
    assert exc.value.errors == ["Driver must be an active driver or agent"]

    with pytest.raises(InvalidInput):
        services.update_order_status(owner, order.id, "cancelled", customer.id)


@pytest.mark.django_db
def test_status_updates_are_restricted(customer, driver, pending_order, advance):
    with pytest.raises(Forbidden):
        services.update_order_status(customer, pending_order.id, "cancelled")
    # Unassigned drivers cannot even see the order.
    with pytest.raises(NotFound):
        services.update_order_status(driver, pending_order.id, "confirmed")

    order = advance(pending_order, "confirmed", "preparing", "ready", "delivering", driver=driver)
    with pytest.raises(InvalidTransition):
        services.update_order_status(driver, order.id, "cancelled")


@pytest.mark.django_db
def test_stale_status_write_conflicts(owner, pending_order, monkeypatch):
    stale = Order.objects.get(pk=pending_order.pk)
    Order.objects.filter(pk=pending_order.pk).update(status=OrderStatus.CANCELLED)
    # Hand the service the snapshot read before the concurrent cancel.
    monkeypatch.setattr(services, "get_order", lambda actor, order_id: stale)
    with pytest.raises(Conflict):
        services.update_order_status(owner, pending_order.id, "confirmed")
    assert Order.objects.get(pk=pending_order.pk).status == OrderStatus.CANCELLED


@pytest.mark.django_db
def test_accept_delivery_once(owner, pending_order, advance, driver, user_factory):
    other = user_factory("dario@example.com", role="agent", town="Campinas")
    order = advance(pending_order, "confirmed", "preparing", "ready")
    assert [o.id for o in services.list_available_deliveries(driver)] == [order.id]

    accepted = services.accept_delivery(driver, order.id)
    assert accepted.status == OrderStatus.DELIVERING
    assert accepted.driver == driver

    with pytest.raises(Conflict):
        services.accept_delivery(other, order.id)
    order.refresh_from_db()
    assert order.driver == driver
    assert services.list_available_deliveries(other) == []
    assert services.order_history(driver, order.id)[-1].note == "accepted"


@pytest.mark.django_db
def test_accept_delivery_rules(customer, driver, pending_order):
    with pytest.raises(Forbidden):
        services.accept_delivery(customer, pending_order.id)
    with pytest.raises(InvalidTransition):
        services.accept_delivery(driver, pending_order.id)
    with pytest.raises(NotFound):
        services.accept_delivery(driver, "00000000-0000-0000-0000-000000000000")
    with pytest.raises(Forbidden):
        services.list_available_deliveries(customer)


@pytest.mark.django_db
def test_available_deliveries_filtered_by_town(pending_order, advance, user_factory):
    far = user_factory("fabio@example.com", role="driver", town="Recife")
    anywhere = user_factory("ana@example.com", role="driver")
    order = advance(pending_order, "confirmed", "preparing", "ready")
    assert services.list_available_deliveries(far) == []
    assert [o.id for o in services.list_available_deliveries(anywhere)] == [order.id]


@pytest.mark.django_db
def test_orders_invisible_to_strangers(pending_order, user_factory):
    stranger = user_factory("sam@example.com")
    with pytest.raises(NotFound):
        services.get_order(stranger, pending_order.id)
    assert services.list_customer_orders(stranger) == []


def test_transition_table():
    assert lifecycle.can_transition("pending", "confirmed")
    assert not lifecycle.can_transition("delivered", "cancelled")
    assert lifecycle.TERMINAL == {"delivered", "cancelled"}
    assert lifecycle.driver_may_apply("delivering", "delivered")
    assert not lifecycle.driver_may_apply("ready", "delivering")


@pytest.mark.django_db
def test_create_order_caps_quantity(customer, order_payload, pasta):
    order_payload.update(items=[{"menu_item_id": str(pasta.id), "quantity": 10**9}], subtotal=None, total=None)
    with pytest.raises(InvalidInput) as exc:
        services.create_order(customer, order_payload)
    assert exc.value.errors == ["Item 1 quantity cannot exceed 99"]
    assert not Order.objects.exists()


@pytest.mark.django_db
def test_create_order_rejects_total_overflow(owner, customer, restaurant, order_payload):
    caviar = create_menu_item(
        owner,
        {"restaurant_id": restaurant.id, "name": "Caviar", "description": "Tin", "price": "99999999.99", "category": "Luxury"},
    )
    order_payload.update(items=[{"menu_item_id": str(caviar.id), "quantity": 2}], subtotal=None, total=None)
    with pytest.raises(InvalidInput) as exc:
        services.create_order(customer, order_payload)
    assert exc.value.errors == ["Order total cannot exceed 99999999.99"]


@pytest.mark.django_db
def test_history_keeps_write_order_with_equal_timestamps(customer, pending_order, advance):
    order = advance(pending_order, "confirmed", "preparing", "ready", "cancelled")
    # Same timestamp on every entry; sequence alone must order them.
    order.status_changes.update(created_at=order.created_at)
    history = services.order_history(customer, order.id)
    assert [c.sequence for c in history] == [0, 1, 2, 3, 4]
    assert [c.status for c in history] == ["pending", "confirmed", "preparing", "ready", "cancelled"]
