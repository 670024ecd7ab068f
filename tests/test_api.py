import pytest
from django.test import Client
from django.urls import reverse

PASSWORD = "Corr3ct-Horse-Battery"
JSON = "application/json"


def login(client, user):
    r = client.post(reverse("accounts:login"), {"email": user.email, "password": PASSWORD}, content_type=JSON)
    assert r.status_code == 200
    return r


def test_healthz(client):
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.content == b"ok"


@pytest.mark.django_db
def test_register_login_me_logout(client):
    r = client.post(
        reverse("accounts:register"),
        {"email": "Nina@Example.com", "password": PASSWORD, "name": "Nina", "phone": "+5511987651234"},
        content_type=JSON,
    )
    assert r.status_code == 201
    assert r.json()["user"]["email"] == "nina@example.com"

    r = client.patch(reverse("accounts:me"), {"town": "Campinas"}, content_type=JSON)
    assert r.status_code == 200
    assert r.json()["user"]["town"] == "Campinas"

    assert client.post(reverse("accounts:logout")).status_code == 204
    r = client.get(reverse("accounts:me"))
    assert r.status_code == 401
    assert r.json()["error"]["code"] == "not_authenticated"


@pytest.mark.django_db
def test_login_errors_and_rate_limit(client, customer, settings):
    settings.LOGIN_RATE_LIMIT = 2
    url = reverse("accounts:login")
    r = client.post(url, {"email": customer.email, "password": "nope"}, content_type=JSON)
    assert r.status_code == 401
    assert r.json()["error"]["message"] == "Invalid credentials"

    login(client, customer)
    r = client.post(url, {"email": customer.email, "password": PASSWORD}, content_type=JSON)
    assert r.status_code == 429
    assert int(r.headers["Retry-After"]) > 0


@pytest.mark.django_db
def test_validation_errors_are_422_with_messages(client, owner):
    login(client, owner)
    r = client.post(reverse("restaurants:list"), {"name": "Half"}, content_type=JSON)
    assert r.status_code == 422
    body = r.json()["error"]
    assert body["code"] == "invalid"
    assert body["retryable"] is False
    assert "Town is required" in body["errors"]


@pytest.mark.django_db
def test_malformed_json_and_wrong_method(client, owner):
    login(client, owner)
    r = client.post(reverse("restaurants:list"), "[1, 2", content_type=JSON)
    assert r.status_code == 422
    assert r.json()["error"]["errors"] == ["Malformed JSON body"]

    r = client.delete(reverse("restaurants:list"))
    assert r.status_code == 405
    assert r["Allow"] == "GET, POST"


@pytest.mark.django_db
def test_restaurant_and_menu_endpoints(client, owner, restaurant_data):
    login(client, owner)
    r = client.post(reverse("restaurants:list"), restaurant_data, content_type=JSON)
    assert r.status_code == 201
    restaurant_id = r.json()["restaurant_id"]
    assert r.json()["restaurant"]["delivery_fee"] == "2.00"

    r = client.post(
        reverse("menu:restaurant_menu", args=[restaurant_id]),
        {"name": "Penne", "description": "Tomato", "price": "5.00", "category": "Pasta"},
        content_type=JSON,
    )
    assert r.status_code == 201
    item_id = r.json()["item"]["id"]

    r = client.patch(reverse("menu:item_detail", args=[item_id]), {"available": False}, content_type=JSON)
    assert r.json()["item"]["available"] is False

    r = client.get(reverse("restaurants:mine"))
    assert r.json()["restaurant"]["id"] == restaurant_id

    r = client.patch(reverse("restaurants:detail", args=[restaurant_id]), {"rating": 5}, content_type=JSON)
    assert r.status_code == 422

    assert client.delete(reverse("menu:item_detail", args=[item_id])).status_code == 204


@pytest.mark.django_db
def test_order_flow_over_http(client, customer, owner, driver, restaurant, order_payload):
    login(client, customer)
    r = client.post(reverse("orders:list"), order_payload, content_type=JSON)
    assert r.status_code == 201
    order = r.json()["order"]
    assert (order["subtotal"], order["total"], order["status"]) == ("13.00", "15.00", "pending")

    r = client.post(reverse("orders:update_status", args=[order["id"]]), {"status": "confirmed"}, content_type=JSON)
    assert r.status_code == 403

    login(client, owner)
    for status in ("confirmed", "preparing", "ready"):
        r = client.post(reverse("orders:update_status", args=[order["id"]]), {"status": status}, content_type=JSON)
        assert r.status_code == 200
    r = client.post(reverse("orders:update_status", args=[order["id"]]), {"status": "pending"}, content_type=JSON)
    assert r.status_code == 409
    assert r.json()["error"]["code"] == "invalid_transition"

    r = client.get(reverse("orders:restaurant_orders", args=[restaurant.id]))
    assert [o["id"] for o in r.json()["orders"]] == [order["id"]]

    login(client, driver)
    r = client.get(reverse("orders:available"))
    assert [o["id"] for o in r.json()["orders"]] == [order["id"]]
    r = client.post(reverse("orders:accept", args=[order["id"]]))
    assert r.status_code == 200
    r = client.post(reverse("orders:accept", args=[order["id"]]))
    assert r.status_code == 409

    r = client.post(reverse("orders:update_status", args=[order["id"]]), {"status": "delivered"}, content_type=JSON)
    assert r.json()["order"]["status"] == "delivered"

    r = client.get(reverse("orders:history", args=[order["id"]]))
    assert [h["status"] for h in r.json()["history"]][-2:] == ["delivering", "delivered"]

    login(client, customer)
    r = client.post(
        reverse("reviews:restaurant_reviews", args=[restaurant.id]),
        {"order_id": order["id"], "rating": 5, "comment": "Great"},
        content_type=JSON,
    )
    assert r.status_code == 201
    r = client.get(reverse("restaurants:detail", args=[restaurant.id]))
    assert r.json()["restaurant"]["rating"] == 5.0
    r = client.get(reverse("reviews:restaurant_reviews", args=[restaurant.id]))
    assert r.json()["reviews"][0]["customer"]["name"] == customer.name


@pytest.mark.django_db
def test_unknown_order_is_404(client, customer):
    login(client, customer)
    r = client.get(reverse("orders:detail", args=["00000000-0000-0000-0000-000000000000"]))
    assert r.status_code == 404


@pytest.mark.django_db
def test_csrf_token_round_trip(customer):
    client = Client(enforce_csrf_checks=True)
    payload = {"email": customer.email, "password": PASSWORD}

    r = client.post(reverse("accounts:login"), payload, content_type=JSON)
    assert r.status_code == 403
    assert r["Content-Type"] == JSON
    assert r.json()["error"]["code"] == "csrf_failed"

    r = client.get(reverse("accounts:csrf"))
    assert r.status_code == 200
    assert r.json()["csrf_token"]
    token = client.cookies["csrftoken"].value

    r = client.post(reverse("accounts:login"), payload, content_type=JSON, HTTP_X_CSRFTOKEN=token)
    assert r.status_code == 200

    # Login rotates the token; the fresh cookie is what the next write echoes.
    r = client.post(reverse("accounts:logout"), HTTP_X_CSRFTOKEN=client.cookies["csrftoken"].value)
    assert r.status_code == 204
