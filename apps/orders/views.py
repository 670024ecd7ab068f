from django.http import HttpRequest, HttpResponse, JsonResponse

from apps.common.http import api_view, json_body
from . import services
from .serializers import serialize_order, serialize_status_change


@api_view(["GET", "POST"])
def orders(request: HttpRequest) -> HttpResponse:
    if request.method == "POST":
        order = services.create_order(request.user, json_body(request))
        return JsonResponse({"order": serialize_order(order)}, status=201)
    return JsonResponse({"orders": [serialize_order(o) for o in services.list_customer_orders(request.user)]})


@api_view(["GET"])
def driver_orders(request: HttpRequest) -> HttpResponse:
    return JsonResponse({"orders": [serialize_order(o) for o in services.list_driver_orders(request.user)]})


@api_view(["GET"])
def available_deliveries(request: HttpRequest) -> HttpResponse:
    return JsonResponse({"orders": [serialize_order(o) for o in services.list_available_deliveries(request.user)]})


@api_view(["GET"])
def restaurant_orders(request: HttpRequest, restaurant_id) -> HttpResponse:
    items = services.list_restaurant_orders(request.user, restaurant_id)
    return JsonResponse({"orders": [serialize_order(o) for o in items]})


@api_view(["GET"])
def order_detail(request: HttpRequest, order_id) -> HttpResponse:
    return JsonResponse({"order": serialize_order(services.get_order(request.user, order_id))})


@api_view(["POST"])
def update_status(request: HttpRequest, order_id) -> HttpResponse:
    data = json_body(request)
    order = services.update_order_status(request.user, order_id, data.get("status"), data.get("driver_id"))
    return JsonResponse({"order": serialize_order(order)})


@api_view(["POST"])
def accept(request: HttpRequest, order_id) -> HttpResponse:
    order = services.accept_delivery(request.user, order_id)
    return JsonResponse({"order": serialize_order(order)})


@api_view(["GET"])
def history(request: HttpRequest, order_id) -> HttpResponse:
    changes = services.order_history(request.user, order_id)
    return JsonResponse({"history": [serialize_status_change(c) for c in changes]})
