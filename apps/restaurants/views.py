from django.http import HttpRequest, HttpResponse, JsonResponse

from apps.common.http import api_view, json_body
from . import services
from .serializers import serialize_restaurant


@api_view(["GET", "POST"])
def restaurants(request: HttpRequest) -> HttpResponse:
    if request.method == "POST":
        restaurant = services.create_restaurant(request.user, json_body(request))
        return JsonResponse({"restaurant_id": str(restaurant.id), "restaurant": serialize_restaurant(restaurant)}, status=201)
    items = services.list_active_restaurants(town=request.GET.get("town"))
    return JsonResponse({"restaurants": [serialize_restaurant(r) for r in items]})


@api_view(["GET"])
def my_restaurant(request: HttpRequest) -> HttpResponse:
    restaurant = services.get_my_restaurant(request.user)
    return JsonResponse({"restaurant": serialize_restaurant(restaurant) if restaurant else None})


@api_view(["GET", "PATCH"])
def restaurant_detail(request: HttpRequest, restaurant_id) -> HttpResponse:
    if request.method == "PATCH":
        restaurant = services.update_restaurant(request.user, restaurant_id, json_body(request))
    else:
        restaurant = services.get_restaurant(restaurant_id, request.user)
    return JsonResponse({"restaurant": serialize_restaurant(restaurant)})
