from django.http import HttpRequest, HttpResponse, JsonResponse

from apps.common.http import api_view, json_body
from . import services
from .serializers import serialize_menu_item


@api_view(["GET", "POST"])
def restaurant_menu(request: HttpRequest, restaurant_id) -> HttpResponse:
    if request.method == "POST":
        data = {**json_body(request), "restaurant_id": str(restaurant_id)}
        item = services.create_menu_item(request.user, data)
        return JsonResponse({"item": serialize_menu_item(item)}, status=201)
    items = services.list_menu_items(restaurant_id, request.user)
    return JsonResponse({"items": [serialize_menu_item(i) for i in items]})


@api_view(["PATCH", "DELETE"])
def menu_item_detail(request: HttpRequest, item_id) -> HttpResponse:
    if request.method == "DELETE":
        services.delete_menu_item(request.user, item_id)
        return HttpResponse(status=204)
    item = services.update_menu_item(request.user, item_id, json_body(request))
    return JsonResponse({"item": serialize_menu_item(item)})
