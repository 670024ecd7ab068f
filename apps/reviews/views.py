from django.http import HttpRequest, HttpResponse, JsonResponse

from apps.common.http import api_view, json_body
from . import services
from .serializers import serialize_review


@api_view(["GET", "POST"])
def restaurant_reviews(request: HttpRequest, restaurant_id) -> HttpResponse:
    if request.method == "POST":
        data = {**json_body(request), "restaurant_id": str(restaurant_id)}
        review = services.create_review(request.user, data)
        return JsonResponse({"review": serialize_review(review)}, status=201)
    reviews = services.list_restaurant_reviews(restaurant_id)
    return JsonResponse({"reviews": [serialize_review(r) for r in reviews]})
