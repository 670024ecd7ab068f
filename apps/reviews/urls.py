from django.urls import path
from . import views

app_name = "reviews"

urlpatterns = [
    path("restaurants/<uuid:restaurant_id>/reviews", views.restaurant_reviews, name="restaurant_reviews"),
]
