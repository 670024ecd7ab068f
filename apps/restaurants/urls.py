from django.urls import path
from . import views

app_name = "restaurants"

urlpatterns = [
    path("restaurants", views.restaurants, name="list"),
    path("restaurants/mine", views.my_restaurant, name="mine"),
    path("restaurants/<uuid:restaurant_id>", views.restaurant_detail, name="detail"),
]
