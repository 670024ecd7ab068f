from django.urls import path
from . import views

app_name = "menu"

urlpatterns = [
    path("restaurants/<uuid:restaurant_id>/menu", views.restaurant_menu, name="restaurant_menu"),
    path("menu/<uuid:item_id>", views.menu_item_detail, name="item_detail"),
]
