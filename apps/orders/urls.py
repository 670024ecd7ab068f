from django.urls import path
from . import views

app_name = "orders"

urlpatterns = [
    path("orders", views.orders, name="list"),
    path("orders/driver", views.driver_orders, name="driver"),
    path("orders/available", views.available_deliveries, name="available"),
    path("orders/<uuid:order_id>", views.order_detail, name="detail"),
    path("orders/<uuid:order_id>/status", views.update_status, name="update_status"),
    path("orders/<uuid:order_id>/accept", views.accept, name="accept"),
    path("orders/<uuid:order_id>/history", views.history, name="history"),
    path("restaurants/<uuid:restaurant_id>/orders", views.restaurant_orders, name="restaurant_orders"),
]
