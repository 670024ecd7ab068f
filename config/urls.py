from django.contrib import admin
from django.http import HttpResponse
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/auth/", include("apps.accounts.urls")),
    path("api/", include("apps.restaurants.urls")),
    path("api/", include("apps.menu.urls")),
    path("api/", include("apps.orders.urls")),
    path("api/", include("apps.reviews.urls")),
    # Healthcheck endpoint
    path("healthz", lambda _request: HttpResponse("ok")),
]
