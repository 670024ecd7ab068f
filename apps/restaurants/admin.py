from django.contrib import admin

from .models import Restaurant


@admin.register(Restaurant)
class RestaurantAdmin(admin.ModelAdmin):
    list_display = ("name", "owner", "town", "rating", "delivery_fee", "min_order", "is_active", "created_at")
    list_filter = ("is_active", "town")
    search_fields = ("name", "town", "address", "owner__email")
    ordering = ("-created_at",)
    readonly_fields = ("rating",)
    list_select_related = ("owner",)
