from django.contrib import admin

from .models import MenuItem


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ("name", "restaurant", "category", "price", "available", "created_at")
    list_filter = ("available", "category")
    search_fields = ("name", "description", "category", "restaurant__name")
    ordering = ("restaurant", "category", "name")
    list_select_related = ("restaurant",)
