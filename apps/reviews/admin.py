from django.contrib import admin

from .models import Review


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ("restaurant", "customer", "order", "rating", "created_at")
    list_filter = ("rating",)
    search_fields = ("restaurant__name", "customer__email", "comment")
    ordering = ("-created_at",)
    list_select_related = ("restaurant", "customer", "order")
