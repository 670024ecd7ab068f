from django.contrib import admin

from .models import Order, OrderItem, OrderStatusChange


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = ("position", "menu_item", "name", "quantity", "price")


class OrderStatusChangeInline(admin.TabularInline):
    model = OrderStatusChange
    extra = 0
    readonly_fields = ("sequence", "status", "source", "note", "created_at")
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "restaurant", "customer", "driver", "status", "total", "created_at")
    list_filter = ("status", "restaurant")
    search_fields = ("id", "customer__email", "customer_phone", "restaurant__name")
    date_hierarchy = "created_at"
    ordering = ("-created_at",)
    inlines = [OrderItemInline, OrderStatusChangeInline]
    list_select_related = ("restaurant", "customer", "driver")
