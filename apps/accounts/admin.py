from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin
from django.utils.translation import gettext_lazy as _


User = get_user_model()


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    list_display = ("email", "name", "role", "town", "is_staff", "created_at")
    list_filter = ("role", "is_staff", "is_active")
    search_fields = ("email", "name", "phone", "town")
    ordering = ("email",)

    fieldsets = DjangoUserAdmin.fieldsets + (
        (_("Application profile"), {"fields": ("name", "phone", "town", "role")}),
    )
