from django.contrib.auth.models import AbstractUser
from django.db import models
from django.db.models import Q, UniqueConstraint
from django.db.models.functions import Lower

from apps.common.models import BaseModel


class Role(models.TextChoices):
    CUSTOMER = "customer", "Customer"
    OWNER = "owner", "Restaurant owner"
    AGENT = "agent", "Delivery agent"
    ADMIN = "admin", "Admin"
    MANAGER = "manager", "Manager"
    DRIVER = "driver", "Driver"


# Roles that may carry orders out.
DELIVERY_ROLES = frozenset({Role.DRIVER, Role.AGENT})


class User(BaseModel, AbstractUser):
    """Custom User with UUID primary key, timestamps and an application role.

    Email is the login identifier and is unique case-insensitively; the
    username column mirrors it so Django's auth machinery keeps working.
    The role is chosen at registration and is never changed by profile edits.
    """

    email = models.EmailField("email address")
    name = models.CharField(max_length=160)
    phone = models.CharField(max_length=40, blank=True)
    town = models.CharField(max_length=120, blank=True)
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.CUSTOMER)

    class Meta(AbstractUser.Meta):
        constraints = [
            UniqueConstraint(Lower("email"), name="accounts_user_email_lower_uniq", violation_error_message="Email already registered"),
            models.CheckConstraint(condition=Q(role__in=Role.values), name="accounts_user_role_valid"),
        ]

    def save(self, *args, **kwargs):
        if self.email:
            self.email = str(self.email).strip().lower()
        return super().save(*args, **kwargs)

    @property
    def is_delivery_agent(self) -> bool:
        return self.role in DELIVERY_ROLES
