from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q

from apps.common.models import BaseModel


class Restaurant(BaseModel):
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="restaurants")
    name = models.CharField(max_length=160)
    description = models.TextField(blank=True)
    image = models.URLField(max_length=500, blank=True)
    town = models.CharField(max_length=120)
    address = models.CharField(max_length=255)
    phone = models.CharField(max_length=40)
    # Written only by review aggregation.
    rating = models.FloatField(default=0, validators=[MinValueValidator(0), MaxValueValidator(5)])
    delivery_time = models.CharField(max_length=60)
    delivery_fee = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    min_order = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    categories = models.JSONField(default=list)
    is_active = models.BooleanField(default=True)

    class Meta:
        indexes = [
            models.Index(fields=["owner"], name="restaurants_owner_idx"),
            models.Index(fields=["town"], name="restaurants_town_idx"),
            models.Index(fields=["is_active", "created_at"], name="restaurants_active_idx"),
        ]
        constraints = [
            models.CheckConstraint(condition=Q(delivery_fee__gte=0), name="restaurants_fee_gte_0"),
            models.CheckConstraint(condition=Q(min_order__gte=0), name="restaurants_min_order_gte_0"),
            models.CheckConstraint(condition=Q(rating__gte=0, rating__lte=5), name="restaurants_rating_range"),
        ]

    def __str__(self) -> str:
        return self.name

    def is_owned_by(self, user) -> bool:
        return user is not None and getattr(user, "pk", None) == self.owner_id
