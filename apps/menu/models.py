from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q

from apps.common.models import BaseModel


class MenuItem(BaseModel):
    restaurant = models.ForeignKey("restaurants.Restaurant", on_delete=models.CASCADE, related_name="menu_items")
    name = models.CharField(max_length=160)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=80)
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0.01)])
    image = models.URLField(max_length=500, blank=True)
    available = models.BooleanField(default=True)

    class Meta:
        indexes = [models.Index(fields=["restaurant", "category"], name="menu_item_rest_cat_idx")]
        constraints = [models.CheckConstraint(condition=Q(price__gt=0), name="menu_item_price_gt_0")]

    def __str__(self) -> str:
        return self.name
