import uuid

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("restaurants", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="MenuItem",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=160)),
                ("description", models.TextField(blank=True)),
                ("category", models.CharField(max_length=80)),
                ("price", models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(0.01)])),
                ("image", models.URLField(blank=True, max_length=500)),
                ("available", models.BooleanField(default=True)),
                ("restaurant", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="menu_items", to="restaurants.restaurant")),
            ],
            options={
                "indexes": [models.Index(fields=["restaurant", "category"], name="menu_item_rest_cat_idx")],
                "constraints": [models.CheckConstraint(condition=models.Q(("price__gt", 0)), name="menu_item_price_gt_0")],
            },
        ),
    ]
