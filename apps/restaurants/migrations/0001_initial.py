import uuid

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Restaurant",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=160)),
                ("description", models.TextField(blank=True)),
                ("image", models.URLField(blank=True, max_length=500)),
                ("town", models.CharField(max_length=120)),
                ("address", models.CharField(max_length=255)),
                ("phone", models.CharField(max_length=40)),
                ("rating", models.FloatField(default=0, validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(5)])),
                ("delivery_time", models.CharField(max_length=60)),
                ("delivery_fee", models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ("min_order", models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ("categories", models.JSONField(default=list)),
                ("is_active", models.BooleanField(default=True)),
                ("owner", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="restaurants", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "indexes": [
                    models.Index(fields=["owner"], name="restaurants_owner_idx"),
                    models.Index(fields=["town"], name="restaurants_town_idx"),
                    models.Index(fields=["is_active", "created_at"], name="restaurants_active_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("delivery_fee__gte", 0)), name="restaurants_fee_gte_0"),
                    models.CheckConstraint(condition=models.Q(("min_order__gte", 0)), name="restaurants_min_order_gte_0"),
                    models.CheckConstraint(condition=models.Q(("rating__gte", 0), ("rating__lte", 5)), name="restaurants_rating_range"),
                ],
            },
        ),
    ]
