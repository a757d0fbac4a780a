"""
======================================================
PATH: store/migrations/0001_initial.py
======================================================
MIGRATION: CREATE StoreSettings (single-row store configuration)
"""

from __future__ import annotations

from decimal import Decimal

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="StoreSettings",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("store_address", models.CharField(blank=True, max_length=255)),
                ("store_lat", models.FloatField(blank=True, null=True)),
                ("store_lng", models.FloatField(blank=True, null=True)),
                (
                    "delivery_base_fee",
                    models.DecimalField(decimal_places=2, default=Decimal("6.90"), max_digits=8),
                ),
                (
                    "delivery_base_km",
                    models.DecimalField(decimal_places=2, default=Decimal("3.00"), max_digits=6),
                ),
                (
                    "delivery_fee_per_km",
                    models.DecimalField(decimal_places=2, default=Decimal("1.50"), max_digits=8),
                ),
                (
                    "max_delivery_distance_km",
                    models.DecimalField(decimal_places=2, default=Decimal("15.00"), max_digits=6),
                ),
                ("pix_key", models.CharField(blank=True, max_length=140)),
                ("opening_hours", models.JSONField(blank=True, null=True)),
                ("is_open", models.BooleanField(default=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "store settings",
                "verbose_name_plural": "store settings",
            },
        ),
    ]
