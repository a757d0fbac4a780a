# products/models/product.py

import uuid
from decimal import ROUND_HALF_UP, Decimal

from django.core.exceptions import ValidationError
from django.db import models

from .category import Category

TWOPLACES = Decimal("0.01")


class Product(models.Model):
    """
    Represents a sellable drink (or snack, ice, etc).

    STOCK MODEL:
    - stock is a plain non-negative unit count on the product row
    - every change goes through products.services.inventory, which writes a StockLog
    - order creation decrements are floored at zero, never negative

    PRICING:
    - cost_price is what the store pays
    - sale_price is what the customer pays
    - profit_margin is informational (percent), kept for reports
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
    )

    name = models.CharField(max_length=255, db_index=True)
    description = models.TextField(blank=True)
    image_url = models.URLField(blank=True)

    cost_price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    profit_margin = models.DecimalField(max_digits=6, decimal_places=2, default=Decimal("0.00"))
    sale_price = models.DecimalField(max_digits=10, decimal_places=2)

    stock = models.PositiveIntegerField(default=0)

    product_type = models.CharField(max_length=50, blank=True)

    is_active = models.BooleanField(default=True)
    sort_order = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["sort_order", "name"]
        indexes = [
            models.Index(fields=["is_active", "stock"], name="product_active_stock_idx"),
        ]

    def __str__(self):
        return self.name

    def clean(self):
        if self.sale_price is None or Decimal(self.sale_price) <= 0:
            raise ValidationError("Sale price must be greater than zero")

        if self.cost_price is not None and Decimal(self.cost_price) < 0:
            raise ValidationError("Cost price cannot be negative")

    @property
    def profit_per_unit(self) -> Decimal:
        return (Decimal(self.sale_price) - Decimal(self.cost_price)).quantize(
            TWOPLACES, rounding=ROUND_HALF_UP
        )
