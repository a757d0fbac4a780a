# products/models/stock_log.py

"""
STOCK LEDGER

Immutable record of one stock change on a product.

GUARANTEES:
- Append-only (no updates, no deletes)
- previous_stock and new_stock are the values actually stored on the product
- change is the signed delta that was *requested*; with floored decrements
  it can differ from new_stock - previous_stock
"""

import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from .product import Product


class StockLog(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    product = models.ForeignKey(
        Product, on_delete=models.CASCADE, related_name="stock_logs"
    )

    previous_stock = models.PositiveIntegerField()
    new_stock = models.PositiveIntegerField()
    change = models.IntegerField()
    reason = models.CharField(max_length=255)

    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_logs",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["product", "created_at"], name="stocklog_product_created_idx"),
        ]

    def clean(self):
        if not (self.reason or "").strip():
            raise ValidationError("reason is required")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("StockLog records are immutable")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("StockLog records are immutable and cannot be deleted")

    def __str__(self):
        return f"{self.product_id} | {self.previous_stock} -> {self.new_stock} | {self.reason}"
