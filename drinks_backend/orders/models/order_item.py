# orders/models/order_item.py

"""
ORDER ITEM (IMMUTABLE SNAPSHOT)

product_id is a plain UUID snapshot, not a foreign key: a line keeps
pointing at the product it was sold as even if the product is removed.
"""

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from .order import Order


class OrderItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")

    product_id = models.UUIDField()
    product_name = models.CharField(max_length=255)

    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(
        max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal("0.00"))]
    )
    total_price = models.DecimalField(max_digits=12, decimal_places=2, editable=False)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["order", "created_at"], name="orderitem_order_created_idx"),
            models.Index(fields=["product_id"], name="orderitem_product_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("OrderItem records are immutable")

        self.full_clean(exclude=["total_price"])
        self.total_price = Decimal(self.unit_price) * Decimal(int(self.quantity))
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("OrderItem records are immutable and cannot be deleted")

    def __str__(self):
        return f"{self.product_name} x {self.quantity}"
