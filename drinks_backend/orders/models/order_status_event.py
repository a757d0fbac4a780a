# orders/models/order_status_event.py

import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from .order import Order


class OrderStatusEvent(models.Model):
    """
    Audit row for one successful status change. Created once, never updated
    or deleted.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="status_events")

    from_status = models.CharField(max_length=16)
    to_status = models.CharField(max_length=16)

    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_status_events",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("OrderStatusEvent records are immutable")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("OrderStatusEvent records cannot be deleted")

    def __str__(self):
        return f"{self.order_id} | {self.from_status} -> {self.to_status}"
