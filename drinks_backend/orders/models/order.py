# orders/models/order.py

import uuid
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

TWOPLACES = Decimal("0.01")


def _money(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


class Order(models.Model):
    """
    Customer order (delivery or counter pickup).

    Rules:
    - status only changes through orders.services (transition table per order_type)
    - each forward status stamps its *_at field once, the first time it is reached
    - total = subtotal - discount + delivery_fee (recompute_total)
    - original_delivery_fee is captured on the first manual fee override only
    """

    TYPE_DELIVERY = "delivery"
    TYPE_COUNTER = "counter"

    TYPE_CHOICES = [
        (TYPE_DELIVERY, "Delivery"),
        (TYPE_COUNTER, "Counter"),
    ]

    STATUS_PENDING = "pending"
    STATUS_ACCEPTED = "accepted"
    STATUS_PREPARING = "preparing"
    STATUS_READY = "ready"
    STATUS_DISPATCHED = "dispatched"
    STATUS_ARRIVED = "arrived"
    STATUS_DELIVERED = "delivered"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_ACCEPTED, "Accepted"),
        (STATUS_PREPARING, "Preparing"),
        (STATUS_READY, "Ready"),
        (STATUS_DISPATCHED, "Dispatched"),
        (STATUS_ARRIVED, "Arrived"),
        (STATUS_DELIVERED, "Delivered"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    PAYMENT_CASH = "cash"
    PAYMENT_PIX = "pix"
    PAYMENT_CARD = "card"

    PAYMENT_CHOICES = [
        (PAYMENT_CASH, "Cash"),
        (PAYMENT_PIX, "Pix"),
        (PAYMENT_CARD, "Card"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order_no = models.CharField(
        max_length=64,
        unique=True,
        blank=True,
        help_text="System-generated order number",
    )

    order_type = models.CharField(
        max_length=16, choices=TYPE_CHOICES, default=TYPE_DELIVERY
    )
    status = models.CharField(
        max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING
    )

    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    customer_name = models.CharField(max_length=150, blank=True, default="")

    address = models.ForeignKey(
        "delivery.Address",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    motoboy = models.ForeignKey(
        "delivery.Motoboy",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )

    # Money fields (server authoritative)
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    delivery_fee = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    original_delivery_fee = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True
    )
    delivery_fee_adjusted = models.BooleanField(default=False)
    delivery_fee_adjusted_at = models.DateTimeField(null=True, blank=True)
    total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    delivery_distance_km = models.DecimalField(
        max_digits=8, decimal_places=2, null=True, blank=True
    )
    estimated_minutes = models.PositiveIntegerField(null=True, blank=True)

    payment_method = models.CharField(
        max_length=8, choices=PAYMENT_CHOICES, default=PAYMENT_PIX
    )
    change_for = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    notes = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    accepted_at = models.DateTimeField(null=True, blank=True)
    preparing_at = models.DateTimeField(null=True, blank=True)
    ready_at = models.DateTimeField(null=True, blank=True)
    dispatched_at = models.DateTimeField(null=True, blank=True)
    arrived_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="order_status_idx"),
            models.Index(fields=["created_at"], name="order_created_idx"),
            models.Index(fields=["order_type", "status"], name="order_type_status_idx"),
            models.Index(fields=["motoboy", "status"], name="order_motoboy_status_idx"),
        ]

    TERMINAL_STATUSES = frozenset({STATUS_DELIVERED, STATUS_CANCELLED})

    @property
    def is_terminal(self) -> bool:
        return self.status in self.TERMINAL_STATUSES

    @property
    def short_id(self) -> str:
        return str(self.id)[:8]

    def recompute_total(self) -> Decimal:
        self.subtotal = _money(self.subtotal)
        self.discount = _money(self.discount)
        self.delivery_fee = _money(self.delivery_fee)
        self.total = _money(self.subtotal - self.discount + self.delivery_fee)
        return self.total

    def save(self, *args, **kwargs):
        if not self.order_no:
            prefix = timezone.now().strftime("ORD%Y%m%d")
            self.order_no = f"{prefix}-{uuid.uuid4().hex[:8].upper()}"
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.order_no} | {self.order_type} | {self.status} | {self.total}"
