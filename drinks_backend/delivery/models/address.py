# delivery/models/address.py

import re
import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


def normalize_postal_code(value) -> str:
    return re.sub(r"\D", "", str(value or ""))


class Address(models.Model):
    """
    Customer delivery address.

    postal_code is stored as digits only. At most one default address per
    customer; saving a new default clears the previous one.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="addresses",
    )

    street = models.CharField(max_length=255, blank=True)
    number = models.CharField(max_length=20, blank=True)
    complement = models.CharField(max_length=120, blank=True)
    neighborhood = models.CharField(max_length=120, blank=True)
    city = models.CharField(max_length=120, blank=True)
    state = models.CharField(max_length=2, blank=True)
    postal_code = models.CharField(max_length=8, blank=True)
    notes = models.CharField(max_length=255, blank=True)

    is_default = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-is_default", "-created_at"]

    def __str__(self):
        parts = [self.street, self.number, self.neighborhood, self.city]
        return ", ".join(p for p in parts if p) or self.postal_code

    def clean(self):
        self.postal_code = normalize_postal_code(self.postal_code)
        if self.postal_code and len(self.postal_code) != 8:
            raise ValidationError({"postal_code": "Postal code must have 8 digits."})
        self.state = (self.state or "").strip().upper()

    def save(self, *args, **kwargs):
        self.postal_code = normalize_postal_code(self.postal_code)
        super().save(*args, **kwargs)

        if self.is_default and self.customer_id:
            Address.objects.filter(customer_id=self.customer_id, is_default=True).exclude(
                pk=self.pk
            ).update(is_default=False)
