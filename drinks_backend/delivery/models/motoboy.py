# delivery/models/motoboy.py

import uuid

from django.conf import settings
from django.db import models


class Motoboy(models.Model):
    """
    Courier who takes delivery orders out of the store.

    whatsapp is the courier's identity across the system (unique).
    user links the courier to a login with role=motoboy, when one exists.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=150)
    whatsapp = models.CharField(max_length=20, unique=True)
    photo_url = models.URLField(blank=True)
    is_active = models.BooleanField(default=True)

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="motoboy_profile",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.whatsapp})"
