# store/models/store_settings.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models


class StoreSettings(models.Model):
    """
    Single-row store configuration.

    Guarantees:
    - exactly one row (pk=1), created lazily by load()
    - fee parameters are never negative
    - coordinates are either both set or both empty
    """

    SINGLETON_PK = 1

    store_address = models.CharField(max_length=255, blank=True)
    store_lat = models.FloatField(null=True, blank=True)
    store_lng = models.FloatField(null=True, blank=True)

    delivery_base_fee = models.DecimalField(
        max_digits=8, decimal_places=2, default=Decimal("6.90")
    )
    delivery_base_km = models.DecimalField(
        max_digits=6, decimal_places=2, default=Decimal("3.00")
    )
    delivery_fee_per_km = models.DecimalField(
        max_digits=8, decimal_places=2, default=Decimal("1.50")
    )
    max_delivery_distance_km = models.DecimalField(
        max_digits=6, decimal_places=2, default=Decimal("15.00")
    )

    pix_key = models.CharField(max_length=140, blank=True)
    opening_hours = models.JSONField(null=True, blank=True)
    is_open = models.BooleanField(default=True)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "store settings"
        verbose_name_plural = "store settings"

    def __str__(self):
        return self.store_address or "Store settings"

    @classmethod
    def load(cls) -> "StoreSettings":
        obj, _ = cls.objects.get_or_create(pk=cls.SINGLETON_PK)
        return obj

    @property
    def has_location(self) -> bool:
        return self.store_lat is not None and self.store_lng is not None

    def clean(self):
        for field in (
            "delivery_base_fee",
            "delivery_base_km",
            "delivery_fee_per_km",
            "max_delivery_distance_km",
        ):
            value = getattr(self, field)
            if value is not None and value < 0:
                raise ValidationError({field: "Must be zero or greater."})

        if (self.store_lat is None) != (self.store_lng is None):
            raise ValidationError("store_lat and store_lng must be set together.")

        if self.store_lat is not None and not -90 <= self.store_lat <= 90:
            raise ValidationError({"store_lat": "Latitude out of range."})
        if self.store_lng is not None and not -180 <= self.store_lng <= 180:
            raise ValidationError({"store_lng": "Longitude out of range."})

    def save(self, *args, **kwargs):
        self.pk = self.SINGLETON_PK
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Store settings cannot be deleted.")
