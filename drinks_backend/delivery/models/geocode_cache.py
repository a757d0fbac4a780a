# delivery/models/geocode_cache.py

from django.db import models


class GeocodeCacheEntry(models.Model):
    """
    Persistent geocoder cache row, keyed by the exact address string.
    Rows past the TTL are ignored on read and overwritten on the next lookup.
    """

    address = models.CharField(max_length=500, unique=True)
    lat = models.FloatField()
    lng = models.FloatField()
    resolved_at = models.DateTimeField()

    class Meta:
        verbose_name = "geocode cache entry"
        verbose_name_plural = "geocode cache entries"

    def __str__(self):
        return f"{self.address} -> ({self.lat}, {self.lng})"
