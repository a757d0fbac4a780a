# delivery/services/geocoding.py

"""
GEOCODING (Nominatim) WITH A TTL CACHE

Geocoder.geocode(full_address) -> LookupResult[Coordinates]

Flow:
1) cache.get(address); a hit younger than the TTL is returned as-is
2) miss or stale -> one search request (limit=1, country-restricted)
3) empty result -> NOT_FOUND; request/parse failure -> SERVICE_ERROR
4) success -> cache.put(address, coords, now) and FOUND; a failed cache write
   is logged and the coordinates are still returned

The cache is injected. Two implementations ship here:
- InMemoryGeocodeCache (tests, single process)
- DatabaseGeocodeCache (default; shared across workers)

Concurrent misses for the same address may both hit the geocoder; the last
write wins, which is harmless because both store the same coordinates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional, Protocol

from django.conf import settings
from django.db import DatabaseError
from django.utils import timezone

from delivery.models import GeocodeCacheEntry

from . import http
from .exceptions import ExternalServiceError
from .results import Coordinates, LookupResult

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 24 * 60 * 60


@dataclass(frozen=True)
class CachedCoordinates:
    coords: Coordinates
    resolved_at: datetime


class GeocodeCache(Protocol):
    def get(self, key: str) -> Optional[CachedCoordinates]: ...

    def put(self, key: str, coords: Coordinates, resolved_at: datetime) -> None: ...


class InMemoryGeocodeCache:
    def __init__(self):
        self._entries: dict[str, CachedCoordinates] = {}

    def get(self, key: str) -> Optional[CachedCoordinates]:
        return self._entries.get(key)

    def put(self, key: str, coords: Coordinates, resolved_at: datetime) -> None:
        self._entries[key] = CachedCoordinates(coords=coords, resolved_at=resolved_at)

    def __len__(self):
        return len(self._entries)


class DatabaseGeocodeCache:
    def get(self, key: str) -> Optional[CachedCoordinates]:
        row = GeocodeCacheEntry.objects.filter(address=key).first()
        if row is None:
            return None
        return CachedCoordinates(
            coords=Coordinates(lat=row.lat, lng=row.lng), resolved_at=row.resolved_at
        )

    def put(self, key: str, coords: Coordinates, resolved_at: datetime) -> None:
        GeocodeCacheEntry.objects.update_or_create(
            address=key,
            defaults={"lat": coords.lat, "lng": coords.lng, "resolved_at": resolved_at},
        )


def _parse_coordinates(match) -> Coordinates:
    try:
        return Coordinates(lat=float(match["lat"]), lng=float(match["lon"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise ExternalServiceError(f"Malformed geocoder match: {match!r}") from exc


class Geocoder:
    def __init__(
        self,
        *,
        cache: GeocodeCache | None = None,
        ttl_seconds: int | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.cache = cache if cache is not None else DatabaseGeocodeCache()
        self.ttl = timedelta(
            seconds=ttl_seconds
            if ttl_seconds is not None
            else getattr(settings, "GEOCODE_CACHE_TTL_SECONDS", DEFAULT_TTL_SECONDS)
        )
        self.clock = clock or timezone.now

    def _is_fresh(self, entry: CachedCoordinates, now: datetime) -> bool:
        return now - entry.resolved_at < self.ttl

    def _search(self, full_address: str):
        return http.request_json(
            getattr(settings, "GEOCODER_URL", "") or "https://nominatim.openstreetmap.org/search",
            params={
                "q": full_address,
                "format": "json",
                "addressdetails": 1,
                "limit": 1,
                "countrycodes": getattr(settings, "DELIVERY_COUNTRY_CODE", "br"),
            },
            headers={"User-Agent": getattr(settings, "GEOCODER_USER_AGENT", http.DEFAULT_USER_AGENT)},
        )

    def geocode(self, full_address: str) -> LookupResult:
        key = (full_address or "").strip()
        if not key:
            return LookupResult.not_found("empty_address")

        now = self.clock()
        cached = self.cache.get(key)
        if cached is not None and self._is_fresh(cached, now):
            return LookupResult.found(cached.coords)

        try:
            matches = self._search(key)
            if not isinstance(matches, list):
                raise ExternalServiceError("Geocoder returned a non-list payload")
            if not matches:
                return LookupResult.not_found("no_geocoder_match")
            coords = _parse_coordinates(matches[0])
        except ExternalServiceError as exc:
            logger.warning("geocode_failed", extra={"address": key, "error": str(exc)})
            return LookupResult.service_error(str(exc))

        try:
            self.cache.put(key, coords, now)
        except DatabaseError as exc:
            logger.warning("geocode_cache_write_failed", extra={"address": key, "error": str(exc)})
        return LookupResult.found(coords)
