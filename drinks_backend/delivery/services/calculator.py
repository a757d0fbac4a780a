# delivery/services/calculator.py

"""
DELIVERY CALCULATION (orchestration)

calculate_delivery(address_parts, store_lat, store_lng, ...) -> LookupResult[DeliveryCalculation]

Steps:
1) street/neighborhood/city/state missing -> backfill from the postal code
2) still missing -> NOT_FOUND("incomplete_address")
3) geocode the single-line address; any failure -> NOT_FOUND("address_not_found")
4) distance -> fee -> ETA

Nothing is persisted here. Attaching the result to an order belongs to
orders.services.order_service.attach_delivery_calculation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Mapping

from .geocoding import Geocoder
from .postal_lookup import resolve_address_by_postal_code
from .pricing import (
    DEFAULT_BASE_FEE,
    DEFAULT_BASE_KM,
    DEFAULT_PER_KM_BEYOND,
    build_full_address,
    compute_delivery_fee,
    estimate_eta_minutes,
    haversine_distance_km,
)
from .results import LookupResult

logger = logging.getLogger(__name__)

REQUIRED_PARTS = ("street", "neighborhood", "city", "state")
BACKFILL_PARTS = ("street", "neighborhood", "city", "state")


@dataclass(frozen=True)
class DeliveryCalculation:
    distance_km: float
    fee: Decimal
    eta_minutes: int
    lat: float
    lng: float


def _clean_parts(address_parts) -> dict:
    if isinstance(address_parts, Mapping):
        get = address_parts.get
    else:
        def get(key, default=""):
            return getattr(address_parts, key, default)

    keys = ("street", "number", "neighborhood", "city", "state", "postal_code")
    return {k: str(get(k, "") or "").strip() for k in keys}


def _missing(parts: dict) -> list[str]:
    return [k for k in REQUIRED_PARTS if not parts.get(k)]


def _backfill(parts: dict, postal_lookup: Callable[[str], LookupResult]) -> dict:
    if not parts.get("postal_code"):
        return parts

    result = postal_lookup(parts["postal_code"])
    if not result.ok:
        logger.info(
            "postal_backfill_unavailable",
            extra={"postal_code": parts["postal_code"], "kind": result.kind, "detail": result.detail},
        )
        return parts

    found = result.data
    filled = dict(parts)
    for key in BACKFILL_PARTS:
        if not filled.get(key):
            filled[key] = getattr(found, key, "") or ""
    return filled


def calculate_delivery(
    address_parts,
    store_lat,
    store_lng,
    *,
    base_fee=DEFAULT_BASE_FEE,
    base_km=DEFAULT_BASE_KM,
    per_km_beyond=DEFAULT_PER_KM_BEYOND,
    geocoder: Geocoder | None = None,
    postal_lookup: Callable[[str], LookupResult] | None = None,
) -> LookupResult:
    parts = _clean_parts(address_parts)

    if _missing(parts):
        parts = _backfill(parts, postal_lookup or resolve_address_by_postal_code)
        if _missing(parts):
            return LookupResult.not_found("incomplete_address")

    full_address = build_full_address(
        parts["street"],
        parts["number"],
        parts["neighborhood"],
        parts["city"],
        parts["state"],
    )

    geocoded = (geocoder or Geocoder()).geocode(full_address)
    if not geocoded.ok:
        logger.info(
            "delivery_address_not_found",
            extra={"address": full_address, "kind": geocoded.kind, "detail": geocoded.detail},
        )
        return LookupResult.not_found("address_not_found")

    coords = geocoded.data
    distance = haversine_distance_km(store_lat, store_lng, coords.lat, coords.lng)

    return LookupResult.found(
        DeliveryCalculation(
            distance_km=distance,
            fee=compute_delivery_fee(distance, base_fee, base_km, per_km_beyond),
            eta_minutes=estimate_eta_minutes(distance),
            lat=coords.lat,
            lng=coords.lng,
        )
    )


def calculate_for_store(address_parts, store_settings, **kwargs) -> LookupResult:
    """calculate_delivery using the coordinates and fee parameters of StoreSettings."""
    return calculate_delivery(
        address_parts,
        store_settings.store_lat,
        store_settings.store_lng,
        base_fee=store_settings.delivery_base_fee,
        base_km=store_settings.delivery_base_km,
        per_km_beyond=store_settings.delivery_fee_per_km,
        **kwargs,
    )
