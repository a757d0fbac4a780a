# delivery/services/pricing.py

"""
DELIVERY PRICING (pure functions)

- haversine_distance_km: great-circle distance, mean Earth radius, 2 dp
- compute_delivery_fee: flat base fee up to base_km, then per-km beyond
- estimate_eta_minutes: 10 min handling + 4 min per km
- build_full_address: single-line address for the geocoder
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, ROUND_UP, Decimal

from django.conf import settings

EARTH_RADIUS_KM = 6371.0

DEFAULT_BASE_FEE = Decimal("6.90")
DEFAULT_BASE_KM = Decimal("3")
DEFAULT_PER_KM_BEYOND = Decimal("1.50")

ETA_BASE_MINUTES = 10
ETA_MINUTES_PER_KM = 4

TWOPLACES = Decimal("0.01")


def _dec(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def haversine_distance_km(lat1, lon1, lat2, lon2) -> float:
    phi1 = math.radians(float(lat1))
    phi2 = math.radians(float(lat2))
    d_phi = math.radians(float(lat2) - float(lat1))
    d_lambda = math.radians(float(lon2) - float(lon1))

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return round(EARTH_RADIUS_KM * c, 2)


def compute_delivery_fee(
    distance_km,
    base_fee=DEFAULT_BASE_FEE,
    base_km=DEFAULT_BASE_KM,
    per_km_beyond=DEFAULT_PER_KM_BEYOND,
) -> Decimal:
    """
    Fee in currency units, 2 dp.

    Beyond base_km the fee is rounded *up* to the cent, so any distance past
    the flat band costs strictly more than the base fee.
    """
    distance = _dec(distance_km)
    base_fee = _dec(base_fee)
    base_km = _dec(base_km)

    if distance <= base_km:
        return base_fee.quantize(TWOPLACES, rounding=ROUND_HALF_UP)

    fee = base_fee + (distance - base_km) * _dec(per_km_beyond)
    return fee.quantize(TWOPLACES, rounding=ROUND_UP)


def estimate_eta_minutes(distance_km) -> int:
    minutes = Decimal(ETA_BASE_MINUTES) + _dec(distance_km) * ETA_MINUTES_PER_KM
    return int(minutes.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def build_full_address(street, number, neighborhood, city, state, country=None) -> str:
    if country is None:
        country = getattr(settings, "DELIVERY_COUNTRY_NAME", "Brasil")
    parts = [street, number, neighborhood, city, state, country]
    return ", ".join(str(p).strip() for p in parts if p and str(p).strip())
