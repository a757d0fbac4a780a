from .calculator import DeliveryCalculation, calculate_delivery, calculate_for_store
from .exceptions import AddressUnresolvableError, DeliveryServiceError, ExternalServiceError
from .geocoding import DatabaseGeocodeCache, Geocoder, InMemoryGeocodeCache
from .postal_lookup import resolve_address_by_postal_code
from .pricing import (
    build_full_address,
    compute_delivery_fee,
    estimate_eta_minutes,
    haversine_distance_km,
)
from .results import Coordinates, LookupResult, PostalAddress

__all__ = [
    "AddressUnresolvableError",
    "Coordinates",
    "DatabaseGeocodeCache",
    "DeliveryCalculation",
    "DeliveryServiceError",
    "ExternalServiceError",
    "Geocoder",
    "InMemoryGeocodeCache",
    "LookupResult",
    "PostalAddress",
    "build_full_address",
    "calculate_delivery",
    "calculate_for_store",
    "compute_delivery_fee",
    "estimate_eta_minutes",
    "haversine_distance_km",
    "resolve_address_by_postal_code",
]
