from .address import Address
from .geocode_cache import GeocodeCacheEntry
from .motoboy import Motoboy

__all__ = [
    "Address",
    "GeocodeCacheEntry",
    "Motoboy",
]
