from .store_settings import StoreSettings

__all__ = ["StoreSettings"]
