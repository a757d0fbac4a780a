from .store_settings import StoreSettingsView

__all__ = ["StoreSettingsView"]
