# store/apps.py

"""
STORE APP CONFIG

Holds the single StoreSettings row: store location, opening state and
the delivery fee parameters used by delivery quotes.
"""

from django.apps import AppConfig


class StoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "store"
    verbose_name = "Store Settings"
