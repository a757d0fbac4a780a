# delivery/apps.py

"""
DELIVERY APP CONFIG

- Customer addresses and couriers (motoboys)
- Postal code lookup, geocoding (with cache) and delivery fee quotes
"""

from django.apps import AppConfig


class DeliveryConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "delivery"
    verbose_name = "Delivery"
