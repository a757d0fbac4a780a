# orders/apps.py

"""
ORDERS APP CONFIG

- Order lifecycle (status machine per order type)
- Courier assignment, delivery fee override
- Order creation with per-line stock decrements
"""

from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "orders"
    verbose_name = "Orders"
