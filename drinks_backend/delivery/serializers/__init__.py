from .address import AddressSerializer
from .motoboy import MotoboyReportSerializer, MotoboySerializer
from .quote import (
    DeliveryQuoteRequestSerializer,
    DeliveryQuoteSerializer,
    PostalAddressSerializer,
)

__all__ = [
    "AddressSerializer",
    "DeliveryQuoteRequestSerializer",
    "DeliveryQuoteSerializer",
    "MotoboyReportSerializer",
    "MotoboySerializer",
    "PostalAddressSerializer",
]
