from .address import AddressViewSet
from .motoboy import MotoboyViewSet
from .quote import DeliveryQuoteView, PostalCodeLookupView

__all__ = [
    "AddressViewSet",
    "DeliveryQuoteView",
    "MotoboyViewSet",
    "PostalCodeLookupView",
]
