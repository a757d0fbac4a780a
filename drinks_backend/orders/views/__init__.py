from .order import OrderViewSet
from .stream import OrderStreamView

__all__ = [
    "OrderStreamView",
    "OrderViewSet",
]
