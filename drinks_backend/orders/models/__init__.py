from .order import Order
from .order_item import OrderItem
from .order_status_event import OrderStatusEvent

__all__ = [
    "Order",
    "OrderItem",
    "OrderStatusEvent",
]
