from .order import (
    AssignCourierSerializer,
    DeliveryFeeSerializer,
    OrderCreateSerializer,
    OrderSerializer,
    OrderStatusSerializer,
)
from .order_item import OrderItemInputSerializer, OrderItemSerializer

__all__ = [
    "AssignCourierSerializer",
    "DeliveryFeeSerializer",
    "OrderCreateSerializer",
    "OrderItemInputSerializer",
    "OrderItemSerializer",
    "OrderSerializer",
    "OrderStatusSerializer",
]
