# products/serializers/__init__.py

from .category import CategorySerializer
from .product import ProductSerializer, StockAdjustmentSerializer
from .stock_log import StockLogSerializer

__all__ = [
    "CategorySerializer",
    "ProductSerializer",
    "StockAdjustmentSerializer",
    "StockLogSerializer",
]
