# products/views/__init__.py

from .category import CategoryViewSet
from .product import ProductViewSet
from .stock import LowStockView, StockLogListView, StockReportView

__all__ = [
    "CategoryViewSet",
    "ProductViewSet",
    "StockReportView",
    "LowStockView",
    "StockLogListView",
]
