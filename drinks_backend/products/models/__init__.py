"""
PATH: products/models/__init__.py

Products models export surface.
"""

from .category import Category
from .product import Product
from .stock_log import StockLog

__all__ = [
    "Category",
    "Product",
    "StockLog",
]
