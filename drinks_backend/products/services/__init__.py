from .inventory import decrement_stock, set_stock
from .stock_reports import low_stock_suggestions, stock_report

__all__ = [
    "decrement_stock",
    "set_stock",
    "stock_report",
    "low_stock_suggestions",
]
