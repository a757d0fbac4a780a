# products/urls.py

"""
PRODUCTS URLS

Registered under /api/products/:
- products/, categories/        (router)
- stock/report/, stock/low-stock/, stock/logs/
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from products.views import (
    CategoryViewSet,
    LowStockView,
    ProductViewSet,
    StockLogListView,
    StockReportView,
)

router = DefaultRouter()

router.register(r"categories", CategoryViewSet, basename="categories")
router.register(r"products", ProductViewSet, basename="products")

urlpatterns = [
    path("stock/report/", StockReportView.as_view(), name="stock-report"),
    path("stock/low-stock/", LowStockView.as_view(), name="stock-low-stock"),
    path("stock/logs/", StockLogListView.as_view(), name="stock-logs"),
    path("", include(router.urls)),
]
