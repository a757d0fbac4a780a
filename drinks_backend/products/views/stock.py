# products/views/stock.py

"""
STOCK REPORT ENDPOINTS (stock.view)

GET /api/products/stock/report/
GET /api/products/stock/low-stock/?threshold=10
GET /api/products/stock/logs/?product=<uuid>
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.errors import error_response
from permissions.roles import CAP_STOCK_VIEW, HasCapability
from products.models import StockLog
from products.serializers import StockLogSerializer
from products.services.stock_reports import (
    DEFAULT_LOW_STOCK_THRESHOLD,
    low_stock_suggestions,
    stock_report,
)


class _StockViewMixin:
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_STOCK_VIEW


class StockReportView(_StockViewMixin, APIView):
    @extend_schema(description="Per-product stock valuation with a summary.")
    def get(self, request):
        return Response(stock_report())


class LowStockView(_StockViewMixin, APIView):
    @extend_schema(
        parameters=[
            OpenApiParameter(
                name="threshold",
                type=int,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Products with stock below this value (default 10).",
            )
        ],
        description="Active products under the threshold with purchase suggestions.",
    )
    def get(self, request):
        raw = (request.query_params.get("threshold") or "").strip()
        threshold = DEFAULT_LOW_STOCK_THRESHOLD

        if raw:
            try:
                threshold = int(raw)
                if threshold < 0:
                    raise ValueError
            except ValueError:
                return error_response(
                    code="INVALID_THRESHOLD",
                    message="threshold must be a non-negative integer",
                    http_status=status.HTTP_400_BAD_REQUEST,
                )

        return Response(low_stock_suggestions(threshold))


class StockLogListView(_StockViewMixin, generics.ListAPIView):
    serializer_class = StockLogSerializer
    filterset_fields = ["product"]

    def get_queryset(self):
        return StockLog.objects.select_related("product").order_by("-created_at")
