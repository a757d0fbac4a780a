# products/views/product.py

"""
PRODUCT VIEWSET

Staff product maintenance for stock purposes:
- CRUD (stock.view to read, stock.edit to write)
- POST /products/products/<id>/adjust-stock/  (manual count, logged)
"""

from django.core.exceptions import ValidationError as DjangoValidationError
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.errors import error_response
from permissions.roles import CAP_STOCK_EDIT, CAP_STOCK_VIEW, HasCapability
from products.models import Product
from products.serializers import ProductSerializer, StockAdjustmentSerializer, StockLogSerializer
from products.services.inventory import set_stock


class ProductViewSet(viewsets.ModelViewSet):
    serializer_class = ProductSerializer
    filterset_fields = ["category", "is_active", "product_type"]

    def get_queryset(self):
        return Product.objects.select_related("category").order_by("sort_order", "name")

    def get_permissions(self):
        if self.action in {"list", "retrieve"}:
            self.required_capability = CAP_STOCK_VIEW
        else:
            self.required_capability = CAP_STOCK_EDIT
        return [IsAuthenticated(), HasCapability()]

    @extend_schema(
        request=StockAdjustmentSerializer,
        responses={
            200: OpenApiResponse(response=StockLogSerializer, description="Stock changed"),
            204: OpenApiResponse(description="Stock unchanged"),
        },
        description="Set a product's stock to a counted value. Writes a stock log.",
    )
    @action(detail=True, methods=["post"], url_path="adjust-stock")
    def adjust_stock(self, request, pk=None):
        product = self.get_object()

        serializer = StockAdjustmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            log = set_stock(
                product=product,
                new_stock=serializer.validated_data["stock"],
                reason=serializer.validated_data["reason"],
                user=request.user,
            )
        except DjangoValidationError as exc:
            return error_response(
                code="INVALID_STOCK",
                message="; ".join(exc.messages),
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        if log is None:
            return Response(status=status.HTTP_204_NO_CONTENT)
        return Response(StockLogSerializer(log).data, status=status.HTTP_200_OK)
