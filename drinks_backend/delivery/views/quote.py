# delivery/views/quote.py

"""
PUBLIC DELIVERY ENDPOINTS (AllowAny, throttled)

POST /api/delivery/quote/               address parts -> fee, distance, ETA
GET  /api/delivery/postal-code/<code>/  postal code -> street/neighborhood/city/state
"""

from dataclasses import asdict

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from backend.errors import error_response
from delivery.serializers import (
    DeliveryQuoteRequestSerializer,
    DeliveryQuoteSerializer,
    PostalAddressSerializer,
)
from delivery.services import calculate_for_store, resolve_address_by_postal_code
from delivery.services.results import NOT_FOUND
from store.models import StoreSettings


class _PublicDeliveryView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "delivery_quote"


class DeliveryQuoteView(_PublicDeliveryView):
    @extend_schema(
        request=DeliveryQuoteRequestSerializer,
        responses={
            200: DeliveryQuoteSerializer,
            422: OpenApiResponse(description="Address could not be resolved"),
            503: OpenApiResponse(description="Store location is not configured"),
        },
    )
    def post(self, request):
        serializer = DeliveryQuoteRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        store = StoreSettings.load()
        if not store.has_location:
            return error_response(
                code="STORE_LOCATION_MISSING",
                message="Store coordinates are not configured.",
                http_status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

        result = calculate_for_store(serializer.validated_data, store)
        if not result.ok:
            return error_response(
                code="ADDRESS_UNRESOLVABLE",
                message="Could not calculate delivery for this address.",
                http_status=status.HTTP_422_UNPROCESSABLE_ENTITY,
                reason=result.detail or result.kind,
            )

        calc = result.data
        payload = {
            **asdict(calc),
            "within_delivery_area": calc.distance_km <= float(store.max_delivery_distance_km),
            "max_delivery_distance_km": store.max_delivery_distance_km,
        }
        return Response(DeliveryQuoteSerializer(payload).data)


class PostalCodeLookupView(_PublicDeliveryView):
    @extend_schema(
        responses={
            200: PostalAddressSerializer,
            404: OpenApiResponse(description="Unknown or malformed postal code"),
            502: OpenApiResponse(description="Postal lookup service unavailable"),
        },
    )
    def get(self, request, code):
        result = resolve_address_by_postal_code(code)

        if result.ok:
            return Response(PostalAddressSerializer(asdict(result.data)).data)

        if result.kind == NOT_FOUND:
            return error_response(
                code="POSTAL_CODE_NOT_FOUND",
                message="Postal code not found.",
                http_status=status.HTTP_404_NOT_FOUND,
                reason=result.detail,
            )

        return error_response(
            code="POSTAL_LOOKUP_UNAVAILABLE",
            message="Postal code service is unavailable, try again later.",
            http_status=status.HTTP_502_BAD_GATEWAY,
        )
