# orders/views/order.py

"""
ORDER VIEWSET

GET    /api/orders/orders/                      list (filter: status, order_type, motoboy, customer)
POST   /api/orders/orders/                      create (+ delivery quote for delivery orders)
GET    /api/orders/orders/<id>/                 retrieve with items
GET    /api/orders/orders/<id>/items/           items only
GET    /api/orders/orders/<id>/transitions/     allowed next statuses
PATCH  /api/orders/orders/<id>/status/          {status}
PATCH  /api/orders/orders/<id>/assign/          {motoboy_id}
PATCH  /api/orders/orders/<id>/delivery-fee/    {delivery_fee}

Orders are never edited or deleted through the API; every change goes
through orders.services.
"""

import logging

from django.conf import settings
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.errors import error_response
from delivery.models import Address
from delivery.services import LookupResult, calculate_for_store
from orders.models import Order
from orders.serializers import (
    AssignCourierSerializer,
    DeliveryFeeSerializer,
    OrderCreateSerializer,
    OrderItemSerializer,
    OrderSerializer,
    OrderStatusSerializer,
)
from orders.services import (
    InvalidFeeError,
    InvalidTransitionError,
    NotFoundError,
    OrderServiceError,
    PreconditionFailedError,
    allowed_next_statuses,
    assign_courier,
    attach_delivery_calculation,
    create_order,
    override_delivery_fee,
    request_transition,
)
from permissions.roles import (
    CAP_ORDERS_ADJUST_FEE,
    CAP_ORDERS_ASSIGN,
    CAP_ORDERS_CREATE,
    CAP_ORDERS_TRANSITION,
    CAP_ORDERS_VIEW,
    ROLE_CUSTOMER,
    HasCapability,
    get_user_role,
)
from store.models import StoreSettings

logger = logging.getLogger(__name__)

ACTION_CAPABILITIES = {
    "list": CAP_ORDERS_VIEW,
    "retrieve": CAP_ORDERS_VIEW,
    "items": CAP_ORDERS_VIEW,
    "transitions": CAP_ORDERS_VIEW,
    "create": CAP_ORDERS_CREATE,
    "change_status": CAP_ORDERS_TRANSITION,
    "assign": CAP_ORDERS_ASSIGN,
    "delivery_fee": CAP_ORDERS_ADJUST_FEE,
}

# Customers cannot set status or prices; the server derives them.
CUSTOMER_LOCKED_FIELDS = ("status", "subtotal", "discount", "delivery_fee")
CUSTOMER_LOCKED_ITEM_FIELDS = ("unit_price", "product_name")


def service_error_response(exc: OrderServiceError):
    """Translate an orders.services exception into the canonical error body."""
    if isinstance(exc, InvalidTransitionError):
        return error_response(
            code="INVALID_TRANSITION",
            message=str(exc),
            http_status=status.HTTP_409_CONFLICT,
            current_status=exc.current_status,
            target_status=exc.target_status,
            allowed_transitions=exc.allowed,
        )
    if isinstance(exc, PreconditionFailedError):
        return error_response(
            code="PRECONDITION_FAILED",
            message=str(exc),
            http_status=status.HTTP_409_CONFLICT,
            expected_status=exc.expected,
            actual_status=exc.actual,
        )
    if isinstance(exc, NotFoundError):
        return error_response(
            code="NOT_FOUND",
            message=str(exc),
            http_status=status.HTTP_404_NOT_FOUND,
            entity=exc.entity,
        )
    if isinstance(exc, InvalidFeeError):
        return error_response(
            code="INVALID_DELIVERY_FEE",
            message=str(exc),
            http_status=status.HTTP_400_BAD_REQUEST,
        )
    return error_response(
        code="ORDER_ERROR",
        message=str(exc),
        http_status=status.HTTP_400_BAD_REQUEST,
    )


def _quote_payload(result: LookupResult | None, store: StoreSettings | None) -> dict:
    if result is None:
        return {"status": "not_requested"}
    if not result.ok:
        return {"status": "unavailable", "reason": result.detail or result.kind}

    calc = result.data
    return {
        "status": "calculated",
        "distance_km": calc.distance_km,
        "fee": str(calc.fee),
        "eta_minutes": calc.eta_minutes,
        "within_delivery_area": calc.distance_km <= float(store.max_delivery_distance_km),
    }


class OrderViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = OrderSerializer
    filterset_fields = ["status", "order_type", "motoboy", "customer"]

    def get_queryset(self):
        return (
            Order.objects.select_related("address", "motoboy", "customer")
            .prefetch_related("items")
            .order_by("-created_at")
        )

    def get_permissions(self):
        self.required_capability = ACTION_CAPABILITIES.get(self.action, CAP_ORDERS_VIEW)
        return [IsAuthenticated(), HasCapability()]

    # --------------------------------------------------
    # CREATE
    # --------------------------------------------------
    def _save_address(self, data: dict, user):
        if data.get("address") is not None:
            return data["address"]

        parts = data.get("delivery_address")
        if not parts:
            return None

        customer = user if get_user_role(user) == ROLE_CUSTOMER else None
        return Address.objects.create(customer=customer, **parts)

    def _quote(self, address):
        store = StoreSettings.load()
        if address is None:
            return LookupResult.not_found("missing_address"), store
        if not store.has_location:
            return LookupResult.not_found("store_location_missing"), store
        return calculate_for_store(address, store), store

    @extend_schema(
        request=OrderCreateSerializer,
        responses={
            201: OpenApiResponse(response=OrderSerializer, description="Order created"),
            422: OpenApiResponse(description="Delivery quote required but unavailable"),
        },
    )
    def create(self, request, *args, **kwargs):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        items = [dict(item) for item in data.pop("items")]
        is_delivery = data.get("order_type") == Order.TYPE_DELIVERY
        is_customer = get_user_role(request.user) == ROLE_CUSTOMER
        if is_customer:
            for key in CUSTOMER_LOCKED_FIELDS:
                data.pop(key, None)
            items = [
                {k: v for k, v in item.items() if k not in CUSTOMER_LOCKED_ITEM_FIELDS}
                for item in items
            ]

        address = data.get("address")
        if is_customer and address is not None and address.customer_id != request.user.id:
            return error_response(
                code="INVALID_ADDRESS",
                message="Address does not belong to the current customer.",
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        quote, store = (None, None)
        if is_delivery:
            quote, store = self._quote(data.get("address") or data.get("delivery_address"))
            if not quote.ok and getattr(settings, "REQUIRE_DELIVERY_QUOTE", False):
                logger.info(
                    "order_rejected_without_quote",
                    extra={"reason": quote.detail or quote.kind},
                )
                return error_response(
                    code="ORDER_REJECTED",
                    message="Delivery fee could not be calculated for this address.",
                    http_status=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    reason=quote.detail or quote.kind,
                )

        data["address"] = self._save_address(data, request.user) if is_delivery else None
        data.pop("delivery_address", None)

        if is_customer:
            data["customer"] = request.user

        result = create_order(data, items, user=request.user)
        order = result.order

        if quote is not None and quote.ok and "delivery_fee" not in data:
            order = attach_delivery_calculation(order, quote.data)

        order = self.get_queryset().get(pk=order.pk)
        body = OrderSerializer(order).data
        body["delivery_quote"] = _quote_payload(quote, store)
        body["stock_failures"] = [
            {"index": f.index, "product_id": f.product_id, "reason": f.reason}
            for f in result.stock_failures
        ]
        return Response(body, status=status.HTTP_201_CREATED)

    # --------------------------------------------------
    # READ HELPERS
    # --------------------------------------------------
    @extend_schema(responses=OrderItemSerializer(many=True))
    @action(detail=True, methods=["get"])
    def items(self, request, pk=None):
        order = self.get_object()
        return Response(OrderItemSerializer(order.items.all(), many=True).data)

    @extend_schema(
        responses={
            200: {
                "type": "object",
                "properties": {
                    "current_status": {"type": "string"},
                    "allowed_transitions": {"type": "array", "items": {"type": "string"}},
                },
            }
        }
    )
    @action(detail=True, methods=["get"])
    def transitions(self, request, pk=None):
        order = self.get_object()
        return Response(
            {
                "order_type": order.order_type,
                "current_status": order.status,
                "allowed_transitions": allowed_next_statuses(order.order_type, order.status),
            }
        )

    # --------------------------------------------------
    # COMMANDS
    # --------------------------------------------------
    @extend_schema(request=OrderStatusSerializer, responses=OrderSerializer)
    @action(detail=True, methods=["patch"], url_path="status")
    def change_status(self, request, pk=None):
        order = self.get_object()
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = request_transition(
                order, serializer.validated_data["status"], user=request.user
            )
        except OrderServiceError as exc:
            return service_error_response(exc)

        return Response(OrderSerializer(self.get_queryset().get(pk=order.pk)).data)

    @extend_schema(request=AssignCourierSerializer, responses=OrderSerializer)
    @action(detail=True, methods=["patch"])
    def assign(self, request, pk=None):
        order = self.get_object()
        serializer = AssignCourierSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = assign_courier(
                order, serializer.validated_data["motoboy_id"], user=request.user
            )
        except OrderServiceError as exc:
            return service_error_response(exc)

        return Response(OrderSerializer(self.get_queryset().get(pk=order.pk)).data)

    @extend_schema(request=DeliveryFeeSerializer, responses=OrderSerializer)
    @action(detail=True, methods=["patch"], url_path="delivery-fee")
    def delivery_fee(self, request, pk=None):
        order = self.get_object()

        try:
            order = override_delivery_fee(
                order, request.data.get("delivery_fee"), user=request.user
            )
        except OrderServiceError as exc:
            return service_error_response(exc)

        return Response(OrderSerializer(self.get_queryset().get(pk=order.pk)).data)
