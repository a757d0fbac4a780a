# delivery/views/motoboy.py

"""
COURIER (MOTOBOY) MANAGEMENT

CRUD (couriers.manage) plus:
- GET /motoboys/<id>/active-orders/   dispatched/arrived orders (orders.view)
- GET /motoboys/<id>/report/?start_date=YYYY-MM-DD&end_date=YYYY-MM-DD

Linking a courier to a user account gives that user the motoboy role;
deleting the courier puts the user back to customer.
"""

import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Count, Sum
from django.utils.dateparse import parse_date
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.errors import error_response
from delivery.models import Motoboy
from delivery.serializers import MotoboyReportSerializer, MotoboySerializer
from orders.models import Order
from orders.serializers import OrderSerializer
from permissions.roles import (
    CAP_COURIERS_MANAGE,
    CAP_ORDERS_VIEW,
    ROLE_CUSTOMER,
    ROLE_MOTOBOY,
    HasCapability,
)

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = (Order.STATUS_DISPATCHED, Order.STATUS_ARRIVED)


def _set_role(user, role: str):
    if user is None or user.is_superuser or user.role == role:
        return
    user.role = role
    user.save(update_fields=["role", "is_staff", "updated_at"])


class MotoboyViewSet(viewsets.ModelViewSet):
    serializer_class = MotoboySerializer
    filterset_fields = ["is_active"]

    def get_queryset(self):
        return Motoboy.objects.select_related("user").order_by("name")

    def get_permissions(self):
        if self.action == "active_orders":
            self.required_capability = CAP_ORDERS_VIEW
        else:
            self.required_capability = CAP_COURIERS_MANAGE
        return [IsAuthenticated(), HasCapability()]

    @transaction.atomic
    def perform_create(self, serializer):
        motoboy = serializer.save()
        _set_role(motoboy.user, ROLE_MOTOBOY)

    @transaction.atomic
    def perform_update(self, serializer):
        previous_user = serializer.instance.user
        motoboy = serializer.save()
        if previous_user is not None and previous_user != motoboy.user:
            _set_role(previous_user, ROLE_CUSTOMER)
        _set_role(motoboy.user, ROLE_MOTOBOY)

    @transaction.atomic
    def perform_destroy(self, instance):
        user, motoboy_id = instance.user, str(instance.pk)
        instance.delete()
        _set_role(user, ROLE_CUSTOMER)
        logger.info("motoboy_deleted", extra={"motoboy_id": motoboy_id})

    @extend_schema(responses=OrderSerializer(many=True))
    @action(detail=True, methods=["get"], url_path="active-orders")
    def active_orders(self, request, pk=None):
        motoboy = self.get_object()
        orders = (
            Order.objects.filter(motoboy=motoboy, status__in=ACTIVE_STATUSES)
            .select_related("address", "motoboy")
            .prefetch_related("items")
            .order_by("dispatched_at", "created_at")
        )
        return Response(OrderSerializer(orders, many=True).data)

    @extend_schema(
        parameters=[
            OpenApiParameter(name="start_date", type=str, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="end_date", type=str, location=OpenApiParameter.QUERY, required=False),
        ],
        responses=MotoboyReportSerializer,
    )
    @action(detail=True, methods=["get"])
    def report(self, request, pk=None):
        motoboy = self.get_object()

        dates = {}
        for key in ("start_date", "end_date"):
            raw = (request.query_params.get(key) or "").strip()
            try:
                dates[key] = parse_date(raw) if raw else None
            except ValueError:
                dates[key] = None
            if raw and dates[key] is None:
                return error_response(
                    code="INVALID_DATE",
                    message=f"{key} must be YYYY-MM-DD",
                    http_status=status.HTTP_400_BAD_REQUEST,
                )

        qs = Order.objects.filter(motoboy=motoboy, status=Order.STATUS_DELIVERED)
        if dates["start_date"]:
            qs = qs.filter(delivered_at__date__gte=dates["start_date"])
        if dates["end_date"]:
            qs = qs.filter(delivered_at__date__lte=dates["end_date"])

        totals = qs.aggregate(count=Count("id"), fees=Sum("delivery_fee"))

        payload = {
            "motoboy_id": motoboy.id,
            "name": motoboy.name,
            "start_date": dates["start_date"],
            "end_date": dates["end_date"],
            "total_deliveries": totals["count"] or 0,
            "total_fees": totals["fees"] or Decimal("0.00"),
        }
        return Response(MotoboyReportSerializer(payload).data)
