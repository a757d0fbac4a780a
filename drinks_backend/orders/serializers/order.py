# orders/serializers/order.py

"""
ORDER SERIALIZERS

- OrderSerializer: read shape (items, courier, next allowed statuses)
- OrderCreateSerializer: checkout input; stock and totals are server side
- OrderStatusSerializer / AssignCourierSerializer / DeliveryFeeSerializer:
  action inputs; domain validation happens in orders.services
"""

from rest_framework import serializers

from delivery.models import Address
from delivery.serializers import AddressSerializer
from orders.models import Order
from orders.services.order_lifecycle import allowed_next_statuses

from .order_item import OrderItemInputSerializer, OrderItemSerializer


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    address = AddressSerializer(read_only=True)
    motoboy_name = serializers.CharField(source="motoboy.name", read_only=True, default=None)
    allowed_transitions = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "order_no",
            "order_type",
            "status",
            "allowed_transitions",
            "customer",
            "customer_name",
            "address",
            "motoboy",
            "motoboy_name",
            "subtotal",
            "discount",
            "delivery_fee",
            "original_delivery_fee",
            "delivery_fee_adjusted",
            "delivery_fee_adjusted_at",
            "total",
            "delivery_distance_km",
            "estimated_minutes",
            "payment_method",
            "change_for",
            "notes",
            "items",
            "created_at",
            "updated_at",
            "accepted_at",
            "preparing_at",
            "ready_at",
            "dispatched_at",
            "arrived_at",
            "delivered_at",
        ]
        read_only_fields = fields

    def get_allowed_transitions(self, obj) -> list[str]:
        return allowed_next_statuses(obj.order_type, obj.status)


class OrderCreateSerializer(serializers.Serializer):
    order_type = serializers.ChoiceField(choices=Order.TYPE_CHOICES, default=Order.TYPE_DELIVERY)
    status = serializers.ChoiceField(choices=Order.STATUS_CHOICES, required=False)

    customer_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    address = serializers.PrimaryKeyRelatedField(
        queryset=Address.objects.all(), required=False, allow_null=True
    )
    delivery_address = AddressSerializer(required=False, write_only=True)

    payment_method = serializers.ChoiceField(choices=Order.PAYMENT_CHOICES, default=Order.PAYMENT_PIX)
    change_for = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    notes = serializers.CharField(required=False, allow_blank=True)

    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    discount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, default=0
    )
    delivery_fee = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=0, required=False
    )

    items = OrderItemInputSerializer(many=True, allow_empty=False)

    def validate(self, attrs):
        if attrs.get("address") and attrs.get("delivery_address"):
            raise serializers.ValidationError("Send either address or delivery_address, not both.")
        if attrs.get("order_type") == Order.TYPE_COUNTER:
            attrs.pop("delivery_address", None)
            attrs["address"] = None
        return attrs


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.CharField(max_length=16)


class AssignCourierSerializer(serializers.Serializer):
    motoboy_id = serializers.CharField(max_length=64)


class DeliveryFeeSerializer(serializers.Serializer):
    delivery_fee = serializers.CharField(max_length=32)
