# products/serializers/product.py

"""
PRODUCT SERIALIZER

- stock is read-only here; it changes through the adjust-stock action or
  order creation so that every change is logged.
- initial_stock lets staff set opening stock on create (logged as well).
"""

from rest_framework import serializers

from products.models import Category, Product
from products.services.inventory import set_stock


class ProductSerializer(serializers.ModelSerializer):
    category = serializers.PrimaryKeyRelatedField(
        queryset=Category.objects.all(), required=False, allow_null=True
    )
    category_name = serializers.CharField(source="category.name", read_only=True)
    profit_per_unit = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    initial_stock = serializers.IntegerField(
        write_only=True, required=False, min_value=0, default=0
    )

    class Meta:
        model = Product
        fields = [
            "id",
            "category",
            "category_name",
            "name",
            "description",
            "image_url",
            "cost_price",
            "profit_margin",
            "sale_price",
            "profit_per_unit",
            "stock",
            "initial_stock",
            "product_type",
            "is_active",
            "sort_order",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "category_name",
            "profit_per_unit",
            "stock",
            "created_at",
            "updated_at",
        ]

    def validate_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("name is required")
        return value

    def validate_sale_price(self, value):
        if value is None or value <= 0:
            raise serializers.ValidationError("Sale price must be greater than zero")
        return value

    def validate_cost_price(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError("Cost price cannot be negative")
        return value

    def create(self, validated_data):
        initial_stock = validated_data.pop("initial_stock", 0)
        product = super().create(validated_data)

        if initial_stock:
            request = self.context.get("request")
            set_stock(
                product=product,
                new_stock=initial_stock,
                reason="Estoque inicial",
                user=getattr(request, "user", None),
            )
        return product

    def update(self, instance, validated_data):
        validated_data.pop("initial_stock", None)
        return super().update(instance, validated_data)


class StockAdjustmentSerializer(serializers.Serializer):
    stock = serializers.IntegerField(min_value=0)
    reason = serializers.CharField(max_length=255, required=False, default="Ajuste manual")
