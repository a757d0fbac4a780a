from rest_framework import serializers

from products.models import StockLog


class StockLogSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source="product.name", read_only=True)

    class Meta:
        model = StockLog
        fields = [
            "id",
            "product",
            "product_name",
            "previous_stock",
            "new_stock",
            "change",
            "reason",
            "performed_by",
            "created_at",
        ]
        read_only_fields = fields
