# products/serializers/category.py

from rest_framework import serializers

from products.models import Category


class CategorySerializer(serializers.ModelSerializer):
    name = serializers.CharField(required=True, allow_blank=False, max_length=120)

    class Meta:
        model = Category
        fields = ["id", "name", "icon_url", "sort_order", "is_active", "created_at"]
        read_only_fields = ["id", "created_at"]

    def validate_name(self, value: str):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("name cannot be blank")
        return v
