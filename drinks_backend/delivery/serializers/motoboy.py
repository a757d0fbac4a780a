# delivery/serializers/motoboy.py

"""
MOTOBOY SERIALIZERS

- MotoboySerializer: courier CRUD; `user` optionally links a login account
- MotoboyReportSerializer: delivered count and fee total for a date range
"""

import re

from django.contrib.auth import get_user_model
from rest_framework import serializers

from delivery.models import Motoboy

User = get_user_model()


class MotoboySerializer(serializers.ModelSerializer):
    user = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.all(), required=False, allow_null=True
    )
    user_email = serializers.EmailField(source="user.email", read_only=True, default=None)

    class Meta:
        model = Motoboy
        fields = [
            "id",
            "name",
            "whatsapp",
            "photo_url",
            "is_active",
            "user",
            "user_email",
            "created_at",
        ]
        read_only_fields = ["id", "user_email", "created_at"]

    def validate_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("name is required")
        return value

    def validate_user(self, value):
        if value is None:
            return value
        linked = Motoboy.objects.filter(user=value)
        if self.instance is not None:
            linked = linked.exclude(pk=self.instance.pk)
        if linked.exists():
            raise serializers.ValidationError("This user is already linked to another courier")
        return value

    def validate_whatsapp(self, value):
        digits = re.sub(r"\D", "", value or "")
        if len(digits) < 10:
            raise serializers.ValidationError("whatsapp must have at least 10 digits")

        taken = Motoboy.objects.filter(whatsapp=digits)
        if self.instance is not None:
            taken = taken.exclude(pk=self.instance.pk)
        if taken.exists():
            raise serializers.ValidationError("A courier with this whatsapp already exists")
        return digits


class MotoboyReportSerializer(serializers.Serializer):
    motoboy_id = serializers.UUIDField()
    name = serializers.CharField()
    start_date = serializers.DateField(allow_null=True)
    end_date = serializers.DateField(allow_null=True)
    total_deliveries = serializers.IntegerField()
    total_fees = serializers.DecimalField(max_digits=12, decimal_places=2)
