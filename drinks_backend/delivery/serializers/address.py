# delivery/serializers/address.py

from rest_framework import serializers

from delivery.models import Address
from delivery.models.address import normalize_postal_code


class AddressSerializer(serializers.ModelSerializer):
    class Meta:
        model = Address
        fields = [
            "id",
            "customer",
            "street",
            "number",
            "complement",
            "neighborhood",
            "city",
            "state",
            "postal_code",
            "notes",
            "is_default",
            "created_at",
        ]
        read_only_fields = ["id", "customer", "created_at"]

    def validate_postal_code(self, value):
        digits = normalize_postal_code(value)
        if digits and len(digits) != 8:
            raise serializers.ValidationError("Postal code must have 8 digits.")
        return digits

    def validate_state(self, value):
        value = (value or "").strip().upper()
        if value and len(value) != 2:
            raise serializers.ValidationError("Use the two-letter state code.")
        return value
