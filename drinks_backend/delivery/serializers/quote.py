# delivery/serializers/quote.py

"""
DELIVERY QUOTE SERIALIZERS

Input accepts either a full address or just a postal code plus number;
missing parts are backfilled from the postal lookup.
"""

from rest_framework import serializers

from delivery.models.address import normalize_postal_code


class DeliveryQuoteRequestSerializer(serializers.Serializer):
    street = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    number = serializers.CharField(max_length=20, required=False, allow_blank=True, default="")
    neighborhood = serializers.CharField(
        max_length=120, required=False, allow_blank=True, default=""
    )
    city = serializers.CharField(max_length=120, required=False, allow_blank=True, default="")
    state = serializers.CharField(max_length=2, required=False, allow_blank=True, default="")
    postal_code = serializers.CharField(max_length=9, required=False, allow_blank=True, default="")

    def validate_postal_code(self, value):
        return normalize_postal_code(value)

    def validate(self, attrs):
        if not any(attrs.get(k) for k in ("street", "postal_code")):
            raise serializers.ValidationError("Provide a street or a postal code.")
        return attrs


class DeliveryQuoteSerializer(serializers.Serializer):
    distance_km = serializers.FloatField()
    fee = serializers.DecimalField(max_digits=10, decimal_places=2)
    eta_minutes = serializers.IntegerField()
    lat = serializers.FloatField()
    lng = serializers.FloatField()
    within_delivery_area = serializers.BooleanField()
    max_delivery_distance_km = serializers.DecimalField(max_digits=6, decimal_places=2)


class PostalAddressSerializer(serializers.Serializer):
    street = serializers.CharField(allow_blank=True)
    neighborhood = serializers.CharField(allow_blank=True)
    city = serializers.CharField(allow_blank=True)
    state = serializers.CharField(allow_blank=True)
    postal_code = serializers.CharField()
