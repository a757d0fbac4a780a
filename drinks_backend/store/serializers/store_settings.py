from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from store.models import StoreSettings


class StoreSettingsSerializer(serializers.ModelSerializer):
    """
    Store settings read/update.
    Model-level rules (non-negative fees, paired coordinates) run through clean().
    """

    class Meta:
        model = StoreSettings
        fields = [
            "store_address",
            "store_lat",
            "store_lng",
            "delivery_base_fee",
            "delivery_base_km",
            "delivery_fee_per_km",
            "max_delivery_distance_km",
            "pix_key",
            "opening_hours",
            "is_open",
            "updated_at",
        ]
        read_only_fields = ["updated_at"]

    def validate(self, attrs):
        candidate = StoreSettings(
            **{
                f: attrs.get(f, getattr(self.instance, f, None))
                for f in self.Meta.fields
                if f != "updated_at"
            }
        )
        try:
            candidate.clean()
        except DjangoValidationError as exc:
            raise serializers.ValidationError(
                exc.message_dict if hasattr(exc, "error_dict") else exc.messages
            )
        return attrs
