# store/views/store_settings.py

"""
STORE SETTINGS VIEW

GET   /api/store/settings/   AllowAny (storefront reads open state + fees)
PATCH /api/store/settings/   settings.manage
"""

import logging

from drf_spectacular.utils import extend_schema
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from permissions.roles import CAP_SETTINGS_MANAGE, HasCapability
from store.models import StoreSettings
from store.serializers import StoreSettingsSerializer

logger = logging.getLogger(__name__)


class StoreSettingsView(APIView):
    serializer_class = StoreSettingsSerializer
    required_capability = CAP_SETTINGS_MANAGE

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsAuthenticated(), HasCapability()]

    @extend_schema(responses={200: StoreSettingsSerializer})
    def get(self, request):
        return Response(StoreSettingsSerializer(StoreSettings.load()).data)

    @extend_schema(request=StoreSettingsSerializer, responses={200: StoreSettingsSerializer})
    def patch(self, request):
        settings_obj = StoreSettings.load()
        serializer = StoreSettingsSerializer(settings_obj, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()

        logger.info(
            "store_settings_updated",
            extra={"user_id": str(request.user.id), "fields": sorted(serializer.validated_data)},
        )
        return Response(serializer.data)
