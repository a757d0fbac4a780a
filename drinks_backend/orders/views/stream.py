# orders/views/stream.py

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from backend.errors import error_response

POLL_INTERVAL_SECONDS = 10


class OrderStreamView(APIView):
    """
    Placeholder for live order updates.

    There is no push transport; clients poll the order list instead.
    """

    permission_classes = [AllowAny]

    @extend_schema(responses={501: {"type": "object"}})
    def get(self, request):
        return error_response(
            code="NOT_IMPLEMENTED",
            message="Live order updates are not available. Poll the orders endpoint instead.",
            http_status=status.HTTP_501_NOT_IMPLEMENTED,
            poll_url="/api/orders/orders/",
            poll_interval_seconds=POLL_INTERVAL_SECONDS,
        )
