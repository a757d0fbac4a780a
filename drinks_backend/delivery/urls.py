# delivery/urls.py

"""
DELIVERY URLS

Registered under /api/delivery/:
- quote/, postal-code/<code>/   (public, throttled)
- motoboys/, addresses/         (router)
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from delivery.views import (
    AddressViewSet,
    DeliveryQuoteView,
    MotoboyViewSet,
    PostalCodeLookupView,
)

router = DefaultRouter()
router.register(r"motoboys", MotoboyViewSet, basename="motoboys")
router.register(r"addresses", AddressViewSet, basename="addresses")

urlpatterns = [
    path("quote/", DeliveryQuoteView.as_view(), name="delivery-quote"),
    path("postal-code/<str:code>/", PostalCodeLookupView.as_view(), name="delivery-postal-code"),
    path("", include(router.urls)),
]
