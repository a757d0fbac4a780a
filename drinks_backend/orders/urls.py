# orders/urls.py

"""
ORDERS URLS

Registered under /api/orders/:
- orders/   (router; list/retrieve/create + status, assign, delivery-fee actions)
- stream/   (501, poll instead)
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from orders.views import OrderStreamView, OrderViewSet

router = DefaultRouter()
router.register(r"orders", OrderViewSet, basename="orders")

urlpatterns = [
    path("stream/", OrderStreamView.as_view(), name="orders-stream"),
    path("", include(router.urls)),
]
