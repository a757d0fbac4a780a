# delivery/views/address.py

from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from delivery.models import Address
from delivery.serializers import AddressSerializer
from permissions.roles import ROLE_CUSTOMER, get_user_role


class AddressViewSet(viewsets.ModelViewSet):
    """
    Customer addresses.

    Customers only see and edit their own rows; staff see all of them.
    """

    serializer_class = AddressSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ["customer", "postal_code", "is_default"]

    def _is_customer(self) -> bool:
        user = self.request.user
        return not user.is_superuser and get_user_role(user) == ROLE_CUSTOMER

    def get_queryset(self):
        qs = Address.objects.select_related("customer")
        if self._is_customer():
            qs = qs.filter(customer=self.request.user)
        return qs

    def perform_create(self, serializer):
        serializer.save(customer=self.request.user if self._is_customer() else None)
