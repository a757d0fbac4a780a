# products/views/category.py

from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from permissions.roles import CAP_STOCK_EDIT, CAP_STOCK_VIEW, HasCapability
from products.models import Category
from products.serializers import CategorySerializer


class CategoryViewSet(viewsets.ModelViewSet):
    """
    Category API

    Policy:
    - stock.view can READ categories
    - stock.edit can CREATE/UPDATE/DELETE categories
    """

    queryset = Category.objects.all().order_by("sort_order", "name")
    serializer_class = CategorySerializer
    pagination_class = None

    def get_permissions(self):
        if self.action in {"list", "retrieve"}:
            self.required_capability = CAP_STOCK_VIEW
        else:
            self.required_capability = CAP_STOCK_EDIT
        return [IsAuthenticated(), HasCapability()]
