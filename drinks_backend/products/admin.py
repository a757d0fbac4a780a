# products/admin.py
"""
=====================================================
PATH: products/admin.py
=====================================================

Admin rules (audit-safe stock):

- stock is read-only on the product form; changing it here would skip the log.
  Use the adjust-stock API (or the "Zero stock" action) so a StockLog is written.
- StockLog rows are view-only.
"""

from __future__ import annotations

from django.contrib import admin

from products.models import Category, Product, StockLog
from products.services.inventory import set_stock


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "sort_order", "is_active")
    search_fields = ("name",)
    ordering = ("sort_order", "name")


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "category",
        "sale_price",
        "cost_price",
        "stock",
        "is_active",
    )
    list_filter = ("is_active", "category")
    search_fields = ("name", "description")
    ordering = ("sort_order", "name")
    readonly_fields = ("stock", "created_at", "updated_at")
    actions = ["zero_stock"]

    @admin.action(description="Zero stock (logged)")
    def zero_stock(self, request, queryset):
        changed = 0
        for product in queryset:
            if set_stock(product=product, new_stock=0, reason="Zerado pelo admin", user=request.user):
                changed += 1
        self.message_user(request, f"{changed} product(s) set to zero stock.")


@admin.register(StockLog)
class StockLogAdmin(admin.ModelAdmin):
    """
    View-only stock ledger.
    """

    list_display = ("product", "previous_stock", "new_stock", "change", "reason", "created_at")
    list_filter = ("created_at",)
    search_fields = ("product__name", "reason")
    ordering = ("-created_at",)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
