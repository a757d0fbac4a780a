# orders/admin.py
"""
Admin rules:

- Orders are read-mostly here; status, courier and fee changes go through
  orders.services so timestamps and audit rows stay consistent.
- Items and status events are view-only inlines.
"""

from django.contrib import admin

from orders.models import Order, OrderItem, OrderStatusEvent


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    readonly_fields = ("product_id", "product_name", "quantity", "unit_price", "total_price")

    def has_add_permission(self, request, obj=None):
        return False


class OrderStatusEventInline(admin.TabularInline):
    model = OrderStatusEvent
    extra = 0
    can_delete = False
    readonly_fields = ("from_status", "to_status", "actor", "created_at")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        "order_no",
        "order_type",
        "status",
        "customer_name",
        "motoboy",
        "total",
        "created_at",
    )
    list_filter = ("order_type", "status", "payment_method")
    search_fields = ("order_no", "customer_name", "notes")
    ordering = ("-created_at",)
    inlines = [OrderItemInline, OrderStatusEventInline]
    readonly_fields = [f.name for f in Order._meta.fields]

    def has_delete_permission(self, request, obj=None):
        return False
