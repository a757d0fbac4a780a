# delivery/admin.py

from django.contrib import admin

from delivery.models import Address, GeocodeCacheEntry, Motoboy


@admin.register(Motoboy)
class MotoboyAdmin(admin.ModelAdmin):
    list_display = ("name", "whatsapp", "user", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("name", "whatsapp")


@admin.register(Address)
class AddressAdmin(admin.ModelAdmin):
    list_display = ("street", "number", "neighborhood", "city", "state", "postal_code", "customer")
    list_filter = ("state", "city")
    search_fields = ("street", "neighborhood", "postal_code")


@admin.register(GeocodeCacheEntry)
class GeocodeCacheEntryAdmin(admin.ModelAdmin):
    list_display = ("address", "lat", "lng", "resolved_at")
    search_fields = ("address",)
    ordering = ("-resolved_at",)
