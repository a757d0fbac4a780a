from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase
from rest_framework.test import APIClient

from store.models import StoreSettings

User = get_user_model()


class StoreSettingsModelTests(TestCase):
    """
    GUARANTEES:
    - load() always returns the same single row
    - defaults match the standard delivery fee table
    - settings cannot be deleted
    """

    def test_load_is_singleton(self):
        first = StoreSettings.load()
        second = StoreSettings.load()

        self.assertEqual(first.pk, second.pk)
        self.assertEqual(StoreSettings.objects.count(), 1)

    def test_defaults(self):
        s = StoreSettings.load()
        self.assertEqual(s.delivery_base_fee, Decimal("6.90"))
        self.assertEqual(s.delivery_base_km, Decimal("3.00"))
        self.assertEqual(s.delivery_fee_per_km, Decimal("1.50"))
        self.assertFalse(s.has_location)

    def test_delete_is_refused(self):
        s = StoreSettings.load()
        with self.assertRaises(ValidationError):
            s.delete()

    def test_unpaired_coordinates_are_invalid(self):
        s = StoreSettings.load()
        s.store_lat = -23.5
        with self.assertRaises(ValidationError):
            s.clean()


class StoreSettingsApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(email="admin@example.com", password="x", role="admin")
        self.kitchen = User.objects.create_user(email="k@example.com", password="x", role="kitchen")

    def test_anyone_can_read(self):
        res = self.client.get("/api/store/settings/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["delivery_base_fee"], "6.90")

    def test_kitchen_cannot_update(self):
        self.client.force_authenticate(self.kitchen)
        res = self.client.patch("/api/store/settings/", {"is_open": False}, format="json")
        self.assertEqual(res.status_code, 403)

    def test_admin_updates_location(self):
        self.client.force_authenticate(self.admin)
        res = self.client.patch(
            "/api/store/settings/",
            {"store_lat": -23.55, "store_lng": -46.63, "delivery_base_fee": "7.50"},
            format="json",
        )

        self.assertEqual(res.status_code, 200)
        s = StoreSettings.load()
        self.assertTrue(s.has_location)
        self.assertEqual(s.delivery_base_fee, Decimal("7.50"))

    def test_negative_fee_rejected(self):
        self.client.force_authenticate(self.admin)
        res = self.client.patch(
            "/api/store/settings/", {"delivery_fee_per_km": "-1.00"}, format="json"
        )
        self.assertEqual(res.status_code, 400)
