# delivery/tests/test_api.py

from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from delivery.models import Address, Motoboy
from delivery.services.exceptions import ExternalServiceError
from orders.models import Order
from store.models import StoreSettings

User = get_user_model()

REQUEST_JSON = "delivery.services.http.request_json"


def _configure_store():
    store = StoreSettings.load()
    store.store_lat = -23.5505
    store.store_lng = -46.6333
    store.save()
    return store


class DeliveryQuoteApiTests(TestCase):
    """
    GUARANTEES:
    - the quote is public
    - an unresolvable address answers 422 with a reason
    - a store without coordinates cannot quote
    """

    URL = "/api/delivery/quote/"
    ADDRESS = {
        "street": "Rua Augusta",
        "number": "500",
        "neighborhood": "Consolação",
        "city": "São Paulo",
        "state": "SP",
    }

    def setUp(self):
        self.client = APIClient()

    def test_store_location_missing(self):
        res = self.client.post(self.URL, self.ADDRESS, format="json")
        self.assertEqual(res.status_code, 503)
        self.assertEqual(res.data["error"]["code"], "STORE_LOCATION_MISSING")

    def test_quote_found(self):
        _configure_store()
        with mock.patch(REQUEST_JSON, return_value=[{"lat": "-23.5525", "lon": "-46.6350"}]):
            res = self.client.post(self.URL, self.ADDRESS, format="json")

        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data["fee"], "6.90")
        self.assertTrue(res.data["within_delivery_area"])
        self.assertGreaterEqual(res.data["eta_minutes"], 10)

    def test_outside_delivery_area_is_flagged(self):
        _configure_store()
        # roughly 22 km south of the store
        with mock.patch(REQUEST_JSON, return_value=[{"lat": "-23.7505", "lon": "-46.6333"}]):
            res = self.client.post(self.URL, self.ADDRESS, format="json")

        self.assertEqual(res.status_code, 200)
        self.assertFalse(res.data["within_delivery_area"])

    def test_unresolvable_address(self):
        _configure_store()
        with mock.patch(REQUEST_JSON, return_value=[]):
            res = self.client.post(self.URL, self.ADDRESS, format="json")

        self.assertEqual(res.status_code, 422)
        self.assertEqual(res.data["error"]["code"], "ADDRESS_UNRESOLVABLE")
        self.assertEqual(res.data["error"]["reason"], "address_not_found")

    def test_requires_street_or_postal_code(self):
        res = self.client.post(self.URL, {"city": "São Paulo"}, format="json")
        self.assertEqual(res.status_code, 400)

    def test_oversized_address_is_rejected_before_lookup(self):
        _configure_store()
        payload = {**self.ADDRESS, "street": "R" * 600}
        with mock.patch(REQUEST_JSON) as request_json:
            res = self.client.post(self.URL, payload, format="json")

        self.assertEqual(res.status_code, 400)
        self.assertIn("street", res.data)
        request_json.assert_not_called()


class PostalCodeApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_found(self):
        payload = {"logradouro": "Rua Augusta", "bairro": "Consolação", "localidade": "São Paulo", "uf": "SP"}
        with mock.patch(REQUEST_JSON, return_value=payload):
            res = self.client.get("/api/delivery/postal-code/01305-000/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["postal_code"], "01305000")
        self.assertEqual(res.data["state"], "SP")

    def test_malformed(self):
        res = self.client.get("/api/delivery/postal-code/123/")
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data["error"]["code"], "POSTAL_CODE_NOT_FOUND")

    def test_service_down(self):
        with mock.patch(REQUEST_JSON, side_effect=ExternalServiceError("timeout")):
            res = self.client.get("/api/delivery/postal-code/01305000/")
        self.assertEqual(res.status_code, 502)


class MotoboyApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(email="admin@example.com", password="x", role="admin")
        self.kitchen = User.objects.create_user(email="kitchen@example.com", password="x", role="kitchen")
        self.rider = User.objects.create_user(email="rider@example.com", password="x")

    def test_kitchen_cannot_manage_couriers(self):
        self.client.force_authenticate(self.kitchen)
        res = self.client.get("/api/delivery/motoboys/")
        self.assertEqual(res.status_code, 403)

    def test_create_links_user_and_grants_role(self):
        self.client.force_authenticate(self.admin)
        res = self.client.post(
            "/api/delivery/motoboys/",
            {"name": "Carlos", "whatsapp": "(11) 98888-7777", "user": str(self.rider.id)},
            format="json",
        )

        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(res.data["whatsapp"], "11988887777")
        self.rider.refresh_from_db()
        self.assertEqual(self.rider.role, "motoboy")
        self.assertTrue(self.rider.is_staff)

    def test_delete_reverts_user_role(self):
        self.rider.role = "motoboy"
        self.rider.save()
        motoboy = Motoboy.objects.create(name="Carlos", whatsapp="11988887777", user=self.rider)

        self.client.force_authenticate(self.admin)
        res = self.client.delete(f"/api/delivery/motoboys/{motoboy.id}/")

        self.assertEqual(res.status_code, 204)
        self.rider.refresh_from_db()
        self.assertEqual(self.rider.role, "customer")

    def test_duplicate_whatsapp_rejected(self):
        Motoboy.objects.create(name="A", whatsapp="11988887777")
        self.client.force_authenticate(self.admin)
        res = self.client.post(
            "/api/delivery/motoboys/", {"name": "B", "whatsapp": "11988887777"}, format="json"
        )
        self.assertEqual(res.status_code, 400)

    def test_active_orders_and_report(self):
        motoboy = Motoboy.objects.create(name="Carlos", whatsapp="11988887777")
        Order.objects.create(motoboy=motoboy, status=Order.STATUS_DISPATCHED)
        Order.objects.create(motoboy=motoboy, status=Order.STATUS_ARRIVED)
        Order.objects.create(
            motoboy=motoboy,
            status=Order.STATUS_DELIVERED,
            delivery_fee=Decimal("6.90"),
            delivered_at=timezone.now(),
        )
        Order.objects.create(
            motoboy=motoboy,
            status=Order.STATUS_DELIVERED,
            delivery_fee=Decimal("9.90"),
            delivered_at=timezone.now() - timedelta(days=10),
        )

        self.client.force_authenticate(self.admin)

        res = self.client.get(f"/api/delivery/motoboys/{motoboy.id}/active-orders/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(len(res.data), 2)

        res = self.client.get(f"/api/delivery/motoboys/{motoboy.id}/report/")
        self.assertEqual(res.data["total_deliveries"], 2)
        self.assertEqual(res.data["total_fees"], "16.80")

        start = (timezone.localdate() - timedelta(days=1)).isoformat()
        res = self.client.get(f"/api/delivery/motoboys/{motoboy.id}/report/?start_date={start}")
        self.assertEqual(res.data["total_deliveries"], 1)
        self.assertEqual(res.data["total_fees"], "6.90")

    def test_report_invalid_date(self):
        motoboy = Motoboy.objects.create(name="Carlos", whatsapp="11988887777")
        self.client.force_authenticate(self.admin)
        res = self.client.get(f"/api/delivery/motoboys/{motoboy.id}/report/?end_date=yesterday")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "INVALID_DATE")


class AddressApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.alice = User.objects.create_user(email="alice@example.com", password="x")
        self.bob = User.objects.create_user(email="bob@example.com", password="x")
        self.pdv = User.objects.create_user(email="pdv@example.com", password="x", role="pdv")
        Address.objects.create(customer=self.bob, street="Rua B", postal_code="01000000")

    def test_customer_sees_only_own_addresses(self):
        self.client.force_authenticate(self.alice)
        res = self.client.post(
            "/api/delivery/addresses/",
            {"street": "Rua A", "number": "10", "postal_code": "01310-100", "state": "sp", "is_default": True},
            format="json",
        )
        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(res.data["postal_code"], "01310100")
        self.assertEqual(res.data["state"], "SP")

        res = self.client.get("/api/delivery/addresses/")
        self.assertEqual(res.data["count"], 1)
        self.assertEqual(res.data["results"][0]["street"], "Rua A")

    def test_staff_sees_all(self):
        self.client.force_authenticate(self.pdv)
        res = self.client.get("/api/delivery/addresses/")
        self.assertEqual(res.data["count"], 1)

    def test_single_default_per_customer(self):
        first = Address.objects.create(customer=self.alice, street="Rua 1", is_default=True)
        Address.objects.create(customer=self.alice, street="Rua 2", is_default=True)

        first.refresh_from_db()
        self.assertFalse(first.is_default)
