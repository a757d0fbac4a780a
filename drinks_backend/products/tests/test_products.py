# products/tests/test_products.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase
from rest_framework.test import APIClient

from products.models import Category, Product, StockLog

User = get_user_model()


class ProductModelTests(TestCase):
    """
    GUARANTEES:
    - sale price must be positive
    - profit per unit is derived from prices
    """

    def test_sale_price_must_be_positive(self):
        product = Product(name="Free beer", sale_price=Decimal("0.00"))
        with self.assertRaises(ValidationError):
            product.full_clean()

    def test_profit_per_unit(self):
        product = Product(
            name="Vodka", cost_price=Decimal("45.00"), sale_price=Decimal("89.90")
        )
        self.assertEqual(product.profit_per_unit, Decimal("44.90"))


class ProductApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(email="admin@example.com", password="x", role="admin")
        self.kitchen = User.objects.create_user(email="kitchen@example.com", password="x", role="kitchen")
        self.category = Category.objects.create(name="Destilados")

    def test_kitchen_cannot_read_stock(self):
        self.client.force_authenticate(self.kitchen)
        res = self.client.get("/api/products/products/")
        self.assertEqual(res.status_code, 403)

    def test_create_with_initial_stock_writes_log(self):
        self.client.force_authenticate(self.admin)
        res = self.client.post(
            "/api/products/products/",
            {
                "name": "Gin Tanqueray 750ml",
                "category": str(self.category.id),
                "cost_price": "55.00",
                "sale_price": "109.90",
                "initial_stock": 18,
            },
            format="json",
        )

        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(res.data["stock"], 18)
        self.assertEqual(res.data["category_name"], "Destilados")

        log = StockLog.objects.get()
        self.assertEqual((log.previous_stock, log.new_stock, log.change), (0, 18, 18))

    def test_stock_is_not_writable_through_update(self):
        product = Product.objects.create(name="Rum", sale_price=Decimal("69.90"), stock=3)
        self.client.force_authenticate(self.admin)

        res = self.client.patch(
            f"/api/products/products/{product.id}/", {"stock": 99}, format="json"
        )

        self.assertEqual(res.status_code, 200)
        product.refresh_from_db()
        self.assertEqual(product.stock, 3)

    def test_adjust_stock_action(self):
        product = Product.objects.create(name="Rum", sale_price=Decimal("69.90"), stock=3)
        self.client.force_authenticate(self.admin)

        res = self.client.post(
            f"/api/products/products/{product.id}/adjust-stock/",
            {"stock": 12, "reason": "Contagem semanal"},
            format="json",
        )

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["change"], 9)
        product.refresh_from_db()
        self.assertEqual(product.stock, 12)

    def test_adjust_stock_unchanged_returns_204(self):
        product = Product.objects.create(name="Rum", sale_price=Decimal("69.90"), stock=3)
        self.client.force_authenticate(self.admin)

        res = self.client.post(
            f"/api/products/products/{product.id}/adjust-stock/", {"stock": 3}, format="json"
        )
        self.assertEqual(res.status_code, 204)


class StockEndpointTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(email="admin@example.com", password="x", role="admin")
        Product.objects.create(
            name="Skol", cost_price=Decimal("2.00"), sale_price=Decimal("4.50"), stock=3
        )
        self.client.force_authenticate(self.admin)

    def test_report(self):
        res = self.client.get("/api/products/stock/report/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["summary"]["total_products"], 1)

    def test_low_stock_default_threshold(self):
        res = self.client.get("/api/products/stock/low-stock/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["summary"]["threshold"], 10)
        self.assertEqual(len(res.data["products"]), 1)

    def test_low_stock_invalid_threshold(self):
        res = self.client.get("/api/products/stock/low-stock/?threshold=abc")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "INVALID_THRESHOLD")

    def test_logs_listing(self):
        res = self.client.get("/api/products/stock/logs/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["count"], 0)

    def test_anonymous_denied(self):
        self.client.force_authenticate(None)
        res = self.client.get("/api/products/stock/report/")
        self.assertEqual(res.status_code, 401)
