from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from products.models import Category, Product
from products.services.inventory import set_stock

CATEGORIES = [
    ("Destilados", 1),
    ("Cervejas", 2),
    ("Gelo", 3),
    ("Energeticos", 4),
    ("Aguas e Sucos", 5),
]

# (category, name, cost, margin, sale, stock)
PRODUCTS = [
    ("Destilados", "Vodka Absolut 1L", "45.00", "50.00", "89.90", 20),
    ("Destilados", "Gin Tanqueray 750ml", "55.00", "50.00", "109.90", 18),
    ("Destilados", "Cachaca 51 1L", "12.00", "80.00", "29.90", 40),
    ("Cervejas", "Heineken Long Neck 330ml", "3.50", "70.00", "7.90", 120),
    ("Cervejas", "Brahma Lata 350ml", "2.00", "80.00", "4.90", 200),
    ("Gelo", "Gelo Premium 2kg", "3.00", "100.00", "8.00", 150),
    ("Energeticos", "Red Bull 250ml", "5.00", "60.00", "9.90", 80),
    ("Aguas e Sucos", "Agua Mineral 500ml", "1.00", "100.00", "3.00", 200),
]


class Command(BaseCommand):
    help = "Seed categories and products with opening stock (idempotent)."

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write(self.style.WARNING("Seeding products and stock..."))

        category_objs = {}
        for name, order in CATEGORIES:
            obj, _ = Category.objects.get_or_create(
                name=name, defaults={"sort_order": order}
            )
            category_objs[name] = obj

        created_count = 0
        for cat, name, cost, margin, sale, stock in PRODUCTS:
            product, created = Product.objects.get_or_create(
                name=name,
                defaults={
                    "category": category_objs[cat],
                    "cost_price": Decimal(cost),
                    "profit_margin": Decimal(margin),
                    "sale_price": Decimal(sale),
                },
            )
            if created:
                set_stock(product=product, new_stock=stock, reason="Estoque inicial")
                created_count += 1

        self.stdout.write(
            self.style.SUCCESS(f"Products seeded. created={created_count} total={len(PRODUCTS)}")
        )
