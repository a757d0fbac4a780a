# products/services/stock_reports.py

"""
STOCK REPORTS (read-only)

- stock_report(): per-product valuation plus a summary
- low_stock_suggestions(threshold): active products under the threshold with
  a purchase suggestion of max(10 - stock, 5) units
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from products.models import Product

TWOPLACES = Decimal("0.01")
DEFAULT_LOW_STOCK_THRESHOLD = 10
RESTOCK_TARGET = 10
MIN_SUGGESTED_PURCHASE = 5
UNCATEGORIZED = "Sem categoria"


def _money(value) -> Decimal:
    return Decimal(str(value or "0")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _category_name(product: Product) -> str:
    return product.category.name if product.category_id else UNCATEGORIZED


def stock_report() -> dict:
    products = list(Product.objects.select_related("category").order_by("name"))

    rows = []
    for p in products:
        cost = _money(p.cost_price)
        sale = _money(p.sale_price)
        stock = int(p.stock)
        rows.append(
            {
                "id": str(p.id),
                "name": p.name,
                "category_id": str(p.category_id) if p.category_id else None,
                "category_name": _category_name(p),
                "stock": stock,
                "cost_price": cost,
                "sale_price": sale,
                "profit_margin": _money(p.profit_margin),
                "profit_per_unit": sale - cost,
                "total_cost_value": _money(cost * stock),
                "total_sale_value": _money(sale * stock),
                "total_potential_profit": _money((sale - cost) * stock),
                "is_active": p.is_active,
            }
        )

    active = [r for r in rows if r["is_active"]]

    summary = {
        "total_products": len(rows),
        "active_products": len(active),
        "total_units_in_stock": sum(r["stock"] for r in rows),
        "total_cost_value": _money(sum((r["total_cost_value"] for r in rows), Decimal("0"))),
        "total_sale_value": _money(sum((r["total_sale_value"] for r in rows), Decimal("0"))),
        "total_potential_profit": _money(
            sum((r["total_potential_profit"] for r in rows), Decimal("0"))
        ),
        "low_stock_count": sum(1 for r in active if r["stock"] < DEFAULT_LOW_STOCK_THRESHOLD),
        "out_of_stock_count": sum(1 for r in active if r["stock"] == 0),
    }

    return {"summary": summary, "products": rows}


def low_stock_suggestions(threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> dict:
    qs = (
        Product.objects.select_related("category")
        .filter(is_active=True, stock__lt=threshold)
        .order_by("stock", "name")
    )

    rows = []
    for p in qs:
        suggested = max(RESTOCK_TARGET - int(p.stock), MIN_SUGGESTED_PURCHASE)
        cost = _money(p.cost_price)
        rows.append(
            {
                "id": str(p.id),
                "name": p.name,
                "category_id": str(p.category_id) if p.category_id else None,
                "category_name": _category_name(p),
                "current_stock": int(p.stock),
                "suggested_purchase": suggested,
                "cost_price": cost,
                "estimated_purchase_cost": _money(cost * suggested),
            }
        )

    return {
        "summary": {
            "total_low_stock_items": len(rows),
            "total_estimated_purchase_cost": _money(
                sum((r["estimated_purchase_cost"] for r in rows), Decimal("0"))
            ),
            "threshold": threshold,
        },
        "products": rows,
    }
