# products/services/inventory.py

"""
======================================================
PATH: products/services/inventory.py
======================================================
INVENTORY CORE SERVICES

Purpose:
- Decrement stock for an order line (floored at zero, always logged).
- Set stock to a counted value (manual adjustment, always logged).

Rules:
- Quantities are integer units.
- Every call locks the product row before reading stock.
- Every stored change produces exactly one StockLog.
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from products.models import Product, StockLog

logger = logging.getLogger(__name__)


def _to_int(value, *, field_name="value") -> int:
    if value is None or value == "":
        raise ValidationError(f"{field_name} is required")
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def _require_positive_int(value, *, field_name: str) -> int:
    v = _to_int(value, field_name=field_name)
    if v <= 0:
        raise ValidationError(f"{field_name} must be greater than zero")
    return v


def _require_reason(reason) -> str:
    r = (reason or "").strip()
    if not r:
        raise ValidationError("reason is required")
    return r


@transaction.atomic
def decrement_stock(*, product_id, quantity, reason: str, user=None) -> StockLog:
    """
    Remove `quantity` units from a product, never going below zero.

    The log records the requested change (-quantity) next to the stored
    before/after values, so a shortfall stays visible:
        stock 2, quantity 4  ->  StockLog(previous=2, new=0, change=-4)

    Raises Product.DoesNotExist for unknown ids.
    """
    qty = _require_positive_int(quantity, field_name="quantity")
    reason = _require_reason(reason)

    product = Product.objects.select_for_update().get(id=product_id)

    previous = int(product.stock)
    new = max(0, previous - qty)

    product.stock = new
    product.save(update_fields=["stock", "updated_at"])

    if previous < qty:
        logger.warning(
            "stock_shortfall_floored",
            extra={
                "product_id": str(product.id),
                "previous_stock": previous,
                "requested": qty,
            },
        )

    return StockLog.objects.create(
        product=product,
        previous_stock=previous,
        new_stock=new,
        change=-qty,
        reason=reason,
        performed_by=user,
    )


@transaction.atomic
def set_stock(*, product: Product, new_stock, reason: str, user=None) -> StockLog | None:
    """
    Manual stock count: store `new_stock` as the product's stock.

    Returns None (and writes nothing) when the value is unchanged.
    """
    target = _to_int(new_stock, field_name="stock")
    if target < 0:
        raise ValidationError("stock cannot be negative")
    reason = _require_reason(reason)

    locked = Product.objects.select_for_update().get(id=product.id)
    previous = int(locked.stock)

    if previous == target:
        return None

    locked.stock = target
    locked.save(update_fields=["stock", "updated_at"])
    product.stock = target

    logger.info(
        "stock_adjusted",
        extra={"product_id": str(locked.id), "previous_stock": previous, "new_stock": target},
    )

    return StockLog.objects.create(
        product=locked,
        previous_stock=previous,
        new_stock=target,
        change=target - previous,
        reason=reason,
        performed_by=user,
    )
