# orders/services/order_service.py

"""
ORDER DOMAIN SERVICES

SINGLE SOURCE OF TRUTH for:
- status changes (request_transition, assign_courier)
- order creation with per-line stock decrements (create_order)
- delivery fee override and delivery quote attachment

GUARANTEES:
- every mutation runs inside a transaction with the order row locked
- domain errors are raised before anything is written
- each successful status change writes one OrderStatusEvent
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.utils import timezone

from delivery.models import Motoboy
from orders.models import Order, OrderItem, OrderStatusEvent
from products.models import Product
from products.services.inventory import decrement_stock

from .exceptions import InvalidFeeError, NotFoundError, PreconditionFailedError
from .order_lifecycle import TIMESTAMP_FIELDS, validate_transition

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")

# Order.delivery_fee is max_digits=10, decimal_places=2
MAX_DELIVERY_FEE = Decimal("1e8")

ORDER_DATA_FIELDS = (
    "order_type",
    "status",
    "customer",
    "customer_name",
    "address",
    "subtotal",
    "discount",
    "delivery_fee",
    "delivery_distance_km",
    "estimated_minutes",
    "payment_method",
    "change_for",
    "notes",
)


def _money(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _lock_order(order) -> Order:
    pk = getattr(order, "pk", order)
    try:
        return Order.objects.select_for_update().get(pk=pk)
    except (Order.DoesNotExist, ValidationError, ValueError):
        raise NotFoundError("Order", pk)


def _stamp(order: Order, status: str, now) -> list[str]:
    field_name = TIMESTAMP_FIELDS.get(status)
    if field_name and getattr(order, field_name) is None:
        setattr(order, field_name, now)
        return [field_name]
    return []


def _record_event(order: Order, from_status: str, user=None):
    OrderStatusEvent.objects.create(
        order=order,
        from_status=from_status,
        to_status=order.status,
        actor=user if getattr(user, "is_authenticated", False) else None,
    )


# ============================================================
# STATUS CHANGES
# ============================================================


@transaction.atomic
def request_transition(order, target_status: str, *, user=None) -> Order:
    """
    Move an order to `target_status` if its transition table allows it.

    The status is re-read under the row lock, so two concurrent requests
    cannot both pass validation against the same stale status.
    """
    locked = _lock_order(order)
    validate_transition(order=locked, target_status=target_status)

    previous = locked.status
    locked.status = target_status
    stamped = _stamp(locked, target_status, timezone.now())

    locked.save(update_fields=["status", "updated_at", *stamped])
    _record_event(locked, previous, user)

    logger.info(
        "order_status_changed",
        extra={
            "order_id": str(locked.id),
            "from_status": previous,
            "to_status": target_status,
        },
    )
    return locked


@transaction.atomic
def assign_courier(order, motoboy_id, *, user=None) -> Order:
    """
    Hand a ready order to a courier: sets the motoboy and dispatches it.

    Only `ready` orders qualify; this is checked before the courier is looked up.
    """
    locked = _lock_order(order)

    if locked.status != Order.STATUS_READY:
        raise PreconditionFailedError(expected=Order.STATUS_READY, actual=locked.status)

    try:
        motoboy = Motoboy.objects.get(pk=motoboy_id, is_active=True)
    except (Motoboy.DoesNotExist, ValidationError, ValueError):
        raise NotFoundError("Motoboy", motoboy_id)

    previous = locked.status
    locked.motoboy = motoboy
    locked.status = Order.STATUS_DISPATCHED
    stamped = _stamp(locked, Order.STATUS_DISPATCHED, timezone.now())

    locked.save(update_fields=["motoboy", "status", "updated_at", *stamped])
    _record_event(locked, previous, user)

    logger.info(
        "order_courier_assigned",
        extra={"order_id": str(locked.id), "motoboy_id": str(motoboy.id)},
    )
    return locked


# ============================================================
# ORDER CREATION
# ============================================================


@dataclass(frozen=True)
class StockFailure:
    index: int
    product_id: str
    reason: str


@dataclass
class OrderCreationResult:
    order: Order
    items: list = field(default_factory=list)
    stock_failures: list = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.stock_failures


def _line_fields(item: dict) -> dict:
    """
    Snapshot values for one line. Name and price fall back to the current
    product when the caller leaves them out.
    """
    product_id = item.get("product_id")
    name = (item.get("product_name") or "").strip()
    unit_price = item.get("unit_price")

    if not name or unit_price is None:
        product = Product.objects.filter(pk=product_id).first()
        if product is None:
            raise ValidationError("product_name and unit_price are required for unknown products")
        name = name or product.name
        unit_price = product.sale_price if unit_price is None else unit_price

    return {
        "product_id": product_id,
        "product_name": name,
        "quantity": item.get("quantity"),
        "unit_price": unit_price,
    }


@transaction.atomic
def create_order(order_data: dict, items: list, *, user=None) -> OrderCreationResult:
    """
    Persist an order and its lines, decrementing stock per line.

    Best effort per line: each line runs in its own savepoint. A line that
    cannot be stored, or whose product cannot be decremented, is logged and
    reported in stock_failures; the other lines stay applied.

    Duplicate product ids are not merged: each line decrements on its own,
    floored at zero.
    """
    data = {k: order_data[k] for k in ORDER_DATA_FIELDS if k in order_data}
    subtotal_given = "subtotal" in data

    order = Order(**data)
    order.recompute_total()
    order.save()

    reason = f"Pedido #{order.short_id}"
    result = OrderCreationResult(order=order)

    for index, item in enumerate(items or []):
        product_id = str(item.get("product_id") or "")

        try:
            with transaction.atomic():
                line = OrderItem.objects.create(order=order, **_line_fields(item))
        except (ValidationError, DatabaseError, TypeError, ValueError, InvalidOperation) as exc:
            logger.error(
                "order_line_rejected",
                extra={"order_id": str(order.id), "index": index, "error": str(exc)},
            )
            result.stock_failures.append(
                StockFailure(index=index, product_id=product_id, reason="invalid_line")
            )
            continue

        result.items.append(line)

        try:
            decrement_stock(
                product_id=line.product_id,
                quantity=line.quantity,
                reason=reason,
                user=user,
            )
        except Product.DoesNotExist:
            logger.error(
                "order_stock_product_missing",
                extra={"order_id": str(order.id), "product_id": product_id},
            )
            result.stock_failures.append(
                StockFailure(index=index, product_id=product_id, reason="product_not_found")
            )
        except (ValidationError, DatabaseError) as exc:
            logger.error(
                "order_stock_decrement_failed",
                extra={"order_id": str(order.id), "product_id": product_id, "error": str(exc)},
            )
            result.stock_failures.append(
                StockFailure(index=index, product_id=product_id, reason="stock_update_failed")
            )

    if not subtotal_given:
        order.subtotal = sum((line.total_price for line in result.items), Decimal("0.00"))
    order.recompute_total()
    order.save(update_fields=["subtotal", "discount", "delivery_fee", "total", "updated_at"])

    logger.info(
        "order_created",
        extra={
            "order_id": str(order.id),
            "order_type": order.order_type,
            "lines": len(result.items),
            "stock_failures": len(result.stock_failures),
        },
    )
    return result


# ============================================================
# DELIVERY FEE
# ============================================================


def _parse_fee(value) -> Decimal:
    if value is None or isinstance(value, bool):
        raise InvalidFeeError("delivery_fee is required")
    try:
        fee = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidFeeError(f"Invalid delivery fee: {value!r}")
    if not fee.is_finite() or fee < 0:
        raise InvalidFeeError(f"Delivery fee must be a non-negative number: {value!r}")
    try:
        fee = _money(fee)
    except InvalidOperation:
        raise InvalidFeeError(f"Delivery fee is too large: {value!r}")
    if fee >= MAX_DELIVERY_FEE:
        raise InvalidFeeError(f"Delivery fee is too large: {value!r}")
    return fee


@transaction.atomic
def override_delivery_fee(order, new_fee, *, user=None) -> Order:
    """
    Manually set the delivery fee.

    The first override keeps the computed fee in original_delivery_fee;
    later overrides leave that captured value alone.
    """
    fee = _parse_fee(new_fee)
    locked = _lock_order(order)

    if not locked.delivery_fee_adjusted:
        locked.original_delivery_fee = locked.delivery_fee

    previous_fee = locked.delivery_fee
    locked.delivery_fee = fee
    locked.delivery_fee_adjusted = True
    locked.delivery_fee_adjusted_at = timezone.now()
    locked.recompute_total()

    locked.save(
        update_fields=[
            "original_delivery_fee",
            "delivery_fee",
            "delivery_fee_adjusted",
            "delivery_fee_adjusted_at",
            "subtotal",
            "discount",
            "total",
            "updated_at",
        ]
    )

    logger.info(
        "order_delivery_fee_overridden",
        extra={
            "order_id": str(locked.id),
            "previous_fee": str(previous_fee),
            "new_fee": str(fee),
            "user_id": str(getattr(user, "pk", "") or ""),
        },
    )
    return locked


@transaction.atomic
def attach_delivery_calculation(order, calculation) -> Order:
    """
    Store a delivery quote on the order and recompute its total.

    A fee that staff already overrode is kept; distance and ETA still update.
    """
    locked = _lock_order(order)

    if not locked.delivery_fee_adjusted:
        locked.delivery_fee = _money(calculation.fee)
    locked.delivery_distance_km = _money(calculation.distance_km)
    locked.estimated_minutes = int(calculation.eta_minutes)
    locked.recompute_total()

    locked.save(
        update_fields=[
            "delivery_fee",
            "delivery_distance_km",
            "estimated_minutes",
            "subtotal",
            "discount",
            "total",
            "updated_at",
        ]
    )
    return locked
