# orders/services/order_lifecycle.py

"""
ORDER LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed status transitions for orders,
one table per order type.

DESIGN PRINCIPLES:
- No database writes
- No side effects
- Single source of truth
"""

from orders.models import Order

from .exceptions import InvalidTransitionError

# ============================================================
# TRANSITION TABLES
# ============================================================

DELIVERY_TRANSITIONS = {
    Order.STATUS_PENDING: (Order.STATUS_ACCEPTED, Order.STATUS_CANCELLED),
    Order.STATUS_ACCEPTED: (Order.STATUS_PREPARING, Order.STATUS_CANCELLED),
    Order.STATUS_PREPARING: (Order.STATUS_READY, Order.STATUS_CANCELLED),
    Order.STATUS_READY: (Order.STATUS_DISPATCHED, Order.STATUS_CANCELLED),
    Order.STATUS_DISPATCHED: (
        Order.STATUS_ARRIVED,
        Order.STATUS_DELIVERED,
        Order.STATUS_CANCELLED,
    ),
    Order.STATUS_ARRIVED: (Order.STATUS_DELIVERED, Order.STATUS_CANCELLED),
    Order.STATUS_DELIVERED: (),
    Order.STATUS_CANCELLED: (),
}

# Counter orders are picked up in store: no courier legs.
COUNTER_TRANSITIONS = {
    Order.STATUS_PENDING: (Order.STATUS_ACCEPTED, Order.STATUS_CANCELLED),
    Order.STATUS_ACCEPTED: (
        Order.STATUS_PREPARING,
        Order.STATUS_DELIVERED,
        Order.STATUS_CANCELLED,
    ),
    Order.STATUS_PREPARING: (
        Order.STATUS_READY,
        Order.STATUS_DELIVERED,
        Order.STATUS_CANCELLED,
    ),
    Order.STATUS_READY: (Order.STATUS_DELIVERED, Order.STATUS_CANCELLED),
    Order.STATUS_DELIVERED: (),
    Order.STATUS_CANCELLED: (),
}

TIMESTAMP_FIELDS = {
    Order.STATUS_ACCEPTED: "accepted_at",
    Order.STATUS_PREPARING: "preparing_at",
    Order.STATUS_READY: "ready_at",
    Order.STATUS_DISPATCHED: "dispatched_at",
    Order.STATUS_ARRIVED: "arrived_at",
    Order.STATUS_DELIVERED: "delivered_at",
}


# ============================================================
# DOMAIN RULES
# ============================================================


def transitions_for(order_type) -> dict:
    if order_type == Order.TYPE_COUNTER:
        return COUNTER_TRANSITIONS
    return DELIVERY_TRANSITIONS


def allowed_next_statuses(order_type, status) -> list[str]:
    return list(transitions_for(order_type).get(status, ()))


def can_transition(*, order_type, from_status: str, to_status: str) -> bool:
    return to_status in allowed_next_statuses(order_type, from_status)


def validate_transition(*, order: Order, target_status: str):
    if not can_transition(
        order_type=order.order_type,
        from_status=order.status,
        to_status=target_status,
    ):
        raise InvalidTransitionError(
            current_status=order.status,
            target_status=target_status,
            allowed=allowed_next_statuses(order.order_type, order.status),
        )
