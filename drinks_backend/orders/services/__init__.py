from .exceptions import (
    InvalidFeeError,
    InvalidTransitionError,
    NotFoundError,
    OrderServiceError,
    PreconditionFailedError,
)
from .order_lifecycle import (
    TIMESTAMP_FIELDS,
    allowed_next_statuses,
    can_transition,
    transitions_for,
    validate_transition,
)
from .order_service import (
    OrderCreationResult,
    StockFailure,
    assign_courier,
    attach_delivery_calculation,
    create_order,
    override_delivery_fee,
    request_transition,
)

__all__ = [
    "InvalidFeeError",
    "InvalidTransitionError",
    "NotFoundError",
    "OrderCreationResult",
    "OrderServiceError",
    "PreconditionFailedError",
    "StockFailure",
    "TIMESTAMP_FIELDS",
    "allowed_next_statuses",
    "assign_courier",
    "attach_delivery_calculation",
    "can_transition",
    "create_order",
    "override_delivery_fee",
    "request_transition",
    "transitions_for",
    "validate_transition",
]
