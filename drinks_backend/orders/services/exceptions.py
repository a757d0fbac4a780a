# orders/services/exceptions.py

"""
ORDER SERVICE ERRORS

Raised by orders.services before any mutation happens; views translate
them into the canonical error response.
"""


class OrderServiceError(Exception):
    """Base exception for order lifecycle failures."""


class InvalidTransitionError(OrderServiceError):
    def __init__(self, current_status: str, target_status: str, allowed: list[str]):
        self.current_status = current_status
        self.target_status = target_status
        self.allowed = list(allowed)
        super().__init__(
            f"Cannot transition from '{current_status}' to '{target_status}'"
        )


class PreconditionFailedError(OrderServiceError):
    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Order must be '{expected}' (currently '{actual}')")


class NotFoundError(OrderServiceError):
    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class InvalidFeeError(OrderServiceError):
    """Delivery fee is not a finite, non-negative decimal."""
