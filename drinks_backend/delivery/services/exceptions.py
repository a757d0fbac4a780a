# delivery/services/exceptions.py

"""
DELIVERY SERVICE ERRORS

External lookups never leak these to callers of the pipeline; they are
turned into LookupResult values at the service boundary.
"""


class DeliveryServiceError(Exception):
    """Base exception for delivery pipeline failures."""


class ExternalServiceError(DeliveryServiceError):
    """Network failure, non-2xx response or unreadable body from a lookup service."""


class AddressUnresolvableError(DeliveryServiceError):
    """Raised when an address cannot be turned into coordinates."""

    def __init__(self, reason: str, detail: str = ""):
        self.reason = reason
        self.detail = detail
        super().__init__(f"{reason}: {detail}" if detail else reason)
