# delivery/services/results.py

"""
Tagged results for external lookups.

FOUND          data holds the value
NOT_FOUND      the service answered and there is no match
SERVICE_ERROR  the service could not answer (network, HTTP status, bad body)

The pipeline treats both failure kinds the same for control flow, but keeps
them apart so logs and responses can tell "absent" from "unknown".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .exceptions import AddressUnresolvableError

FOUND = "found"
NOT_FOUND = "not_found"
SERVICE_ERROR = "service_error"


@dataclass(frozen=True)
class LookupResult:
    kind: str
    data: Any = None
    detail: str = ""

    @classmethod
    def found(cls, data) -> "LookupResult":
        return cls(kind=FOUND, data=data)

    @classmethod
    def not_found(cls, detail: str = "") -> "LookupResult":
        return cls(kind=NOT_FOUND, detail=detail)

    @classmethod
    def service_error(cls, detail: str = "") -> "LookupResult":
        return cls(kind=SERVICE_ERROR, detail=detail)

    @property
    def ok(self) -> bool:
        return self.kind == FOUND

    def require(self):
        """Return data, or raise AddressUnresolvableError."""
        if not self.ok:
            raise AddressUnresolvableError(self.detail or self.kind)
        return self.data


@dataclass(frozen=True)
class PostalAddress:
    street: str
    neighborhood: str
    city: str
    state: str
    postal_code: str


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float
