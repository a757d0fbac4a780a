# delivery/services/postal_lookup.py

"""
POSTAL CODE LOOKUP (ViaCEP)

resolve_address_by_postal_code(code) -> LookupResult[PostalAddress]

- code is reduced to digits; anything but 8 digits is NOT_FOUND with no request
- {"erro": true} from the service is NOT_FOUND
- network / HTTP / body failures are SERVICE_ERROR
- never raises
"""

from __future__ import annotations

import logging

from django.conf import settings

from delivery.models.address import normalize_postal_code

from . import http
from .exceptions import ExternalServiceError
from .results import LookupResult, PostalAddress

logger = logging.getLogger(__name__)

POSTAL_CODE_LENGTH = 8


def _lookup_url(code: str) -> str:
    template = getattr(settings, "POSTAL_LOOKUP_URL", "") or "https://viacep.com.br/ws/{code}/json/"
    return template.format(code=code)


def resolve_address_by_postal_code(code) -> LookupResult:
    digits = normalize_postal_code(code)

    if len(digits) != POSTAL_CODE_LENGTH:
        return LookupResult.not_found("invalid_postal_code")

    try:
        payload = http.request_json(_lookup_url(digits))
    except ExternalServiceError as exc:
        logger.warning(
            "postal_lookup_failed",
            extra={"postal_code": digits, "error": str(exc)},
        )
        return LookupResult.service_error(str(exc))

    if not isinstance(payload, dict):
        return LookupResult.service_error("unexpected_payload")

    if payload.get("erro"):
        return LookupResult.not_found("postal_code_not_found")

    return LookupResult.found(
        PostalAddress(
            street=(payload.get("logradouro") or "").strip(),
            neighborhood=(payload.get("bairro") or "").strip(),
            city=(payload.get("localidade") or "").strip(),
            state=(payload.get("uf") or "").strip().upper(),
            postal_code=digits,
        )
    )
