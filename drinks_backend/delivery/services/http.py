# delivery/services/http.py
from __future__ import annotations

import http.client
import json
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from django.conf import settings

from .exceptions import ExternalServiceError

DEFAULT_USER_AGENT = "DrinksDelivery/1.0"


def _safe_preview(text: str, limit: int = 300) -> str:
    text = (text or "").strip()
    if len(text) <= limit:
        return text
    return text[:limit] + " ...(truncated)"


def _default_timeout() -> float:
    return float(getattr(settings, "EXTERNAL_HTTP_TIMEOUT", 5.0))


def request_json(
    url: str,
    *,
    params: dict | None = None,
    headers: dict | None = None,
    timeout: float | None = None,
) -> Any:
    """
    GET a JSON document.

    Any failure (DNS, timeout, non-2xx, non-JSON body) raises
    ExternalServiceError so callers deal with exactly one exception type.
    """
    if params:
        url = f"{url}?{urlencode(params)}"

    try:
        req = Request(
            url,
            headers={
                "Accept": "application/json",
                "User-Agent": DEFAULT_USER_AGENT,
                **(headers or {}),
            },
            method="GET",
        )
    except ValueError as e:
        raise ExternalServiceError(f"Invalid URL {url!r}: {e}") from e

    try:
        with urlopen(req, timeout=timeout or _default_timeout()) as resp:
            raw = resp.read().decode("utf-8", errors="replace")
    except HTTPError as e:
        raise ExternalServiceError(f"HTTP {e.code} from {req.host}") from e
    except URLError as e:
        raise ExternalServiceError(f"URLError from {req.host}: {e.reason}") from e
    except (OSError, ValueError, http.client.HTTPException) as e:
        # socket timeouts and truncated bodies during read
        raise ExternalServiceError(f"Request to {req.host} failed: {e!r}") from e

    try:
        return json.loads(raw)
    except ValueError as e:
        raise ExternalServiceError(
            f"Non-JSON response from {req.host}: {_safe_preview(raw)}"
        ) from e
