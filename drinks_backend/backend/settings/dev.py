# backend/settings/dev.py
"""
PATH: backend/settings/dev.py

LOCAL DEVELOPMENT SETTINGS

- SQLite by default (DATABASE_URL still wins when set)
- storefront dev servers on localhost allowed through CORS/CSRF
- app loggers at DEBUG unless LOG_LEVEL says otherwise (not under tests)
- delivery quotes stay optional so orders can be created offline
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import LOGGING, TESTING, env

DEBUG = True

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=["localhost", "127.0.0.1", "0.0.0.0"])

CORS_ALLOWED_ORIGINS = env.list(
    "CORS_ALLOWED_ORIGINS",
    default=["http://localhost:5173", "http://localhost:3000"],
)
CSRF_TRUSTED_ORIGINS = env.list(
    "CSRF_TRUSTED_ORIGINS",
    default=["http://localhost:5173", "http://localhost:3000"],
)
CORS_ALLOW_CREDENTIALS = True

REQUIRE_DELIVERY_QUOTE = env.bool("REQUIRE_DELIVERY_QUOTE", default=False)

if not TESTING:
    _dev_log_level = (env("LOG_LEVEL", default="DEBUG") or "DEBUG").strip().upper()
    for _name in ("orders", "delivery", "products", "store"):
        LOGGING["loggers"][_name]["level"] = _dev_log_level
