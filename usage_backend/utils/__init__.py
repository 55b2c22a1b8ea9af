"""Utilities module - datetime helpers and exceptions."""
from usage_backend.utils.datetime_helpers import ensure_utc, utc_date, utc_now
from usage_backend.utils.exceptions import (
    PersistenceError,
    UsageBackendException,
    ValidationError,
    require_fields,
)

__all__ = [
    "ensure_utc",
    "utc_date",
    "utc_now",
    "PersistenceError",
    "UsageBackendException",
    "ValidationError",
    "require_fields",
]
