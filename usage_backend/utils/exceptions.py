"""Exception hierarchy shared by services and routers."""
from typing import Iterable


class UsageBackendException(RuntimeError):
    """Base exception for usage backend errors."""


class ValidationError(UsageBackendException):
    """Raised when a request is missing required fields."""

    def __init__(self, missing_fields: Iterable[str]):
        self.missing_fields = list(missing_fields)
        super().__init__(f"Missing required fields: {', '.join(self.missing_fields)}")


class PersistenceError(UsageBackendException):
    """Raised when the record store cannot write to its backing storage."""


def require_fields(**fields) -> None:
    """Raise ``ValidationError`` naming every empty or missing field."""
    missing = [name for name, value in fields.items() if not value]
    if missing:
        raise ValidationError(missing)
