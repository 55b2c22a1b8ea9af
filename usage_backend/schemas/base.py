"""Base schemas with common configuration."""
from pydantic import BaseModel, ConfigDict, field_validator, model_serializer
from pydantic.alias_generators import to_camel
from datetime import datetime, UTC

from usage_backend.utils.datetime_helpers import ensure_utc


def serialize_datetime_utc(dt: datetime) -> str:
    """
    Serialize datetime to ISO 8601 with explicit UTC timezone.

    This ensures JavaScript's Date constructor interprets the timestamp correctly
    and matches the ``toISOString()`` values written by the client application.
    """
    if dt.tzinfo is None:
        # Treat naive datetimes as UTC
        dt = dt.replace(tzinfo=UTC)
    # Convert to UTC and format with 'Z' suffix
    return dt.astimezone(UTC).isoformat().replace('+00:00', 'Z')


class BaseSchema(BaseModel):
    """Base schema for API payloads and stored records.

    Attributes are snake_case in Python and camelCase on the wire and on disk.
    """

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_validator("*", mode="after")
    @classmethod
    def normalize_datetimes(cls, value):
        if isinstance(value, datetime):
            return ensure_utc(value)
        return value

    @model_serializer(mode="wrap")
    def serialize_model(self, handler):
        """Serialize model values with custom datetime handling."""

        def _convert(value):
            if isinstance(value, datetime):
                return serialize_datetime_utc(value)
            if isinstance(value, list):
                return [_convert(item) for item in value]
            if isinstance(value, dict):
                return {key: _convert(item) for key, item in value.items()}
            return value

        data = handler(self)
        return {key: _convert(value) for key, value in data.items()}
