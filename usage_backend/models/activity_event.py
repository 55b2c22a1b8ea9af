"""Activity event record persisted by the record store."""
from datetime import datetime

from pydantic import ConfigDict, Field

from usage_backend.schemas.base import BaseSchema


class ActivityEvent(BaseSchema):
    """A single usage event reported by the client. Immutable once written."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    action: str
    messages_sent: int = Field(default=0, ge=0)
    timestamp: datetime
