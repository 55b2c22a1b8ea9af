"""User record persisted by the record store."""
from datetime import datetime
from typing import Optional

from usage_backend.schemas.base import BaseSchema

DEFAULT_CLIENT_VERSION = "1.0.0"


class User(BaseSchema):
    """A registered client installation.

    ``id`` and ``email`` are each unique across the users collection.
    ``last_active`` is only mutated by activity logging.
    """

    id: str
    username: str
    email: str
    registered_at: datetime
    version: str = DEFAULT_CLIENT_VERSION
    last_active: Optional[datetime] = None

    def matches(self, user_id: str, email: str) -> bool:
        """Whether this record has the given identity or email."""
        return self.id == user_id or self.email == email

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username}, last_active={self.last_active})>"
