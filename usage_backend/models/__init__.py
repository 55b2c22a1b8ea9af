"""Persisted record models."""
from usage_backend.models.activity_event import ActivityEvent
from usage_backend.models.user import DEFAULT_CLIENT_VERSION, User

__all__ = ["ActivityEvent", "DEFAULT_CLIENT_VERSION", "User"]
