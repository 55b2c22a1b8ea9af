"""Request and response schemas for the usage API."""
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from usage_backend.models import ActivityEvent, User
from usage_backend.schemas.base import BaseSchema


class RegisterRequest(BaseSchema):
    """Registration payload. Required fields are checked by the service."""

    id: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    registered_at: Optional[datetime] = None
    version: Optional[str] = None


class RegisterResponse(BaseSchema):
    """``success`` is set for new users, ``message`` for repeat registrations."""

    success: Optional[bool] = None
    message: Optional[str] = None
    user: User


class ActivityRequest(BaseSchema):
    """Activity payload. Required fields are checked by the service."""

    user_id: Optional[str] = None
    action: Optional[str] = None
    messages_sent: Optional[int] = Field(default=None, ge=0)
    timestamp: Optional[datetime] = None


class ActivityLoggedResponse(BaseSchema):
    success: bool = True


class UsersResponse(BaseSchema):
    users: List[User]


class ActivityListResponse(BaseSchema):
    activity: List[ActivityEvent]


class UsageStats(BaseSchema):
    """Summary counters shown on the admin dashboard."""

    total_users: int
    active_today: int
    total_messages: int
