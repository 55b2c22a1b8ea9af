"""Statistics service for the admin dashboard counters."""
import logging
from datetime import date, datetime
from typing import Iterable, Optional

from usage_backend.config import Settings, get_settings
from usage_backend.models import ActivityEvent, User
from usage_backend.schemas.usage import UsageStats
from usage_backend.storage import RecordStore
from usage_backend.utils.datetime_helpers import utc_date, utc_now

logger = logging.getLogger(__name__)


class StatsService:
    """Service for aggregating users and activity into summary counters."""

    def __init__(self, store: RecordStore, settings: Optional[Settings] = None):
        self.store = store
        self.settings = settings or get_settings()

    async def compute_stats(self, now: Optional[datetime] = None) -> UsageStats:
        """
        Compute dashboard counters. Read-only.

        Args:
            now: Reference time for "today", defaults to the current UTC time

        Returns:
            UsageStats with total users, users active today (UTC calendar day)
            and messages reported by session-end events
        """
        users = await self.store.load_users()
        events = await self.store.load_activity()

        return UsageStats(
            total_users=len(users),
            active_today=count_active_on(users, utc_date(now or utc_now())),
            total_messages=sum_session_messages(events, self.settings.session_end_action),
        )


def count_active_on(users: Iterable[User], day: date) -> int:
    """Count users whose last activity falls on ``day`` (UTC)."""
    return sum(1 for user in users if user.last_active and utc_date(user.last_active) == day)


def sum_session_messages(events: Iterable[ActivityEvent], session_end_action: str = "stop") -> int:
    """Sum ``messages_sent`` over session-end events only.

    In-progress events may carry running counts and are excluded.
    """
    return sum(event.messages_sent for event in events if event.action == session_end_action)
