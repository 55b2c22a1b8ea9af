"""Activity service: records usage events with bounded retention."""
import logging
from datetime import datetime
from typing import List, Optional

from usage_backend.config import Settings, get_settings
from usage_backend.models import ActivityEvent
from usage_backend.storage import RecordCollection, RecordStore
from usage_backend.utils.datetime_helpers import ensure_utc, utc_now
from usage_backend.utils.exceptions import require_fields

logger = logging.getLogger(__name__)


class ActivityService:
    """Service for logging client activity events.

    Events reference users by id only. An event for an unknown user is still
    recorded, since registration and activity reports can arrive out of order
    or get lost.
    """

    def __init__(self, store: RecordStore, settings: Optional[Settings] = None):
        self.store = store
        self.settings = settings or get_settings()

    @property
    def retention_limit(self) -> int:
        return self.settings.activity_retention_limit

    async def record_activity(
        self,
        user_id: Optional[str],
        action: Optional[str],
        messages_sent: Optional[int] = None,
        timestamp: Optional[datetime] = None,
    ) -> ActivityEvent:
        """
        Append an activity event and touch the user's last-active time.

        Args:
            user_id: Id of the reporting user
            action: Event tag, e.g. "start" or "stop"
            messages_sent: Messages sent in the session, defaults to 0
            timestamp: Event time reported by the client, defaults to now

        Returns:
            The stored ActivityEvent

        Raises:
            ValidationError: If user_id or action is missing
            PersistenceError: If either collection cannot be written
        """
        require_fields(userId=user_id, action=action)

        occurred_at = ensure_utc(timestamp) or utc_now()

        await self._touch_user(user_id, occurred_at)

        event = ActivityEvent(
            user_id=user_id,
            action=action,
            messages_sent=messages_sent or 0,
            timestamp=occurred_at,
        )

        async with self.store.activity_lock:
            events = await self.store.load_activity()
            events.append(event)
            evicted = self._apply_retention(events)
            await self.store.save_activity(events)

        if evicted:
            logger.debug(f"Evicted {evicted} oldest activity events (limit {self.retention_limit})")
        logger.info(f"Recorded activity: user={user_id} action={action} messages={event.messages_sent}")
        return event

    async def list_activity(self) -> List[ActivityEvent]:
        """Return the retained activity events, oldest first."""
        return await self.store.load_activity()

    async def _touch_user(self, user_id: str, occurred_at: datetime) -> bool:
        """Set ``last_active`` on the matching user. Returns False for unknown users."""
        async with self.store.users_lock:
            users = await self.store.load_users()
            user = next((candidate for candidate in users if candidate.id == user_id), None)
            if user is None:
                logger.debug(f"Activity for unknown user {user_id}, skipping last-active update")
                return False

            user.last_active = occurred_at
            await self.store.save_users(users)
        return True

    def _apply_retention(self, events: List[ActivityEvent]) -> int:
        """Drop the oldest events beyond the retention limit, in place."""
        if isinstance(events, RecordCollection):
            return events.trim_oldest(self.retention_limit)
        overflow = len(events) - self.retention_limit
        if overflow <= 0:
            return 0
        del events[:overflow]
        return overflow
