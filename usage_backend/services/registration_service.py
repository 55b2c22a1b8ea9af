"""Registration service: idempotent user sign-up."""
import logging
from datetime import datetime
from typing import List, Optional, Tuple

from usage_backend.config import Settings, get_settings
from usage_backend.models import User
from usage_backend.storage import RecordStore
from usage_backend.utils.datetime_helpers import ensure_utc, utc_now
from usage_backend.utils.exceptions import require_fields

logger = logging.getLogger(__name__)


class RegistrationService:
    """Service for registering client users."""

    def __init__(self, store: RecordStore, settings: Optional[Settings] = None):
        """Initialize registration service.

        Args:
            store: Record store owning the users collection
            settings: Application settings (defaults to the cached settings)
        """
        self.store = store
        self.settings = settings or get_settings()

    async def register(
        self,
        user_id: Optional[str],
        username: Optional[str],
        email: Optional[str],
        registered_at: Optional[datetime] = None,
        version: Optional[str] = None,
    ) -> Tuple[User, bool]:
        """
        Register a user unless one with the same id or email already exists.

        Args:
            user_id: Client-generated user identifier
            username: Display name
            email: Email address
            registered_at: Registration time reported by the client, defaults to now
            version: Client version, defaults to the configured baseline

        Returns:
            (user, created). ``created`` is False when the existing record was
            returned unchanged.

        Raises:
            ValidationError: If user_id, username or email is missing
            PersistenceError: If the users collection cannot be written
        """
        require_fields(id=user_id, username=username, email=email)

        async with self.store.users_lock:
            users = await self.store.load_users()

            existing = next((user for user in users if user.matches(user_id, email)), None)
            if existing:
                logger.info(f"User already registered: id={existing.id}")
                return existing, False

            now = utc_now()
            user = User(
                id=user_id,
                username=username,
                email=email,
                registered_at=ensure_utc(registered_at) or now,
                version=version or self.settings.default_client_version,
                last_active=now,
            )
            users.append(user)
            await self.store.save_users(users)

        logger.info(f"Registered new user: id={user.id} version={user.version} (total {len(users)})")
        return user, True

    async def list_users(self) -> List[User]:
        """Return every registered user."""
        return await self.store.load_users()
