"""Record store for the users and activity collections.

Both collections are flat lists that are always read and written whole.
Loads fail open: absent or corrupt storage yields an empty collection so a
fresh or damaged deployment keeps serving. Entries that do not fit the
record models are carried through as raw JSON and written back unchanged.
Saves overwrite the backing storage completely and raise ``PersistenceError``
when they cannot.

Each collection has an ``asyncio.Lock``. Services hold it across a
load -> mutate -> save cycle so concurrent requests in one process cannot
overwrite each other's updates.
"""
import asyncio
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Sequence, Type, TypeVar

from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError as SchemaValidationError

from usage_backend.models import ActivityEvent, User
from usage_backend.schemas.base import BaseSchema
from usage_backend.storage.record_collection import RecordCollection
from usage_backend.utils.exceptions import PersistenceError

logger = logging.getLogger(__name__)

USERS_FILENAME = "users.json"
ACTIVITY_FILENAME = "activity.json"

RecordT = TypeVar("RecordT", bound=BaseSchema)


class RecordStore(ABC):
    """Abstract repository for the ``User`` and ``ActivityEvent`` collections."""

    def __init__(self):
        self.users_lock = asyncio.Lock()
        self.activity_lock = asyncio.Lock()

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare backing storage without overwriting existing data."""

    @abstractmethod
    async def load_users(self) -> RecordCollection[User]:
        pass

    @abstractmethod
    async def save_users(self, users: Sequence[User]) -> None:
        pass

    @abstractmethod
    async def load_activity(self) -> RecordCollection[ActivityEvent]:
        pass

    @abstractmethod
    async def save_activity(self, events: Sequence[ActivityEvent]) -> None:
        pass

    async def is_healthy(self) -> bool:
        return True


class JsonFileRecordStore(RecordStore):
    """Record store keeping each collection in a pretty-printed JSON file."""

    def __init__(self, storage_dir: Path | str):
        super().__init__()
        self.storage_dir = Path(storage_dir)
        self.users_path = self.storage_dir / USERS_FILENAME
        self.activity_path = self.storage_dir / ACTIVITY_FILENAME

    async def initialize(self) -> None:
        await run_in_threadpool(self._initialize_files)
        logger.info(f"Storage initialized at {self.storage_dir.resolve()}")

    def _initialize_files(self) -> None:
        try:
            self.storage_dir.mkdir(parents=True, exist_ok=True)
            for path in (self.users_path, self.activity_path):
                if not path.exists():
                    path.write_text("[]", encoding="utf-8")
                    logger.info(f"Created empty collection file {path.name}")
        except OSError as exc:
            raise PersistenceError(f"Failed to initialize storage at {self.storage_dir}: {exc}") from exc

    async def load_users(self) -> RecordCollection[User]:
        return await run_in_threadpool(self._read_collection, self.users_path, User)

    async def save_users(self, users: Sequence[User]) -> None:
        await run_in_threadpool(self._write_collection, self.users_path, users)

    async def load_activity(self) -> RecordCollection[ActivityEvent]:
        return await run_in_threadpool(self._read_collection, self.activity_path, ActivityEvent)

    async def save_activity(self, events: Sequence[ActivityEvent]) -> None:
        await run_in_threadpool(self._write_collection, self.activity_path, events)

    async def is_healthy(self) -> bool:
        return self.storage_dir.is_dir()

    @staticmethod
    def _read_collection(path: Path, model: Type[RecordT]) -> RecordCollection[RecordT]:
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return RecordCollection()
        except OSError as exc:
            logger.warning(f"Could not read {path}, treating as empty: {exc}")
            return RecordCollection()

        try:
            entries = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning(f"Corrupt JSON in {path}, treating as empty: {exc}")
            return RecordCollection()

        if not isinstance(entries, list):
            logger.warning(f"Expected a JSON array in {path}, got {type(entries).__name__}; treating as empty")
            return RecordCollection()

        return _collect_entries(entries, model, source=str(path))

    @staticmethod
    def _write_collection(path: Path, records: Sequence[BaseSchema]) -> None:
        if isinstance(records, RecordCollection):
            entries = records.to_stored(_dump_record)
        else:
            entries = [_dump_record(record) for record in records]
        payload = json.dumps(entries, indent=2)
        try:
            path.write_text(payload, encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Failed to write {path}: {exc}") from exc


class InMemoryRecordStore(RecordStore):
    """Record store holding both collections in process memory.

    Loads hand out copies, so a caller must save to make a change visible.
    """

    def __init__(self, users: Sequence[User] = (), activity: Sequence[ActivityEvent] = ()):
        super().__init__()
        self._users: list[User] = [user.model_copy() for user in users]
        self._activity: list[ActivityEvent] = list(activity)

    async def initialize(self) -> None:
        logger.info("Using in-memory record store")

    async def load_users(self) -> RecordCollection[User]:
        return RecordCollection(user.model_copy() for user in self._users)

    async def save_users(self, users: Sequence[User]) -> None:
        self._users = [user.model_copy() for user in users]

    async def load_activity(self) -> RecordCollection[ActivityEvent]:
        # Events are frozen, so sharing instances is safe.
        return RecordCollection(self._activity)

    async def save_activity(self, events: Sequence[ActivityEvent]) -> None:
        self._activity = list(events)


def _dump_record(record: BaseSchema) -> Any:
    return record.model_dump(by_alias=True)


def _collect_entries(entries: list, model: Type[RecordT], source: str) -> RecordCollection[RecordT]:
    """Validate raw entries, keeping the ones that do not fit ``model`` as raw JSON."""

    def parse(entry: Any) -> Optional[RecordT]:
        try:
            return model.model_validate(entry)
        except SchemaValidationError as exc:
            logger.debug(f"Keeping unparsed {model.__name__} entry in {source}: {exc}")
            return None

    collection = RecordCollection.from_entries(entries, parse)
    if collection.unparsed:
        logger.warning(
            f"{len(collection.unparsed)} {model.__name__} entries in {source} do not match the current format; "
            f"they are preserved but ignored"
        )
    return collection
