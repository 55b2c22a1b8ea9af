"""Persistence layer for the users and activity collections."""
from usage_backend.storage.record_store import (
    ACTIVITY_FILENAME,
    USERS_FILENAME,
    InMemoryRecordStore,
    JsonFileRecordStore,
    RecordStore,
)
from usage_backend.storage.record_collection import RecordCollection

__all__ = [
    "ACTIVITY_FILENAME",
    "USERS_FILENAME",
    "InMemoryRecordStore",
    "JsonFileRecordStore",
    "RecordCollection",
    "RecordStore",
]
