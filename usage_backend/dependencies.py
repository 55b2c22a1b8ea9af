"""FastAPI dependencies."""
from fastapi import Depends, Request

from usage_backend.config import Settings, get_settings
from usage_backend.services import ActivityService, RegistrationService, StatsService
from usage_backend.storage import RecordStore


def get_record_store(request: Request) -> RecordStore:
    """Return the record store created at application startup."""
    return request.app.state.record_store

def get_registration_service(
    store: RecordStore = Depends(get_record_store),
    settings: Settings = Depends(get_settings),
) -> RegistrationService:
    return RegistrationService(store, settings)

def get_activity_service(
    store: RecordStore = Depends(get_record_store),
    settings: Settings = Depends(get_settings),
) -> ActivityService:
    return ActivityService(store, settings)

def get_stats_service(
    store: RecordStore = Depends(get_record_store),
    settings: Settings = Depends(get_settings),
) -> StatsService:
    return StatsService(store, settings)
