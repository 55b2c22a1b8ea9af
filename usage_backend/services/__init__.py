from usage_backend.services.registration_service import RegistrationService
from usage_backend.services.activity_service import ActivityService
from usage_backend.services.stats_service import StatsService, count_active_on, sum_session_messages

__all__ = [
    "RegistrationService",
    "ActivityService",
    "StatsService",
    "count_active_on",
    "sum_session_messages",
]
