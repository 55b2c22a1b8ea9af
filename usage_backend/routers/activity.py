"""Activity logging endpoints."""
import logging

from fastapi import APIRouter, Depends, HTTPException

from usage_backend.dependencies import get_activity_service
from usage_backend.schemas.usage import ActivityListResponse, ActivityLoggedResponse, ActivityRequest
from usage_backend.services import ActivityService
from usage_backend.utils.exceptions import PersistenceError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["activity"])


@router.post("/activity", response_model=ActivityLoggedResponse)
async def log_activity(
    payload: ActivityRequest,
    service: ActivityService = Depends(get_activity_service),
):
    """Record an activity event reported by the client."""
    try:
        await service.record_activity(
            user_id=payload.user_id,
            action=payload.action,
            messages_sent=payload.messages_sent,
            timestamp=payload.timestamp,
        )
    except ValidationError as exc:
        raise HTTPException(
            status_code=400,
            detail={"error": "missing_required_fields", "fields": exc.missing_fields},
        ) from exc
    except PersistenceError as exc:
        logger.error(f"Activity logging error: {exc}")
        raise HTTPException(status_code=500, detail="activity_logging_failed") from exc

    return ActivityLoggedResponse(success=True)


@router.get("/activity", response_model=ActivityListResponse)
async def list_activity(service: ActivityService = Depends(get_activity_service)):
    """Return the retained activity events, oldest first."""
    return ActivityListResponse(activity=await service.list_activity())
