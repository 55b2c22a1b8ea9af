"""Health check endpoint."""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import logging

from usage_backend.config import get_settings
from usage_backend.dependencies import get_record_store
from usage_backend.storage import RecordStore
from usage_backend.version import APP_VERSION

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(store: RecordStore = Depends(get_record_store)):
    """Health check endpoint for monitoring."""
    if not await store.is_healthy():
        logger.error("Storage health check failed")
        return JSONResponse(
            status_code=503,
            content={"status": "error", "detail": "Storage unavailable"},
        )

    return {
        "status": "ok",
        "storage": "available",
        "version": APP_VERSION,
        "environment": get_settings().environment,
    }
