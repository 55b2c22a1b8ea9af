"""Aggregated statistics endpoint."""
from fastapi import APIRouter, Depends

from usage_backend.dependencies import get_stats_service
from usage_backend.schemas.usage import UsageStats
from usage_backend.services import StatsService

router = APIRouter(prefix="/api", tags=["stats"])


@router.get("/stats", response_model=UsageStats)
async def get_stats(service: StatsService = Depends(get_stats_service)):
    """Total users, users active today and total messages sent."""
    return await service.compute_stats()
