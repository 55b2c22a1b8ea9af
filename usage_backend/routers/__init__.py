"""API routers."""
from usage_backend.routers import activity, dashboard, health, stats, users

__all__ = [
    "activity",
    "dashboard",
    "health",
    "stats",
    "users",
]
