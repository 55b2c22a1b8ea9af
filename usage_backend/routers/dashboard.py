"""Admin dashboard page."""
from functools import lru_cache
from pathlib import Path

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from usage_backend.config import Settings, get_settings

router = APIRouter(tags=["dashboard"])

TEMPLATE_PATH = Path(__file__).resolve().parent.parent / "templates" / "dashboard.html"


@lru_cache()
def load_dashboard_template() -> str:
    return TEMPLATE_PATH.read_text(encoding="utf-8")


@router.get("/dashboard", response_class=HTMLResponse)
async def dashboard(settings: Settings = Depends(get_settings)):
    """Serve the admin dashboard. The page polls the /api endpoints itself."""
    html = load_dashboard_template().replace(
        "__REFRESH_MS__", str(settings.dashboard_refresh_seconds * 1000)
    )
    return HTMLResponse(content=html)
