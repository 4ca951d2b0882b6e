"""Health check and status endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from response_evaluator.adapters.rendering.html_renderer import TITLE
from response_evaluator.application.services.verdict_cache import VerdictCache
from response_evaluator.infrastructure.api.dependencies import get_verdict_cache

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(cache: VerdictCache = Depends(get_verdict_cache)):
    """Report liveness and cache occupancy."""
    return {
        "status": "ok",
        "cached_verdicts": len(cache),
        "in_flight": cache.in_flight_count,
        "service": "Response Evaluator",
    }


@router.get("/widget", response_class=HTMLResponse)
async def widget_status():
    """Manual check from a browser; Help Scout itself calls POST /."""
    return (
        '<div style="padding: 20px; font-family: Arial, sans-serif;">'
        f"<h3>{TITLE}</h3>"
        "<p>Server is running! Help Scout calls POST /</p>"
        f"<p>Time: {datetime.now(timezone.utc).isoformat()}</p>"
        "</div>"
    )
