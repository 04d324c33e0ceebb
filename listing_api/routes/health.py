"""
Health check route handlers.
"""
from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from ..config import config
from ..models import HealthOut

router = APIRouter(tags=["health"])


@router.get("/healthz", response_class=PlainTextResponse)
async def healthz():
    """Liveness probe."""
    return "ok"


@router.get("/health", response_model=HealthOut)
async def health(request: Request):
    """Service status including the browser process."""
    engine = request.app.state.engine
    return HealthOut(
        status="healthy",
        version=config.API_VERSION,
        browser="running" if engine.session.is_running else "idle",
        busy=engine.busy,
    )
