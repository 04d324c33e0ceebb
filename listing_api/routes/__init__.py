"""
Route package initialization.
"""
from .health import router as health_router
from .latest import router as latest_router

__all__ = ["health_router", "latest_router"]
