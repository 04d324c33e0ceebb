"""
First Organic Listing API - main application.

Serves the latest non-sponsored listing of a classifieds list page.
"""
import logging
import sys
from contextlib import asynccontextmanager
from dataclasses import replace
from typing import Callable

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from listing_scraper.config import ScraperConfig
from listing_scraper.engine import ListingEngine

from .config import config
from .gate import RunGate
from .routes import health_router, latest_router

# Configure logging
_handlers = [logging.StreamHandler(sys.stdout)]
if config.LOG_FILE_PATH:
    _handlers.append(logging.FileHandler(config.LOG_FILE_PATH))

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=_handlers,
)

logger = logging.getLogger(__name__)


def build_engine() -> ListingEngine:
    """Engine configured from the environment, with the API's pacing defaults."""
    scraper_config = replace(
        ScraperConfig.from_env(),
        list_url=config.LIST_URL,
        jitter_min_ms=config.JITTER_MIN_MS,
        jitter_max_ms=config.JITTER_MAX_MS,
    )
    return ListingEngine(scraper_config)


def create_app(engine_factory: Callable[[], ListingEngine] = build_engine) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan management."""
        logger.info("Starting First Organic Listing API...")
        config.validate()
        engine = engine_factory()
        app.state.engine = engine
        app.state.gate = RunGate(config.MIN_INTERVAL_MS)
        logger.info(f"Default list URL: {config.LIST_URL}")
        try:
            yield
        finally:
            logger.info("Shutting down First Organic Listing API...")
            await engine.close()

    app = FastAPI(
        title=config.API_TITLE,
        version=config.API_VERSION,
        description=config.API_DESCRIPTION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=config.CORS_ALLOW_METHODS,
        allow_headers=config.CORS_ALLOW_HEADERS,
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        message = "Not found" if exc.status_code == 404 and exc.detail == "Not Found" else str(exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"error": message}, headers=exc.headers)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler for unhandled errors."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": str(exc) or "Internal server error"})

    app.include_router(health_router)
    app.include_router(latest_router)
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=config.HOST,
        port=config.PORT,
        log_level=config.LOG_LEVEL.lower(),
    )
