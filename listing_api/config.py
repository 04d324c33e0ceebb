"""
API configuration and settings management.
"""
import os

from listing_scraper.config import DEFAULT_LIST_URL


class Config:
    """Application configuration."""

    # API settings
    API_TITLE: str = "First Organic Listing API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Latest non-sponsored listing of a classifieds list page"

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "3000"))

    # Scraping
    LIST_URL: str = os.getenv("LIST_URL", DEFAULT_LIST_URL)

    # Anti-overlap and pacing
    MIN_INTERVAL_MS: int = int(os.getenv("MIN_INTERVAL_MS", "45000"))
    JITTER_MIN_MS: int = int(os.getenv("JITTER_MIN_MS", "1000"))
    JITTER_MAX_MS: int = int(os.getenv("JITTER_MAX_MS", "5000"))

    # Hard ceiling for one /latest call, above the engine's own budget
    REQ_TIMEOUT_MS: int = int(os.getenv("REQ_TIMEOUT_MS", "90000"))

    # CORS settings
    CORS_ORIGINS: list = ["*"]
    CORS_ALLOW_CREDENTIALS: bool = False
    CORS_ALLOW_METHODS: list = ["GET"]
    CORS_ALLOW_HEADERS: list = ["*"]

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FILE_PATH: str = os.getenv("LOG_FILE_PATH", "")

    @classmethod
    def validate(cls) -> None:
        """Validate configuration on startup."""
        if cls.MIN_INTERVAL_MS < 0 or cls.REQ_TIMEOUT_MS <= 0:
            raise ValueError("MIN_INTERVAL_MS must be >= 0 and REQ_TIMEOUT_MS > 0")
        if cls.JITTER_MIN_MS > cls.JITTER_MAX_MS:
            raise ValueError(f"JITTER_MIN_MS ({cls.JITTER_MIN_MS}) exceeds JITTER_MAX_MS ({cls.JITTER_MAX_MS})")


# Global config instance
config = Config()
