"""
First organic listing scraper package
"""
from .config import ScraperConfig
from .engine import ListingEngine
from .errors import (
    BrowserCrashed,
    ConsentDismissFailed,
    IncompleteCard,
    NavigationTimeout,
    NoOrganicListingFound,
    OperationTimeout,
    ScrapeError,
)
from .guard import ChangeGuard, MemoryStateStore, SqliteStateStore
from .models import ListingRecord, VehicleAttributes
from .pacing import PacingPolicy
from .utils import init_logger, now_iso

__version__ = "1.0.0"

__all__ = [
    "ScraperConfig",
    "ListingEngine",
    "ListingRecord",
    "VehicleAttributes",
    "ChangeGuard",
    "MemoryStateStore",
    "SqliteStateStore",
    "PacingPolicy",
    "ScrapeError",
    "NavigationTimeout",
    "NoOrganicListingFound",
    "IncompleteCard",
    "BrowserCrashed",
    "ConsentDismissFailed",
    "OperationTimeout",
    "init_logger",
    "now_iso",
]
