"""
Engine configuration and settings management.

Every knob has a default tuned for the 2dehands.be car listings and can be
overridden from the environment via ScraperConfig.from_env().
"""
import os
from dataclasses import dataclass
from typing import Optional, Tuple


DEFAULT_LIST_URL = (
    "https://www.2dehands.be/l/auto-s/#f:10898|Language:all-languages|offeredSince:Vandaag"
    "|PriceCentsFrom:0|PriceCentsTo:1500000|sortBy:DATE|sortOrder:DECREASING"
)

CARD_SELECTOR = "li.hz-Listing"

DATE_SELECTORS = (
    ".hz-Listing-listingDate",
    "[data-testid='listing-date']",
)

PRIORITY_SELECTORS = (
    ".hz-Listing-priority",
    "[data-testid='listing-priority']",
    "[data-testid='priority-label']",
    ".hz-Listing--priority",
)

# Word-boundary matched against the diacritic-folded card text.
SPONSORED_KEYWORDS = (
    "topadvertentie",
    "topzoekertje",
    "gesponsord",
    "gesponsorde",
    "advertentie",
    "sponsored",
    "publicite",
    "annonce sponsorisee",
    "gesponsert",
)

BLOCKED_RESOURCE_TYPES = ("image", "font", "media")

USER_AGENTS = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36 Edg/123.0.0.0",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36",
)


def _env_str(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class ScraperConfig:
    """Settings for one engine instance."""

    list_url: str = DEFAULT_LIST_URL
    locale: str = "nl-BE"
    headless: bool = True

    # Timeouts (ms)
    navigation_timeout_ms: int = 20_000
    settle_timeout_ms: int = 5_000
    consent_timeout_ms: int = 1_500
    read_timeout_ms: int = 5_000
    operation_timeout_ms: int = 75_000

    # Readiness and scrolling
    card_selector: str = CARD_SELECTOR
    date_selectors: Tuple[str, ...] = DATE_SELECTORS
    min_candidates: int = 3
    scroll_step_px: int = 800
    scroll_pause_ms: int = 400
    scroll_budget_ms: int = 6_000

    # Classification
    max_candidates: int = 25
    priority_selectors: Tuple[str, ...] = PRIORITY_SELECTORS
    sponsored_keywords: Tuple[str, ...] = SPONSORED_KEYWORDS

    # Resources and identity
    block_resources: Tuple[str, ...] = BLOCKED_RESOURCE_TYPES
    user_agents: Tuple[str, ...] = USER_AGENTS
    viewport_width: Tuple[int, int] = (1280, 1600)
    viewport_height: Tuple[int, int] = (800, 1000)
    jitter_min_ms: int = 0
    jitter_max_ms: int = 0
    storage_state_path: Optional[str] = None
    persist_identity: bool = False
    max_requests_per_browser: int = 0

    # Change Guard state
    state_db_path: Optional[str] = None

    launch_args: Tuple[str, ...] = (
        "--disable-blink-features=AutomationControlled",
        "--disable-dev-shm-usage",
        "--no-sandbox",
        "--disable-gpu",
    )

    @property
    def qualifying_selector(self) -> str:
        """Cards that expose a posting date."""
        return f"{self.card_selector}:has({', '.join(self.date_selectors)})"

    @classmethod
    def from_env(cls) -> "ScraperConfig":
        """Build a config from environment variables."""
        defaults = cls()
        return cls(
            list_url=_env_str("LIST_URL", defaults.list_url),
            locale=_env_str("LOCALE", defaults.locale),
            headless=_env_bool("HEADLESS", defaults.headless),
            navigation_timeout_ms=_env_int("NAV_TIMEOUT_MS", defaults.navigation_timeout_ms),
            settle_timeout_ms=_env_int("SETTLE_TIMEOUT_MS", defaults.settle_timeout_ms),
            consent_timeout_ms=_env_int("CONSENT_TIMEOUT_MS", defaults.consent_timeout_ms),
            read_timeout_ms=_env_int("READ_TIMEOUT_MS", defaults.read_timeout_ms),
            operation_timeout_ms=_env_int("OPERATION_TIMEOUT_MS", defaults.operation_timeout_ms),
            min_candidates=_env_int("MIN_CANDIDATES", defaults.min_candidates),
            scroll_step_px=_env_int("SCROLL_STEP_PX", defaults.scroll_step_px),
            scroll_pause_ms=_env_int("SCROLL_PAUSE_MS", defaults.scroll_pause_ms),
            scroll_budget_ms=_env_int("SCROLL_BUDGET_MS", defaults.scroll_budget_ms),
            max_candidates=_env_int("MAX_CANDIDATES", defaults.max_candidates),
            priority_selectors=_env_list("PRIORITY_SELECTORS", defaults.priority_selectors),
            sponsored_keywords=_env_list("SPONSORED_KEYWORDS", defaults.sponsored_keywords),
            block_resources=_env_list("BLOCK_RESOURCES", defaults.block_resources),
            jitter_min_ms=_env_int("JITTER_MIN_MS", defaults.jitter_min_ms),
            jitter_max_ms=_env_int("JITTER_MAX_MS", defaults.jitter_max_ms),
            storage_state_path=_env_str("STORAGE_STATE", defaults.storage_state_path),
            persist_identity=_env_bool("PERSIST_IDENTITY", defaults.persist_identity),
            max_requests_per_browser=_env_int("MAX_REQUESTS_PER_BROWSER", defaults.max_requests_per_browser),
            state_db_path=_env_str("STATE_DB", defaults.state_db_path),
        )
