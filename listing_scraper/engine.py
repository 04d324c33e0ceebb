"""
Core scraping orchestration.

Sequences session -> loader -> classifier -> extractor -> change guard for one
list URL, under a whole-operation time budget, with exactly one full retry
after a browser crash.
"""
import asyncio
import logging
from typing import Optional, Sequence

from playwright.async_api import Error as PlaywrightError

from .classifier import OrganicClassifier
from .config import ScraperConfig
from .dom import Card, parse_cards
from .errors import (
    BrowserCrashed,
    IncompleteCard,
    NoOrganicListingFound,
    OperationTimeout,
    ScrapeError,
)
from .extractor import FieldExtractor
from .guard import ChangeGuard, MemoryStateStore, SqliteStateStore, StateStore
from .loader import PageLoader
from .models import ListingRecord
from .pacing import PacingPolicy
from .session import SessionManager


def default_state_store(config: ScraperConfig) -> StateStore:
    if config.state_db_path:
        return SqliteStateStore(config.state_db_path)
    return MemoryStateStore()


class ListingEngine:
    """Returns the first organic listing of a list page, one call at a time."""

    def __init__(
        self,
        config: Optional[ScraperConfig] = None,
        *,
        pacing: Optional[PacingPolicy] = None,
        session: Optional[SessionManager] = None,
        loader: Optional[PageLoader] = None,
        classifier: Optional[OrganicClassifier] = None,
        extractor: Optional[FieldExtractor] = None,
        guard: Optional[ChangeGuard] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config or ScraperConfig()
        self.logger = logger or logging.getLogger(__name__)
        self.pacing = pacing or PacingPolicy.from_config(self.config)
        self.session = session or SessionManager(self.config, self.pacing)
        self.loader = loader or PageLoader(self.session, self.config)
        self.classifier = classifier or OrganicClassifier(self.config)
        self.extractor = extractor or FieldExtractor()
        self.guard = guard or ChangeGuard(default_state_store(self.config))
        self._lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def get_first_organic_listing(self, list_url: Optional[str] = None) -> ListingRecord:
        """
        Scrape list_url (or the configured default) for its first organic listing.

        Raises NavigationTimeout, NoOrganicListingFound, BrowserCrashed (after
        the single retry) or OperationTimeout.
        """
        list_url = list_url or self.config.list_url
        budget_ms = self.config.operation_timeout_ms
        async with self._lock:
            try:
                return await asyncio.wait_for(self._run(list_url), timeout=budget_ms / 1000.0)
            except asyncio.TimeoutError as exc:
                self.logger.error(f">>> Operation exceeded {budget_ms} ms: {list_url}")
                raise OperationTimeout(
                    f"Scrape did not finish within {budget_ms} ms", url=list_url, budget_ms=budget_ms
                ) from exc

    async def _run(self, list_url: str) -> ListingRecord:
        for attempt in (1, 2):
            try:
                record = await self.scan(list_url)
                return await self.guard.check(record, rescan=lambda: self.scan(list_url))
            except BrowserCrashed as exc:
                if attempt == 2:
                    self.logger.error(f">>> Browser crashed again, giving up: {exc}")
                    raise
                self.logger.warning(f">>> Browser crashed ({exc}); relaunching and retrying once")
                await self.session.relaunch()
        raise AssertionError("unreachable")

    async def scan(self, list_url: str) -> ListingRecord:
        """One full pass: fresh context, load, classify, extract."""
        await self.pacing.jitter()
        context = None
        try:
            context = await self.session.acquire_context()
            ready = await self.loader.load(context, list_url)
            return self.pick(parse_cards(ready.card_html), ready.origin, list_url)
        except PlaywrightError as exc:
            self.session.check_health(exc)
            raise ScrapeError(f"Browser error: {exc}", url=list_url) from exc
        finally:
            if context is not None:
                await self.session.release(context)

    def pick(self, cards: Sequence[Card], origin: str, list_url: str) -> ListingRecord:
        """First organic card in the window that yields a complete record."""
        window = list(cards[: self.config.max_candidates])
        self.logger.debug(f"Card window: {self.classifier.summarize(window)}")

        for card in self.classifier.iter_organic(window):
            try:
                record = self.extractor.extract(card, origin, list_url)
            except IncompleteCard as exc:
                self.logger.debug(f"{exc}; trying next card")
                continue
            self.logger.info(f">>> First organic listing: card #{card.index} {record.ad_id} | {record.title}")
            return record

        raise NoOrganicListingFound(
            f"No organic listing among the first {len(window)} cards",
            url=list_url,
            scanned=len(window),
        )

    async def close(self) -> None:
        await self.session.close()
        store = self.guard.store
        if isinstance(store, SqliteStateStore):
            store.close()
