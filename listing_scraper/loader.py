"""
Playwright page loading: navigate, settle, dismiss consent, scroll, snapshot.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from playwright.async_api import (
    BrowserContext,
    Page,
    Route,
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeout,
)

from .config import ScraperConfig
from .errors import ConsentDismissFailed, NavigationTimeout
from .session import SessionManager
from .utils import add_cache_buster, page_origin


CLEAR_STORAGE_SCRIPT = """
try { window.localStorage.clear(); window.sessionStorage.clear(); } catch (e) {}
"""

SNAPSHOT_SCRIPT = "(els, limit) => els.slice(0, limit).map(el => el.outerHTML)"

CONTINUE_WITHOUT_LABELS = (
    "Doorgaan zonder te accepteren",
    "Doorgaan zonder accepteren",
    "Continuer sans accepter",
    "Continue without accepting",
    "Weiter ohne Zustimmung",
)

ACCEPT_LABELS = (
    "Alles accepteren",
    "Accepteren",
    "Akkoord",
    "Tout accepter",
    "Accepter",
    "Accept all",
    "Accept",
    "Alle akzeptieren",
)


def _buttons_with_text(labels: Sequence[str]) -> str:
    return ", ".join(f"button:has-text(\"{label}\")" for label in labels)


CONSENT_STRATEGIES: Tuple[Tuple[str, str], ...] = (
    ("onetrust-id", "#onetrust-accept-btn-handler"),
    ("continue-without-accepting", _buttons_with_text(CONTINUE_WITHOUT_LABELS)),
    ("accept-label", _buttons_with_text(ACCEPT_LABELS)),
)


@dataclass
class ReadyPage:
    """A settled list page and the snapshot of its candidate cards."""

    page: Page
    url: str
    origin: str
    card_html: List[str] = field(default_factory=list)
    qualifying_count: int = 0


class PageLoader:
    def __init__(
        self,
        session: SessionManager,
        config: Optional[ScraperConfig] = None,
        logger: Optional[logging.Logger] = None,
        consent_strategies: Sequence[Tuple[str, str]] = CONSENT_STRATEGIES,
    ) -> None:
        self.session = session
        self.config = config or session.config
        self.logger = logger or logging.getLogger(__name__)
        self.consent_strategies = tuple(consent_strategies)

    async def _route_handler(self, route: Route) -> None:
        if route.request.resource_type in self.config.block_resources:
            await route.abort()
            return
        await route.continue_()

    async def load(self, context: BrowserContext, list_url: str) -> ReadyPage:
        await context.add_init_script(CLEAR_STORAGE_SCRIPT)
        page = await self.session.new_page(context)
        if self.config.block_resources:
            await page.route("**/*", self._route_handler)

        target = add_cache_buster(list_url)
        self.logger.info(f">>> Opening list: {target}")
        try:
            await page.goto(
                target,
                wait_until="domcontentloaded",
                timeout=self.config.navigation_timeout_ms,
            )
        except PlaywrightTimeout as exc:
            raise NavigationTimeout(f"Navigation timed out: {list_url}", url=list_url) from exc
        except PlaywrightError as exc:
            self.session.check_health(exc)
            raise NavigationTimeout(f"Navigation failed: {exc}", url=list_url) from exc

        await self.settle(page)

        try:
            await self.dismiss_consent(page)
        except ConsentDismissFailed as exc:
            self.logger.warning(f">>> {exc}; continuing")

        await self.wait_for_listings(page, list_url)
        qualifying = await self.scroll_until_ready(page)
        card_html = await self.snapshot(page, list_url)
        self.logger.info(f">>> Page ready: {len(card_html)} cards in window, {qualifying} with a posting date")

        return ReadyPage(
            page=page,
            url=page.url,
            origin=page_origin(page.url),
            card_html=card_html,
            qualifying_count=qualifying,
        )

    async def settle(self, page: Page) -> bool:
        """Best-effort wait for network quiescence."""
        try:
            await page.wait_for_load_state("networkidle", timeout=self.config.settle_timeout_ms)
            return True
        except PlaywrightTimeout:
            self.logger.debug("networkidle not reached; continuing")
            return False

    async def dismiss_consent(self, page: Page) -> Optional[str]:
        """
        Click away a consent banner if one shows up.

        Returns the name of the strategy that worked, None when no banner was
        seen. Raises ConsentDismissFailed when a banner was visible but no
        strategy could click it.
        """
        timeout = self.config.consent_timeout_ms
        any_banner = page.locator(", ".join(sel for _, sel in self.consent_strategies)).first
        try:
            await any_banner.wait_for(state="visible", timeout=timeout)
        except PlaywrightTimeout:
            self.logger.debug("No consent banner")
            return None

        failed = []
        for name, selector in self.consent_strategies:
            button = page.locator(selector).first
            try:
                if not await button.is_visible():
                    continue
                await button.click(timeout=timeout)
            except PlaywrightError as exc:
                self.session.check_health(exc)
                failed.append(name)
                continue
            self.logger.info(f">>> Consent dismissed via {name}")
            return name

        raise ConsentDismissFailed(f"Consent banner not dismissed (tried: {', '.join(failed) or 'none visible'})")

    async def wait_for_listings(self, page: Page, list_url: str) -> None:
        try:
            await page.wait_for_selector(
                self.config.card_selector,
                state="attached",
                timeout=self.config.navigation_timeout_ms,
            )
        except PlaywrightTimeout as exc:
            raise NavigationTimeout(
                f"No listing container ({self.config.card_selector}) appeared", url=list_url
            ) from exc

    async def scroll_until_ready(self, page: Page) -> int:
        """
        Scroll by a fixed step until enough dated cards exist or the budget runs out.

        Returns the number of qualifying cards seen at the end.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.config.scroll_budget_ms / 1000.0
        qualifying = self.config.qualifying_selector
        scrolls = 0

        while True:
            count = await page.locator(qualifying).count()
            if count >= self.config.min_candidates:
                break
            if loop.time() >= deadline:
                self.logger.debug(f"Scroll budget spent after {scrolls} scrolls ({count} dated cards)")
                break
            await page.evaluate("(step) => window.scrollBy(0, step)", self.config.scroll_step_px)
            scrolls += 1
            await asyncio.sleep(self.config.scroll_pause_ms / 1000.0)

        return count

    async def snapshot(self, page: Page, list_url: str) -> List[str]:
        """Outer HTML of the first max_candidates cards, in document order."""
        cards = page.locator(self.config.card_selector)
        try:
            return await asyncio.wait_for(
                cards.evaluate_all(SNAPSHOT_SCRIPT, self.config.max_candidates),
                timeout=self.config.read_timeout_ms / 1000.0,
            )
        except asyncio.TimeoutError as exc:
            raise NavigationTimeout("Reading listing cards timed out", url=list_url) from exc
