"""
Browser session management.

One long-lived Chromium process, launched lazily, with a fresh isolated context
per scrape. The process is torn down and relaunched when it disconnects, when
one of its pages crashes, or when the configured request budget is used up.
"""
import asyncio
import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    Error as PlaywrightError,
    async_playwright,
)

from .config import ScraperConfig
from .errors import BrowserCrashed
from .pacing import PacingPolicy


class SessionManager:
    def __init__(
        self,
        config: Optional[ScraperConfig] = None,
        pacing: Optional[PacingPolicy] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config or ScraperConfig()
        self.pacing = pacing or PacingPolicy.from_config(self.config)
        self.logger = logger or logging.getLogger(__name__)

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._fault: Optional[str] = None
        self._requests = 0
        self._launch_lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    @property
    def requests_served(self) -> int:
        return self._requests

    def _crash_reason(self) -> Optional[str]:
        if self._browser is None:
            return None
        if self._fault:
            return self._fault
        if not self._browser.is_connected():
            return "browser disconnected"
        return None

    def unhealthy_reason(self) -> Optional[str]:
        """Why the current process must be recycled, or None if it is fine."""
        reason = self._crash_reason()
        if reason:
            return reason
        budget = self.config.max_requests_per_browser
        if self._browser is not None and budget and self._requests >= budget:
            return f"request budget of {budget} reached"
        return None

    def _on_disconnected(self, browser: Browser) -> None:
        if browser is self._browser:
            self._fault = "browser disconnected"
            self.logger.warning(">>> Browser process disconnected")

    def _on_page_crash(self, page: Page) -> None:
        self._fault = "page crashed"
        self.logger.warning(f">>> Page crashed: {page.url}")

    async def _launch(self) -> None:
        try:
            if self._playwright is None:
                self._playwright = await async_playwright().start()
            browser = await self._playwright.chromium.launch(
                headless=self.config.headless,
                args=list(self.config.launch_args),
            )
        except PlaywrightError as exc:
            raise BrowserCrashed(f"Browser launch failed: {exc}") from exc

        browser.on("disconnected", self._on_disconnected)
        self._browser = browser
        self._fault = None
        self._requests = 0
        self.logger.info(f">>> Browser launched (headless={self.config.headless})")

    async def _teardown_browser(self) -> None:
        browser, self._browser = self._browser, None
        if browser is None:
            return
        try:
            await browser.close()
        except PlaywrightError:
            self.logger.debug("Failed to close browser", exc_info=True)

    async def recycle_if_unhealthy(self) -> None:
        """Launch on first use; relaunch when the process is unhealthy."""
        async with self._launch_lock:
            if self._browser is None:
                await self._launch()
                return
            reason = self.unhealthy_reason()
            if reason:
                self.logger.warning(f">>> Recycling browser: {reason}")
                await self._teardown_browser()
                await self._launch()

    async def relaunch(self) -> None:
        async with self._launch_lock:
            self.logger.warning(">>> Relaunching browser")
            await self._teardown_browser()
            await self._launch()

    async def acquire_context(self) -> BrowserContext:
        """A fresh, isolated context with a rotated identity."""
        await self.recycle_if_unhealthy()
        identity = self.pacing.pick_identity()

        ctx_kwargs = {}
        path = self.config.storage_state_path
        if path and os.path.exists(path):
            ctx_kwargs["storage_state"] = path
            self.logger.debug(f">>> Using existing storage state: {path}")

        try:
            context = await self._browser.new_context(
                **ctx_kwargs,
                user_agent=identity.user_agent,
                viewport=identity.viewport,
                locale=self.config.locale,
            )
        except PlaywrightError as exc:
            self.check_health(exc)
            raise

        context.set_default_timeout(self.config.read_timeout_ms)
        context.set_default_navigation_timeout(self.config.navigation_timeout_ms)
        self._requests += 1
        return context

    async def new_page(self, context: BrowserContext) -> Page:
        page = await context.new_page()
        page.on("crash", self._on_page_crash)
        return page

    async def release(self, context: BrowserContext, persist: Optional[bool] = None) -> None:
        """Close a context, saving its cookie jar first when identity persistence is on."""
        persist = self.config.persist_identity if persist is None else persist
        path = self.config.storage_state_path
        if persist and path and self._crash_reason() is None:
            try:
                await context.storage_state(path=path)
            except PlaywrightError:
                self.logger.warning(f">>> Could not save storage state to {path}", exc_info=True)
        try:
            await context.close()
        except PlaywrightError:
            self.logger.debug("Failed to close context", exc_info=True)

    @asynccontextmanager
    async def context(self) -> AsyncIterator[BrowserContext]:
        context = await self.acquire_context()
        try:
            yield context
        finally:
            await self.release(context)

    def check_health(self, exc: BaseException) -> None:
        """Raise BrowserCrashed if exc was observed while the process is down."""
        reason = self._crash_reason()
        if reason:
            raise BrowserCrashed(f"Browser unhealthy ({reason}): {exc}") from exc

    async def close(self) -> None:
        await self._teardown_browser()
        if self._playwright is not None:
            try:
                await self._playwright.stop()
            finally:
                self._playwright = None
        self.logger.info(">>> Browser session closed")
