"""
Typed failures raised by the listing engine.

Only structural failures escape the engine: a page that never became ready,
a candidate window without an organic entry, a crashed browser, or an
exhausted operation budget. Card-level and selector-level problems are
handled where they occur.
"""
from typing import Optional


class ScrapeError(Exception):
    """Base class for every failure the engine reports."""

    def __init__(self, message: str, *, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url


class NavigationTimeout(ScrapeError):
    """The page or its listing container never became ready."""


class NoOrganicListingFound(ScrapeError):
    """The candidate window held no qualifying, non-sponsored, complete card."""

    def __init__(self, message: str, *, url: Optional[str] = None, scanned: int = 0) -> None:
        super().__init__(message, url=url)
        self.scanned = scanned


class IncompleteCard(ScrapeError):
    """A single card lacked a required field; the scan moves on."""

    def __init__(self, message: str, *, index: int, missing: str) -> None:
        super().__init__(message)
        self.index = index
        self.missing = missing


class BrowserCrashed(ScrapeError):
    """The browser process disconnected, crashed or failed to launch."""


class ConsentDismissFailed(ScrapeError):
    """A consent banner was visible but none of the strategies dismissed it."""


class OperationTimeout(ScrapeError):
    """The whole operation exceeded its wall-clock budget."""

    def __init__(self, message: str, *, url: Optional[str] = None, budget_ms: int = 0) -> None:
        super().__init__(message, url=url)
        self.budget_ms = budget_ms
