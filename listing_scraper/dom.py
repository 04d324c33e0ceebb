"""
Offline view of listing cards.

The loader snapshots each card's outer HTML in one bounded read; everything
after that (classification, extraction) works on these parsed copies, so a
given snapshot always produces the same result.
"""
import logging
from typing import Iterable, List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from .utils import clean_text


logger = logging.getLogger(__name__)


class Card:
    """One listing card parsed from its outer HTML."""

    def __init__(self, html: str, index: int) -> None:
        self.index = index
        self.html = html
        self._soup = BeautifulSoup(html or "", "html.parser")

    def select_one(self, selector: str) -> Optional[Tag]:
        """First element matching selector (the card root included), or None."""
        try:
            return self._soup.select_one(selector)
        except Exception:
            logger.debug("Selector %r failed on card #%s", selector, self.index, exc_info=True)
            return None

    def select(self, selector: str) -> List[Tag]:
        try:
            return list(self._soup.select(selector))
        except Exception:
            logger.debug("Selector %r failed on card #%s", selector, self.index, exc_info=True)
            return []

    def has(self, selector: str) -> bool:
        return self.select_one(selector) is not None

    def has_any(self, selectors: Iterable[str]) -> bool:
        return any(self.has(sel) for sel in selectors)

    @property
    def text(self) -> str:
        """Visible text of the whole card, whitespace-collapsed."""
        return clean_text(self._soup.get_text(" ", strip=True)) or ""

    def __repr__(self) -> str:
        return f"Card(index={self.index})"


def parse_cards(card_html: Iterable[str]) -> List[Card]:
    """Wrap snapshot HTML fragments in document order."""
    return [Card(html, i) for i, html in enumerate(card_html)]
