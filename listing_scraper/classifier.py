"""
Organic classifier: tell promoted cards apart from regular ones.

A card is considered only when it exposes a posting date; promoted blocks are
often malformed or lack that element. Among those, a card is sponsored when it
carries a priority marker, mentions a sponsored keyword, or has neither a
title element nor a link.
"""
import logging
import re
from typing import Iterable, Iterator, List, Optional, Pattern, Sequence

from .config import ScraperConfig
from .dom import Card
from .strategies import TITLE_ELEMENT_SELECTORS
from .utils import fold_text


LINK_SELECTOR = "a[href]"


def compile_keywords(keywords: Iterable[str]) -> Optional[Pattern[str]]:
    """Word-boundary alternation over folded keywords, longest first."""
    folded = sorted({fold_text(k) for k in keywords if k and k.strip()}, key=len, reverse=True)
    if not folded:
        return None
    return re.compile(r"(?<!\w)(?:" + "|".join(re.escape(k) for k in folded) + r")(?!\w)")


class OrganicClassifier:
    """Scans a window of cards in document order for the first organic one."""

    def __init__(self, config: Optional[ScraperConfig] = None, logger: Optional[logging.Logger] = None) -> None:
        self.config = config or ScraperConfig()
        self.logger = logger or logging.getLogger(__name__)
        self.date_selectors: Sequence[str] = self.config.date_selectors
        self.priority_selectors: Sequence[str] = self.config.priority_selectors
        self._keywords = compile_keywords(self.config.sponsored_keywords)

    def is_qualifying(self, card: Card) -> bool:
        return card.has_any(self.date_selectors)

    def sponsored_reason(self, card: Card) -> Optional[str]:
        """Why a card counts as sponsored, or None for an organic card."""
        if card.has_any(self.priority_selectors):
            return "priority marker"
        if self._keywords is not None:
            m = self._keywords.search(fold_text(card.text))
            if m:
                return f"keyword {m.group(0)!r}"
        if not card.has_any(TITLE_ELEMENT_SELECTORS) and not card.has(LINK_SELECTOR):
            return "no title and no link"
        return None

    def is_sponsored(self, card: Card) -> bool:
        return self.sponsored_reason(card) is not None

    def iter_organic(self, cards: Sequence[Card], max_candidates: Optional[int] = None) -> Iterator[Card]:
        """Yield qualifying, non-sponsored cards within the window, in order."""
        limit = self.config.max_candidates if max_candidates is None else max_candidates
        for card in cards[:limit]:
            if not self.is_qualifying(card):
                self.logger.debug("Card #%s skipped: no posting date", card.index)
                continue
            reason = self.sponsored_reason(card)
            if reason:
                self.logger.debug("Card #%s skipped: sponsored (%s)", card.index, reason)
                continue
            yield card

    def first_organic(self, cards: Sequence[Card], max_candidates: Optional[int] = None) -> Optional[Card]:
        """The earliest organic card in the window, or None when there is none."""
        return next(self.iter_organic(cards, max_candidates), None)

    def summarize(self, cards: Sequence[Card], max_candidates: Optional[int] = None) -> List[str]:
        """One label per card in the window, for debug logging."""
        limit = self.config.max_candidates if max_candidates is None else max_candidates
        labels = []
        for card in cards[:limit]:
            if not self.is_qualifying(card):
                labels.append("skip")
            elif self.is_sponsored(card):
                labels.append("sponsored")
            else:
                labels.append("organic")
        return labels
