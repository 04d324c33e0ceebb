"""
Extraction strategies: ordered selector fallbacks with first-success semantics.

Each strategy reads one value from a Card and returns None when the element is
absent or empty. A chain is a tuple of strategies tried in order.
"""
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

from .dom import Card
from .utils import clean_text


T = TypeVar("T")


@dataclass(frozen=True)
class TextOf:
    """Text content of the first element matching selector."""

    selector: str

    def __call__(self, card: Card) -> Optional[str]:
        node = card.select_one(self.selector)
        if node is None:
            return None
        return clean_text(node.get_text(" ", strip=True))


@dataclass(frozen=True)
class AttrOf:
    """An attribute of the first element matching selector."""

    selector: str
    attr: str

    def __call__(self, card: Card) -> Optional[str]:
        node = card.select_one(self.selector)
        if node is None:
            return None
        value = node.get(self.attr)
        if isinstance(value, list):
            value = " ".join(value)
        return clean_text(value)


@dataclass(frozen=True)
class TextsOf:
    """Texts of every element matching selector, in document order."""

    selector: str

    def __call__(self, card: Card) -> Optional[List[str]]:
        texts = []
        for node in card.select(self.selector):
            t = clean_text(node.get_text(" ", strip=True))
            if t:
                texts.append(t)
        return texts or None


def first_success(chain: Iterable[Callable[[Card], Optional[T]]], card: Card) -> Optional[T]:
    """Return the first non-empty value produced by the chain."""
    for strategy in chain:
        value = strategy(card)
        if value:
            return value
    return None


# Default chains for the hz-Listing card markup, most specific first.

URL_CHAIN: Sequence = (
    AttrOf("a.hz-Listing-coverLink[href]", "href"),
    AttrOf("a[href*='/v/auto-s/']", "href"),
    AttrOf("a[href*='/v/']", "href"),
    AttrOf("a[href]", "href"),
)

TITLE_CHAIN: Sequence = (
    TextOf("[data-testid='listing-title']"),
    TextOf(".hz-Listing-title"),
    TextOf("h3"),
    TextOf("h2"),
    TextOf("h1, h4"),
    AttrOf("a[title]", "title"),
    TextOf("a[href]"),
)

# Title elements that count as recognizable for the classifier (no link fallbacks).
TITLE_ELEMENT_SELECTORS = (
    "[data-testid='listing-title']",
    ".hz-Listing-title",
    "h1", "h2", "h3", "h4",
)

PRICE_CHAIN: Sequence = (
    TextOf("[data-testid='price-box-price']"),
    TextOf(".hz-Listing-price"),
    TextOf("[class*='price']"),
)

DATE_CHAIN: Sequence = (
    TextOf(".hz-Listing-listingDate"),
    TextOf("[data-testid='listing-date']"),
)

SELLER_NAME_CHAIN: Sequence = (
    TextOf("[data-testid='seller-name']"),
    TextOf(".hz-Listing-seller-name"),
    TextOf(".hz-Listing-seller-name-container"),
)

SELLER_CITY_CHAIN: Sequence = (
    TextOf("[data-testid='location-name']"),
    TextOf(".hz-Listing-location"),
    TextOf(".hz-Listing-sellerLocation"),
    TextOf(".hz-Listing-distance-label"),
)

ATTRIBUTES_CHAIN: Sequence = (
    TextsOf(".hz-Listing-attributes .hz-Attribute"),
    TextsOf("[data-testid='listing-attributes'] li"),
    TextsOf(".hz-Attribute"),
)

OPTIONS_CHAIN: Sequence = (
    TextsOf(".hz-Listing-extended-attributes .hz-Attribute"),
    TextsOf(".hz-Listing-extendedAttributes span"),
    TextsOf("[data-testid='listing-options'] li"),
)
