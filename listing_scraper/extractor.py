"""
Field extraction: turn an organic card into a ListingRecord.
"""
import logging
import re
from dataclasses import dataclass
from typing import Optional, Sequence
from urllib.parse import urlsplit

from . import strategies
from .attributes import classify_attributes
from .dom import Card
from .errors import IncompleteCard
from .models import ListingRecord
from .strategies import first_success
from .utils import now_iso, parse_price, resolve_url


# Marketplace item URLs look like /v/auto-s/volkswagen/m2306520700-vw-golf
AD_ID_PATTERNS = (
    re.compile(r"/m(\d+)-"),
    re.compile(r"/(\d{9,})(?!\d)"),
)


def derive_ad_id(url: Optional[str]) -> Optional[str]:
    """Numeric ad id from the URL path, or None when no pattern matches."""
    if not url:
        return None
    path = urlsplit(url).path
    for pattern in AD_ID_PATTERNS:
        m = pattern.search(path)
        if m:
            return m.group(1)
    return None


@dataclass(frozen=True)
class FieldChains:
    """Ordered strategy chains, one per record field."""

    url: Sequence = strategies.URL_CHAIN
    title: Sequence = strategies.TITLE_CHAIN
    price: Sequence = strategies.PRICE_CHAIN
    date: Sequence = strategies.DATE_CHAIN
    seller_name: Sequence = strategies.SELLER_NAME_CHAIN
    seller_city: Sequence = strategies.SELLER_CITY_CHAIN
    attributes: Sequence = strategies.ATTRIBUTES_CHAIN
    options: Sequence = strategies.OPTIONS_CHAIN


class FieldExtractor:
    """Builds records from cards; required fields missing -> IncompleteCard."""

    def __init__(self, chains: Optional[FieldChains] = None, logger: Optional[logging.Logger] = None) -> None:
        self.chains = chains or FieldChains()
        self.logger = logger or logging.getLogger(__name__)

    def extract(self, card: Card, origin: str, list_url: str) -> ListingRecord:
        url = resolve_url(first_success(self.chains.url, card), origin)
        if not url:
            raise IncompleteCard(f"Card #{card.index} has no link", index=card.index, missing="url")

        title = first_success(self.chains.title, card)
        if not title:
            raise IncompleteCard(f"Card #{card.index} has no title", index=card.index, missing="title")

        price_raw = first_success(self.chains.price, card)
        attributes = classify_attributes(first_success(self.chains.attributes, card))
        options = first_success(self.chains.options, card) or []

        record = ListingRecord(
            url=url,
            title=title,
            ad_id=derive_ad_id(url),
            price_raw=price_raw,
            price_eur=parse_price(price_raw),
            date=first_success(self.chains.date, card),
            options=tuple(options),
            seller_name=first_success(self.chains.seller_name, card),
            seller_city=first_success(self.chains.seller_city, card),
            year=attributes.year,
            mileage_km=attributes.mileage_km,
            fuel=attributes.fuel,
            transmission=attributes.transmission,
            body=attributes.body,
            scraped_at=now_iso(),
            list_url_used=list_url,
        )
        self.logger.debug("Extracted card #%s: %s | %s | %s", card.index, record.ad_id, record.title, record.price_raw)
        return record
