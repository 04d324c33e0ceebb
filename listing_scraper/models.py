"""
Data models for the listing engine.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class VehicleAttributes:
    """Fields classified from a card's free-text attribute list."""

    year: Optional[str] = None
    mileage_km: Optional[int] = None
    fuel: Optional[str] = None
    transmission: Optional[str] = None
    body: Optional[str] = None


@dataclass(frozen=True)
class ListingRecord:
    """The first organic listing found on a list page."""

    # Required
    url: str
    title: str

    # Derived from url
    ad_id: Optional[str] = None

    # Card fields
    price_raw: Optional[str] = None
    price_eur: Optional[int] = None
    date: Optional[str] = None
    options: Tuple[str, ...] = field(default_factory=tuple)
    seller_name: Optional[str] = None
    seller_city: Optional[str] = None

    # Classified from the attribute list
    year: Optional[str] = None
    mileage_km: Optional[int] = None
    fuel: Optional[str] = None
    transmission: Optional[str] = None
    body: Optional[str] = None

    # Provenance
    scraped_at: str = ""
    list_url_used: str = ""
    same_as_last: bool = False

    def __post_init__(self) -> None:
        if not self.url or not self.title:
            raise ValueError("ListingRecord requires a url and a title")

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation; sameAsLast only appears when set."""
        data: Dict[str, Any] = {
            "url": self.url,
            "title": self.title,
            "adId": self.ad_id,
            "priceRaw": self.price_raw,
            "priceEUR": self.price_eur,
            "date": self.date,
            "year": self.year,
            "mileageKm": self.mileage_km,
            "fuel": self.fuel,
            "transmission": self.transmission,
            "body": self.body,
            "options": list(self.options),
            "sellerName": self.seller_name,
            "sellerCity": self.seller_city,
            "scrapedAt": self.scraped_at,
            "listUrlUsed": self.list_url_used,
        }
        if self.same_as_last:
            data["sameAsLast"] = True
        return data


@dataclass(frozen=True)
class LastSeen:
    """The Change Guard's persisted state."""

    ad_id: Optional[str]
    observed_at: str
