"""
Best-effort classification of a card's attribute chips.

Cards list short, unlabeled strings such as "2019", "145.000 km", "Diesel",
"Automaat". Matching happens on a diacritic-folded lowercase copy; the output
keeps the original text. Unrecognized strings are ignored.
"""
import re
from typing import Iterable, Optional, Pattern

from .models import VehicleAttributes
from .utils import clean_text, extract_mileage_km, fold_text


YEAR_MIN = 1950
YEAR_MAX = 2035

# Keywords are stored folded (no diacritics, lowercase).
FUEL_KEYWORDS = frozenset({
    "benzine", "benzin", "essence", "petrol", "gasoline",
    "diesel",
    "elektrisch", "electrique", "electric", "elektro", "ev",
    "hybride", "hybrid", "plug-in hybride", "plug-in hybrid", "mild hybrid",
    "hybride rechargeable", "lpg", "gpl", "cng", "aardgas", "gaz naturel",
    "waterstof", "hydrogene", "hydrogen", "ethanol",
})

TRANSMISSION_KEYWORDS = frozenset({
    "automaat", "automatisch", "automatic", "automatique", "automatik",
    "halfautomaat", "semi-automaat", "semi-automatique", "semi-automatic",
    "handgeschakeld", "manueel", "manual", "manuelle", "manuel", "schaltgetriebe",
})

BODY_KEYWORDS = frozenset({
    "hatchback", "sedan", "berline", "limousine",
    "stationwagon", "station wagon", "break", "combi", "kombi", "estate",
    "suv", "terreinwagen", "tout-terrain", "4x4", "crossover",
    "cabrio", "cabriolet", "convertible", "roadster",
    "coupe", "mpv", "monovolume", "minivan", "ludospace",
    "bestelwagen", "utilitaire", "van", "pick-up", "pickup",
})

_YEAR_RE = re.compile(r"(?<!\d)(\d{4})(?!\d)(?!\s*(?:cc|cm3|km|kw|pk|ch|hp|ps|kg)\b)")

# Separators between values packed into one chip.
_SEPARATOR_RE = re.compile(r"\s*[·•|;]\s*")


def _keyword_pattern(keywords: Iterable[str]) -> Pattern[str]:
    # Longest first so "plug-in hybride" wins over "hybride".
    ordered = sorted(keywords, key=len, reverse=True)
    return re.compile(r"(?<!\w)(?:" + "|".join(re.escape(k) for k in ordered) + r")(?!\w)")


_FUEL_RE = _keyword_pattern(FUEL_KEYWORDS)
_TRANSMISSION_RE = _keyword_pattern(TRANSMISSION_KEYWORDS)
_BODY_RE = _keyword_pattern(BODY_KEYWORDS)


def match_year(folded: str) -> Optional[str]:
    """First 4-digit token within [YEAR_MIN, YEAR_MAX] that is not a measurement."""
    for m in _YEAR_RE.finditer(folded):
        if YEAR_MIN <= int(m.group(1)) <= YEAR_MAX:
            return m.group(1)
    return None




def _keyword_segment(original: str, pattern: Pattern[str]) -> Optional[str]:
    """The part of a chip that matches pattern; combined chips yield one segment."""
    parts = [p for p in (clean_text(s) for s in _SEPARATOR_RE.split(original)) if p]
    for part in parts:
        if pattern.search(fold_text(part)):
            return part
    return None


def classify_attributes(items: Optional[Iterable[str]]) -> VehicleAttributes:
    """
    Assign year, mileage, fuel, transmission and body from attribute strings.

    Every still-unset field is tried against every item, so a combined chip
    like "2019 · 145.000 km · Diesel" fills several fields. Each field keeps
    its first match and is never overwritten. Never raises.
    """
    year: Optional[str] = None
    mileage_km: Optional[int] = None
    fuel: Optional[str] = None
    transmission: Optional[str] = None
    body: Optional[str] = None

    for raw in items or ():
        original = clean_text(raw) if isinstance(raw, str) else None
        if not original:
            continue
        folded = fold_text(original)

        if mileage_km is None:
            mileage_km = extract_mileage_km(folded)
        if year is None:
            year = match_year(folded)
        if fuel is None:
            fuel = _keyword_segment(original, _FUEL_RE)
        if transmission is None:
            transmission = _keyword_segment(original, _TRANSMISSION_RE)
        if body is None:
            body = _keyword_segment(original, _BODY_RE)

    return VehicleAttributes(
        year=year,
        mileage_km=mileage_km,
        fuel=fuel,
        transmission=transmission,
        body=body,
    )
