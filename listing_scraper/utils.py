"""
Utility functions for text processing, price parsing, URLs and logging.
"""
import logging
import re
import secrets
import time
import unicodedata
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urljoin, urlsplit, urlunsplit


CACHE_BUSTER_PARAM = "_cb"

_WS_RE = re.compile(r"\s+")
_CENTS_RE = re.compile(r"[.,]\d{2}\s*$")
_NON_DIGIT_RE = re.compile(r"\D")
_MILEAGE_RE = re.compile(r"(?<!\d)(\d{1,3}(?:[.,\s]\d{3})+|\d+)\s*km\b", re.I)


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _level(name: str, fallback: int) -> int:
    return getattr(logging, (name or "").upper(), fallback)


def init_logger(
    name: str = "listing_scraper",
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure the package logger for one CLI run.

    Module loggers (listing_scraper.engine, .loader, ...) propagate here, so a
    single console handler and an optional UTF-8 file handler cover the whole
    scrape. Calling it again replaces the previous handlers.
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    formatter = logging.Formatter(LOG_FORMAT)
    handlers = [(logging.StreamHandler(), _level(console_level, logging.INFO))]
    if log_file:
        handlers.append((logging.FileHandler(log_file, encoding="utf-8"), _level(file_level, logging.DEBUG)))

    for handler, level in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def now_iso() -> str:
    """Return current UTC timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat()


def clean_text(s: Optional[str]) -> Optional[str]:
    """Collapse whitespace; empty results become None."""
    if not s:
        return None
    s = _WS_RE.sub(" ", s.replace("\xa0", " ")).strip()
    return s or None


def fold_text(s: str) -> str:
    """Lowercase and strip diacritics, for matching only."""
    decomposed = unicodedata.normalize("NFKD", s)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _WS_RE.sub(" ", stripped).strip().lower()


def parse_price(price_text: Optional[str]) -> Optional[int]:
    """
    Parse a whole-euro amount from display text.

    "€ 12.499,-" -> 12499, "€ 8.950,00" -> 8950. A trailing two-digit cents
    group is dropped, every other non-digit is stripped. Text without digits
    ("Bieden", "Op aanvraag") gives None.
    """
    if not price_text:
        return None
    s = _CENTS_RE.sub("", price_text.strip())
    digits = _NON_DIGIT_RE.sub("", s)
    if not digits:
        return None
    return int(digits)


def extract_mileage_km(text: Optional[str]) -> Optional[int]:
    """
    Extract a kilometre value from text like "145.000 km" or "98 500 KM".
    """
    if not text:
        return None
    m = _MILEAGE_RE.search(text)
    if not m:
        return None
    digits = _NON_DIGIT_RE.sub("", m.group(1))
    return int(digits) if digits else None


def page_origin(url: str) -> str:
    """Return scheme://host[:port] of a URL."""
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}"


def resolve_url(href: Optional[str], origin: str) -> Optional[str]:
    """Resolve a possibly relative href against the page origin."""
    href = clean_text(href)
    if not href or href.startswith(("javascript:", "#", "mailto:")):
        return None
    absolute = urljoin(origin.rstrip("/") + "/", href)
    if not absolute.startswith(("http://", "https://")):
        return None
    return absolute


def add_cache_buster(url: str, token: Optional[str] = None) -> str:
    """
    Append a uniqueness token to the query string.

    The token goes before the fragment; site-specific filter fragments such as
    "#f:10898|sortBy:DATE" are passed through untouched.
    """
    token = token or f"{int(time.time() * 1000)}{secrets.token_hex(3)}"
    parts = urlsplit(url)
    extra = f"{CACHE_BUSTER_PARAM}={token}"
    query = f"{parts.query}&{extra}" if parts.query else extra
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))
