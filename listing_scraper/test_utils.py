"""
Tests for text, price and URL helpers.
"""
import logging

import pytest

from .utils import (
    add_cache_buster,
    clean_text,
    extract_mileage_km,
    fold_text,
    init_logger,
    page_origin,
    parse_price,
    resolve_url,
)


@pytest.mark.parametrize("text, expected", [
    ("€ 12.499,-", 12499),
    ("€ 8.950,00", 8950),
    ("€\xa03.250", 3250),
    ("12 500 €", 12500),
    ("Bieden", None),
    ("Op aanvraag", None),
    ("", None),
    (None, None),
])
def test_parse_price(text, expected):
    assert parse_price(text) == expected


def test_clean_text():
    assert clean_text("  VW   Golf \n 2018 ") == "VW Golf 2018"
    assert clean_text("a\xa0b") == "a b"
    assert clean_text("   ") is None
    assert clean_text(None) is None


def test_fold_text_strips_diacritics():
    assert fold_text("Publicité") == "publicite"
    assert fold_text("  Annonce   Sponsorisée ") == "annonce sponsorisee"
    assert fold_text("Coupé") == "coupe"


def test_extract_mileage_km():
    assert extract_mileage_km("145.000 km") == 145000
    assert extract_mileage_km("98 500 KM") == 98500
    assert extract_mileage_km("12km") == 12
    assert extract_mileage_km("2019") is None
    assert extract_mileage_km(None) is None


def test_page_origin():
    assert page_origin("https://example-market.test/cars?sort=date#top") == "https://example-market.test"


def test_resolve_url():
    origin = "https://example-market.test"
    assert resolve_url("/v/car/m1-x", origin) == "https://example-market.test/v/car/m1-x"
    assert resolve_url("https://other.test/a", origin) == "https://other.test/a"
    assert resolve_url("javascript:void(0)", origin) is None
    assert resolve_url("#", origin) is None
    assert resolve_url(None, origin) is None


def test_cache_buster_appends_to_query():
    url = add_cache_buster("https://example-market.test/cars?sort=date", token="abc")
    assert url == "https://example-market.test/cars?sort=date&_cb=abc"


def test_cache_buster_keeps_filter_fragment():
    url = add_cache_buster("https://www.2dehands.be/l/auto-s/#f:10898|sortBy:DATE", token="abc")
    assert url == "https://www.2dehands.be/l/auto-s/?_cb=abc#f:10898|sortBy:DATE"


def test_cache_buster_is_unique_by_default():
    base = "https://example-market.test/cars"
    assert add_cache_buster(base) != add_cache_buster(base)


def test_init_logger_replaces_handlers(tmp_path):
    log_file = tmp_path / "run.log"
    logger = init_logger("listing_scraper.test_run", console_level="WARNING", log_file=str(log_file))
    assert len(logger.handlers) == 2
    assert logger.handlers[0].level == logging.WARNING

    logger.debug("card #3 skipped")
    logger.handlers[1].flush()
    assert "card #3 skipped" in log_file.read_text(encoding="utf-8")

    again = init_logger("listing_scraper.test_run", console_level="bogus")
    assert again is logger
    assert len(logger.handlers) == 1
    assert logger.handlers[0].level == logging.INFO
    logger.handlers[0].close()
    logger.removeHandler(logger.handlers[0])
