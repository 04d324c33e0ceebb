"""
Tests for field extraction and the full classify -> extract path.
"""
import pytest

from .classifier import OrganicClassifier
from .conftest import LIST_URL, ORGANIC_CARD, ORIGIN
from .dom import Card
from .errors import IncompleteCard
from .extractor import FieldExtractor, derive_ad_id


def test_first_organic_record_end_to_end(config, page_cards):
    card = OrganicClassifier(config).first_organic(page_cards)
    record = FieldExtractor().extract(card, ORIGIN, LIST_URL)

    assert record.url == "https://example-market.test/v/car/m123456789-golf"
    assert record.title == "VW Golf 2018"
    assert record.ad_id == "123456789"
    assert record.price_raw == "€ 12.499,-"
    assert record.price_eur == 12499
    assert record.date == "Vandaag"
    assert record.year == "2018"
    assert record.mileage_km == 145000
    assert record.fuel == "Diesel"
    assert record.transmission == "Handgeschakeld"
    assert record.body is None
    assert record.options == ("Navigatie", "Airco")
    assert record.seller_name == "Garage Peeters"
    assert record.seller_city == "Gent"
    assert record.list_url_used == LIST_URL
    assert record.scraped_at
    assert record.same_as_last is False


def test_missing_link_raises_incomplete_card():
    card = Card('<li class="hz-Listing"><h3>Opel Corsa</h3><span class="hz-Listing-listingDate">Vandaag</span></li>', 4)
    with pytest.raises(IncompleteCard) as exc_info:
        FieldExtractor().extract(card, ORIGIN, LIST_URL)
    assert exc_info.value.missing == "url"
    assert exc_info.value.index == 4


def test_missing_title_raises_incomplete_card():
    card = Card('<li class="hz-Listing"><a href="/v/car/m5-x"><img alt=""></a></li>', 1)
    with pytest.raises(IncompleteCard) as exc_info:
        FieldExtractor().extract(card, ORIGIN, LIST_URL)
    assert exc_info.value.missing == "title"


def test_title_falls_back_to_link_text():
    card = Card('<li class="hz-Listing"><a href="/v/car/m5-x">Fiat 500 Lounge</a></li>', 0)
    record = FieldExtractor().extract(card, ORIGIN, LIST_URL)
    assert record.title == "Fiat 500 Lounge"
    assert record.ad_id == "5"


def test_optional_fields_default_to_none():
    card = Card('<li class="hz-Listing"><a href="/v/car/some-car"><h3>Kia Picanto</h3></a></li>', 0)
    record = FieldExtractor().extract(card, ORIGIN, LIST_URL)
    assert record.ad_id is None
    assert record.price_raw is None
    assert record.price_eur is None
    assert record.options == ()
    assert record.year is None


def test_non_numeric_price_keeps_raw_text():
    card = Card(ORGANIC_CARD.replace("€ 12.499,-", "Bieden"), 0)
    record = FieldExtractor().extract(card, ORIGIN, LIST_URL)
    assert record.price_raw == "Bieden"
    assert record.price_eur is None


@pytest.mark.parametrize("url, expected", [
    ("https://www.2dehands.be/v/auto-s/volkswagen/m2306520700-vw-golf", "2306520700"),
    ("https://example-market.test/item/123456789012", "123456789012"),
    ("https://example-market.test/v/car/golf?ref=m999-", None),
    ("https://example-market.test/v/car/golf", None),
    (None, None),
])
def test_derive_ad_id(url, expected):
    assert derive_ad_id(url) == expected
