"""
Tests for sponsored/organic card classification.
"""
from dataclasses import replace

from .classifier import OrganicClassifier, compile_keywords
from .conftest import ORGANIC_CARD, PROMOTED_CARD, UNDATED_CARD, dated_card
from .dom import Card, parse_cards


def test_first_organic_skips_promoted_and_undated(config, page_cards):
    classifier = OrganicClassifier(config)
    first = classifier.first_organic(page_cards)
    assert first is not None
    assert first.index == 2
    assert classifier.summarize(page_cards) == ["sponsored", "skip", "organic"]


def test_priority_marker_is_sponsored(config):
    classifier = OrganicClassifier(config)
    card = Card(PROMOTED_CARD, 0)
    assert classifier.is_qualifying(card)
    assert classifier.sponsored_reason(card) == "priority marker"


def test_card_without_date_is_not_qualifying(config):
    classifier = OrganicClassifier(config)
    assert not classifier.is_qualifying(Card(UNDATED_CARD, 0))
    assert classifier.first_organic(parse_cards([UNDATED_CARD])) is None


def test_keyword_match_uses_word_boundaries(config):
    classifier = OrganicClassifier(config)
    sponsored = Card(dated_card("/v/car/m1-a", "BMW 320d", extra="<span>Gesponsord</span>"), 0)
    plural = Card(dated_card("/v/car/m2-b", "Bekijk alle topadvertenties"), 1)
    assert classifier.sponsored_reason(sponsored) == "keyword 'gesponsord'"
    assert classifier.sponsored_reason(plural) is None


def test_keyword_match_ignores_diacritics(config):
    classifier = OrganicClassifier(config)
    card = Card(dated_card("/v/car/m1-a", "Peugeot 208", extra="<small>Publicité</small>"), 0)
    assert classifier.is_sponsored(card)


def test_card_without_title_and_link_is_sponsored(config):
    classifier = OrganicClassifier(config)
    card = Card('<li class="hz-Listing"><span class="hz-Listing-listingDate">Vandaag</span><div>Promo</div></li>', 0)
    assert classifier.sponsored_reason(card) == "no title and no link"


def test_earliest_organic_wins(config):
    cards = parse_cards([
        dated_card("/v/car/m1-first", "First"),
        dated_card("/v/car/m2-second", "Second"),
    ])
    assert OrganicClassifier(config).first_organic(cards).index == 0


def test_window_is_bounded(config):
    cards = parse_cards([PROMOTED_CARD, PROMOTED_CARD, ORGANIC_CARD])
    classifier = OrganicClassifier(replace(config, max_candidates=2))
    assert classifier.first_organic(cards) is None
    assert classifier.first_organic(cards, max_candidates=3).index == 2


def test_custom_keywords_and_markers(config):
    custom = replace(config, priority_selectors=(".promo",), sponsored_keywords=("uitgelicht",))
    classifier = OrganicClassifier(custom)
    assert classifier.is_sponsored(Card(dated_card("/v/1", "A", extra='<i class="promo"></i>'), 0))
    assert classifier.is_sponsored(Card(dated_card("/v/2", "B", extra="<b>Uitgelicht</b>"), 1))
    # The default marker class is no longer configured.
    assert classifier.sponsored_reason(Card(PROMOTED_CARD, 2)) is None


def test_compile_keywords():
    pattern = compile_keywords(["Annonce sponsorisée", "annonce", " "])
    assert pattern.search("une annonce sponsorisee ici").group(0) == "annonce sponsorisee"
    assert compile_keywords([]) is None
