"""
Shared fixtures: listing card markup as the snapshot step returns it.
"""
import pytest

from .config import ScraperConfig
from .dom import parse_cards


ORIGIN = "https://example-market.test"
LIST_URL = "https://example-market.test/cars?sort=date"

PROMOTED_CARD = """
<li class="hz-Listing">
  <a class="hz-Listing-coverLink" href="/v/car/m111111111-promo"></a>
  <h3 class="hz-Listing-title">Audi A4 Avant</h3>
  <span class="hz-Listing-price">€ 18.900,-</span>
  <span class="hz-Listing-listingDate">Vandaag</span>
  <span class="hz-Listing-priority">Topadvertentie</span>
</li>
"""

UNDATED_CARD = """
<li class="hz-Listing">
  <a class="hz-Listing-coverLink" href="/v/car/m222222222-polo"></a>
  <h3 class="hz-Listing-title">VW Polo</h3>
  <span class="hz-Listing-price">€ 6.500,-</span>
</li>
"""

ORGANIC_CARD = """
<li class="hz-Listing">
  <a class="hz-Listing-coverLink" href="/v/car/m123456789-golf"></a>
  <h3 class="hz-Listing-title">VW Golf 2018</h3>
  <span class="hz-Listing-price">€ 12.499,-</span>
  <div class="hz-Listing-attributes">
    <span class="hz-Attribute">2018</span>
    <span class="hz-Attribute">145.000 km</span>
    <span class="hz-Attribute">Diesel</span>
    <span class="hz-Attribute">Handgeschakeld</span>
  </div>
  <div class="hz-Listing-extended-attributes">
    <span class="hz-Attribute">Navigatie</span>
    <span class="hz-Attribute">Airco</span>
  </div>
  <span class="hz-Listing-listingDate">Vandaag</span>
  <span class="hz-Listing-seller-name">Garage Peeters</span>
  <span class="hz-Listing-location">Gent</span>
</li>
"""


def dated_card(href, title, date="Gisteren", extra=""):
    """Minimal organic-looking card."""
    return f"""
<li class="hz-Listing">
  <a class="hz-Listing-coverLink" href="{href}"></a>
  <h3 class="hz-Listing-title">{title}</h3>
  <span class="hz-Listing-listingDate">{date}</span>
  {extra}
</li>
"""


@pytest.fixture
def config():
    return ScraperConfig(list_url=LIST_URL)


@pytest.fixture
def page_cards():
    """Promoted, undated, then organic: the organic one is third in document order."""
    return parse_cards([PROMOTED_CARD, UNDATED_CARD, ORGANIC_CARD])
