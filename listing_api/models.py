"""
Pydantic models for API response serialization.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ListingOut(BaseModel):
    """Output model for the latest organic listing."""
    model_config = ConfigDict(populate_by_name=True)

    url: str
    title: str
    ad_id: Optional[str] = Field(None, alias="adId")
    price_raw: Optional[str] = Field(None, alias="priceRaw")
    price_eur: Optional[int] = Field(None, alias="priceEUR")
    date: Optional[str] = None
    year: Optional[str] = None
    mileage_km: Optional[int] = Field(None, alias="mileageKm")
    fuel: Optional[str] = None
    transmission: Optional[str] = None
    body: Optional[str] = None
    options: List[str] = Field(default_factory=list)
    seller_name: Optional[str] = Field(None, alias="sellerName")
    seller_city: Optional[str] = Field(None, alias="sellerCity")
    scraped_at: str = Field(..., alias="scrapedAt")
    list_url_used: str = Field(..., alias="listUrlUsed")


class ErrorOut(BaseModel):
    """Error body used by every non-2xx response."""
    error: str


class HealthOut(BaseModel):
    status: str
    version: str
    browser: str
    busy: bool
