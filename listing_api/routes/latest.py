"""
Route handler for the latest organic listing.
"""
import asyncio
import logging
import math
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request, Response

from listing_scraper.errors import (
    BrowserCrashed,
    NavigationTimeout,
    NoOrganicListingFound,
    OperationTimeout,
    ScrapeError,
)

from ..config import config
from ..models import ErrorOut, ListingOut

logger = logging.getLogger(__name__)
router = APIRouter(tags=["latest"])

# Prevent downstream/proxy caching
NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, max-age=0",
    "Pragma": "no-cache",
    "Expires": "0",
}


def _fail(status_code: int, message: str, **extra_headers: str) -> HTTPException:
    return HTTPException(status_code=status_code, detail=message, headers={**NO_CACHE_HEADERS, **extra_headers})


@router.get(
    "/latest",
    response_model=ListingOut,
    responses={
        204: {"description": "No new listing since the previous call"},
        404: {"model": ErrorOut},
        429: {"model": ErrorOut},
        502: {"model": ErrorOut},
        504: {"model": ErrorOut},
    },
)
async def get_latest(
    request: Request,
    response: Response,
    url: Optional[str] = Query(None, description="List URL to scrape instead of the configured default"),
):
    """Scrape the list page and return its first organic listing."""
    engine = request.app.state.engine
    gate = request.app.state.gate

    if engine.busy:
        raise _fail(429, "Busy, try again shortly.")

    wait_ms = gate.remaining_ms()
    if wait_ms > 0:
        seconds = math.ceil(wait_ms / 1000)
        raise _fail(429, f"Too soon, retry in ~{seconds}s", **{"Retry-After": str(seconds)})

    gate.mark()
    list_url = url or config.LIST_URL

    try:
        record = await asyncio.wait_for(
            engine.get_first_organic_listing(list_url),
            timeout=config.REQ_TIMEOUT_MS / 1000.0,
        )
    except NoOrganicListingFound as exc:
        logger.info(f"Nothing found for {list_url}: {exc}")
        raise _fail(404, str(exc))
    except (NavigationTimeout, OperationTimeout, asyncio.TimeoutError) as exc:
        logger.error(f"Scrape timed out for {list_url}: {exc!r}")
        raise _fail(504, str(exc) or "Scrape timed out")
    except BrowserCrashed as exc:
        logger.error(f"Browser crashed for {list_url}: {exc}")
        raise _fail(502, str(exc))
    except ScrapeError as exc:
        logger.error(f"Scrape failed for {list_url}: {exc}")
        raise _fail(500, str(exc))

    if record.same_as_last:
        return Response(status_code=204, headers=NO_CACHE_HEADERS)

    response.headers.update(NO_CACHE_HEADERS)
    return ListingOut(**record.to_dict())
