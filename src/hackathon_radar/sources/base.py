from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Awaitable, Callable

from hackathon_radar.models import HackathonListing

logger = logging.getLogger(__name__)

STOP_EMPTY_PAGE = "empty_page"
STOP_ERROR = "error"
STOP_MAX_PAGES = "max_pages"


class PageFetchError(RuntimeError):
    """Raised by a source when a single page cannot be retrieved or decoded."""


@dataclass(slots=True)
class FetchResult:
    listings: list[HackathonListing] = field(default_factory=list)
    pages_fetched: int = 0
    stop_reason: str = STOP_MAX_PAGES
    error: str | None = None


class Source(ABC):
    """A paginated upstream listing API.

    Subclasses fetch one page of raw records and map a raw record to a
    listing; the pagination loop lives here. A page that fails with
    ``PageFetchError`` ends pagination early with whatever was collected;
    any other exception escapes to the caller.
    """

    def __init__(self, source_id: str, *, courtesy_delay_seconds: float = 1.0) -> None:
        self.source_id = source_id
        self.courtesy_delay_seconds = courtesy_delay_seconds
        self.sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep

    @abstractmethod
    def fetch_page(self, page: int) -> list[Any]:
        """Fetch one page of raw records. Blocking; runs in a worker thread."""

    @abstractmethod
    def to_listing(self, record: Any, today: date) -> HackathonListing | None:
        """Map a raw record to a listing, or return None to discard it."""

    async def fetch_all_pages(self, max_pages: int) -> FetchResult:
        result = FetchResult()
        today = date.today()

        for page in range(1, max_pages + 1):
            if page > 1 and self.courtesy_delay_seconds > 0:
                await self.sleep(self.courtesy_delay_seconds)

            logger.info("Fetching %s page %d", self.source_id, page)
            try:
                records = await asyncio.to_thread(self.fetch_page, page)
            except PageFetchError as exc:
                logger.warning("Error fetching %s page %d: %s", self.source_id, page, exc)
                result.stop_reason = STOP_ERROR
                result.error = f"page {page}: {exc}"
                break

            if not records:
                logger.info("%s page %d is empty; stopping", self.source_id, page)
                result.stop_reason = STOP_EMPTY_PAGE
                break

            result.pages_fetched += 1
            listings = self.map_records(records, today)
            result.listings.extend(listings)
            logger.info(
                "Found %d hackathons on %s page %d (%d raw records)",
                len(listings),
                self.source_id,
                page,
                len(records),
            )

        logger.info(
            "Fetched %d hackathons from %s | pages=%d stop=%s",
            len(result.listings),
            self.source_id,
            result.pages_fetched,
            result.stop_reason,
        )
        return result

    def map_records(self, records: list[Any], today: date) -> list[HackathonListing]:
        listings: list[HackathonListing] = []
        for record in records:
            try:
                listing = self.to_listing(record, today)
            except Exception as exc:  # noqa: BLE001
                logger.exception("Discarding malformed %s record: %s", self.source_id, exc)
                continue
            if listing is not None:
                listings.append(listing)
        return listings
