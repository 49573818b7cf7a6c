from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Awaitable, Callable

from hackathon_radar.sources import Source
from hackathon_radar.sources.base import STOP_ERROR
from hackathon_radar.store import SnapshotStore
from hackathon_radar.utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CrawlStats:
    attempts: int = 0
    fetched: int = 0
    published: int = 0
    pages_fetched: int = 0
    stop_reason: str | None = None
    error: str | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def upstream_unreachable(self) -> bool:
        """Pagination failed on the very first page."""
        return self.stop_reason == STOP_ERROR and self.pages_fetched == 0


class CrawlOrchestrator:
    """Runs crawls one at a time and publishes their results.

    A crawl that raises is retried up to ``max_attempts`` times, waiting
    ``backoff_seconds * n`` after the n-th failed attempt. Pagination that
    stopped early still counts as success and is published as-is. Triggers
    arriving while a crawl is running join that crawl.
    """

    def __init__(
        self,
        *,
        source: Source,
        store: SnapshotStore,
        max_pages: int = 10,
        max_attempts: int = 3,
        backoff_seconds: float = 1.0,
    ) -> None:
        self.source = source
        self.store = store
        self.max_pages = max_pages
        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds
        self.sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
        self.last_stats: CrawlStats | None = None
        self._in_flight: asyncio.Task[CrawlStats] | None = None
        self._completed_attempts = 0

    @property
    def crawling(self) -> bool:
        return self._in_flight is not None and not self._in_flight.done()

    @property
    def completed_crawls(self) -> int:
        return self._completed_attempts

    async def run_crawl(self) -> CrawlStats:
        in_flight = self._in_flight
        if in_flight is not None and not in_flight.done():
            logger.info("Crawl already in progress; waiting for it instead of starting another")
            return await asyncio.shield(in_flight)

        in_flight = asyncio.create_task(self._crawl(), name="hackathon_crawl")
        self._in_flight = in_flight
        return await asyncio.shield(in_flight)

    async def _crawl(self) -> CrawlStats:
        stats = CrawlStats(started_at=utc_now())
        logger.info("Starting crawl of %s", self.source.source_id)

        try:
            for attempt in range(1, self.max_attempts + 1):
                stats.attempts = attempt
                try:
                    result = await self.source.fetch_all_pages(self.max_pages)
                except Exception as exc:  # noqa: BLE001
                    stats.error = f"attempt {attempt}: {exc}"
                    if attempt == self.max_attempts:
                        logger.exception(
                            "Crawl of %s failed after %d attempts; keeping previous snapshot",
                            self.source.source_id,
                            attempt,
                        )
                        break
                    delay = self.backoff_seconds * attempt
                    logger.warning(
                        "Crawl attempt %d/%d failed: %s; retrying in %.1fs",
                        attempt,
                        self.max_attempts,
                        exc,
                        delay,
                    )
                    await self.sleep(delay)
                    continue

                stats.error = None
                stats.fetched = len(result.listings)
                stats.pages_fetched = result.pages_fetched
                stats.stop_reason = result.stop_reason
                if result.error:
                    logger.warning(
                        "Crawl of %s stopped early (%s); publishing %d partial results",
                        self.source.source_id,
                        result.error,
                        stats.fetched,
                    )
                stats.published = self.store.replace(result.listings)
                break
        finally:
            self._completed_attempts += 1
            self.store.mark_ready()
            stats.finished_at = utc_now()
            self.last_stats = stats

        logger.info(
            "Crawl complete | attempts=%d fetched=%d published=%d pages=%d stop=%s ok=%s",
            stats.attempts,
            stats.fetched,
            stats.published,
            stats.pages_fetched,
            stats.stop_reason,
            stats.ok,
        )
        return stats
