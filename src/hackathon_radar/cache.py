"""Read API over the published hackathon snapshot.

Request handlers only ever talk to ``HackathonCache``: ``is_ready()`` tells
"still initializing" apart from "loaded, possibly empty", and ``list()``
returns the current snapshot, crawling first if nothing has been loaded yet.
"""

from __future__ import annotations

import logging

from hackathon_radar.config import AppConfig
from hackathon_radar.models import HackathonListing
from hackathon_radar.scheduler import PeriodicScheduler
from hackathon_radar.service import CrawlOrchestrator, CrawlStats
from hackathon_radar.sources import create_source
from hackathon_radar.store import SnapshotStore

logger = logging.getLogger(__name__)


class HackathonCache:
    def __init__(
        self,
        *,
        orchestrator: CrawlOrchestrator,
        interval_seconds: float = 6 * 3600,
        run_on_start: bool = True,
    ) -> None:
        self.orchestrator = orchestrator
        self.store: SnapshotStore = orchestrator.store
        self.scheduler = PeriodicScheduler(
            self._scheduled_crawl,
            interval_seconds,
            run_immediately=run_on_start,
        )

    async def list(self) -> list[HackathonListing]:
        if self.store.is_empty() and not self.store.ready:
            logger.info("No hackathons loaded yet; crawling before answering")
            await self.orchestrator.run_crawl()
        return self.store.values()

    def is_ready(self) -> bool:
        return self.store.ready

    async def refresh(self) -> CrawlStats:
        return await self.orchestrator.run_crawl()

    def start(self) -> None:
        self.scheduler.start()

    async def stop(self) -> None:
        await self.scheduler.stop()

    async def _scheduled_crawl(self) -> None:
        stats = await self.orchestrator.run_crawl()
        if not stats.ok:
            logger.error("Scheduled crawl failed: %s", stats.error)
        elif stats.upstream_unreachable:
            logger.warning("Scheduled crawl fetched no pages; snapshot is now empty")


def build_cache(app_config: AppConfig) -> HackathonCache:
    source = create_source(app_config.source)
    orchestrator = CrawlOrchestrator(
        source=source,
        store=SnapshotStore(),
        max_pages=app_config.crawl.max_pages,
        max_attempts=app_config.crawl.max_attempts,
        backoff_seconds=app_config.crawl.backoff_seconds,
    )
    return HackathonCache(
        orchestrator=orchestrator,
        interval_seconds=app_config.schedule.interval_seconds,
        run_on_start=app_config.schedule.run_on_start,
    )
