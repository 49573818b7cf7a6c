from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable
from datetime import datetime
from types import MappingProxyType

from hackathon_radar.models import HackathonListing
from hackathon_radar.utils.datetime_utils import utc_now

from .base import Snapshot

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Holds the currently published snapshot and the readiness flag.

    A new snapshot is built completely before it is published by a single
    reference assignment, so readers see either the previous crawl or the new
    one and never a partially filled mapping.
    """

    def __init__(self) -> None:
        self._snapshot = Snapshot()
        self._ready = False

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def ready(self) -> bool:
        return self._ready

    def mark_ready(self) -> bool:
        if self._ready:
            return False
        self._ready = True
        logger.info("Hackathon cache is ready")
        return True

    def replace(
        self,
        listings: Iterable[HackathonListing],
        now: datetime | None = None,
    ) -> int:
        published_at = now or utc_now()

        entries: dict[str, HackathonListing] = {}
        for listing in listings:
            if not listing.url:
                continue
            # later pages win for duplicated urls
            entries[listing.url] = dataclasses.replace(listing, last_updated=published_at)

        previous = len(self._snapshot)
        self._snapshot = Snapshot(listings=MappingProxyType(entries), published_at=published_at)
        logger.info("Published %d hackathons (previously %d)", len(entries), previous)
        return len(entries)

    def values(self) -> list[HackathonListing]:
        return list(self._snapshot.listings.values())

    def get(self, url: str) -> HackathonListing | None:
        return self._snapshot.listings.get(url)

    def is_empty(self) -> bool:
        return len(self._snapshot) == 0

    def __len__(self) -> int:
        return len(self._snapshot)
