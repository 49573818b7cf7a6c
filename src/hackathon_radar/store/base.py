from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType

from hackathon_radar.models import HackathonListing


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Every listing published by one crawl, keyed by listing url."""

    listings: Mapping[str, HackathonListing] = field(
        default_factory=lambda: MappingProxyType({})
    )
    published_at: datetime | None = None

    def __len__(self) -> int:
        return len(self.listings)
