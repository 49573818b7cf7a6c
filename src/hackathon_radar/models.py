from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

DEFAULT_LOCATION = "Online"
DEFAULT_PRIZE = "See website for details"


@dataclass(frozen=True, slots=True)
class HackathonListing:
    url: str
    title: str
    source: str
    description: str = ""
    start_date: str = ""
    end_date: str = ""
    location: str = DEFAULT_LOCATION
    prize: str = DEFAULT_PRIZE
    tags: frozenset[str] = field(default_factory=frozenset)
    participant_count: int = 0
    last_updated: datetime | None = None
    raw_start_date: str = ""
    raw_end_date: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "description": self.description,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "source": self.source,
            "location": self.location,
            "prize": self.prize,
            "tags": sorted(self.tags),
            "participantCount": self.participant_count,
            "lastUpdated": self.last_updated.isoformat() if self.last_updated else None,
            "rawStartDate": self.raw_start_date,
            "rawEndDate": self.raw_end_date,
        }
