from __future__ import annotations

import logging
from datetime import date
from typing import Any

import requests

from hackathon_radar.config import SourceSettings, as_bool, as_float, as_int
from hackathon_radar.models import DEFAULT_LOCATION, DEFAULT_PRIZE, HackathonListing
from hackathon_radar.utils.date_normalizer import normalize_date_range, split_period
from hackathon_radar.utils.datetime_utils import parse_timestamp_utc, utc_now
from hackathon_radar.utils.tag_utils import collect_tags
from hackathon_radar.utils.text_utils import as_text, strip_markup
from hackathon_radar.utils.url_utils import resolve_listing_url, site_root

from .base import PageFetchError, Source
from .registry import register_source

logger = logging.getLogger(__name__)

_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "application/json",
    "Accept-Language": "en-US,en;q=0.5",
}


class DevpostSource(Source):
    def __init__(self, settings: SourceSettings) -> None:
        options = settings.options
        super().__init__(
            source_id=settings.id,
            courtesy_delay_seconds=as_float(
                options.get("courtesy_delay_seconds", 1.0),
                field_name="source.courtesy_delay_seconds",
                minimum=0,
            ),
        )
        self.url = settings.url
        self.site_url = str(options.get("site_url") or site_root(settings.url))
        self.page_size = as_int(
            options.get("page_size", 24),
            field_name="source.page_size",
            minimum=1,
        )
        self.timeout_seconds = as_float(
            options.get("timeout_seconds", 10),
            field_name="source.timeout_seconds",
            minimum=1,
        )
        self.status = str(options.get("status", "open"))
        self.order_by = str(options.get("order_by", "deadline"))
        self.skip_ended = as_bool(
            options.get("skip_ended", False),
            field_name="source.skip_ended",
        )

    def fetch_page(self, page: int) -> list[Any]:
        params = {
            "page": page,
            "per_page": self.page_size,
            "status": self.status,
            "order_by": self.order_by,
            "sort_by": self.order_by,
        }
        try:
            response = requests.get(
                self.url,
                params=params,
                headers=_HEADERS,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise PageFetchError(str(exc)) from exc

        if not isinstance(payload, dict):
            raise PageFetchError("response is not a JSON object")

        records = payload.get("hackathons")
        if not isinstance(records, list):
            raise PageFetchError("response has no 'hackathons' list")
        return records

    def to_listing(self, record: Any, today: date) -> HackathonListing | None:
        if not isinstance(record, dict):
            return None

        url = resolve_listing_url(record.get("url"), self.site_url)
        if not url:
            logger.debug("Skipping record without url: %r", record.get("title"))
            return None

        if self.skip_ended and _has_ended(record):
            logger.debug("Skipping ended hackathon %s", url)
            return None

        period = record.get("submission_period_dates")
        raw_start, raw_end = split_period(period)
        start_date, end_date = normalize_date_range(period, today=today)

        return HackathonListing(
            url=url,
            title=as_text(record.get("title")),
            source=self.source_id,
            description=as_text(record.get("tagline")) or as_text(record.get("description")),
            start_date=start_date,
            end_date=end_date,
            location=_location(record.get("displayed_location")),
            prize=_prize(record.get("prize_amount")),
            tags=frozenset(collect_tags(record)),
            participant_count=_count(record.get("registrations_count")),
            raw_start_date=raw_start,
            raw_end_date=raw_end,
        )


def _has_ended(record: dict[str, Any]) -> bool:
    ends_at = parse_timestamp_utc(record.get("submission_period_ends_at"))
    return ends_at is not None and ends_at <= utc_now()


def _location(value: Any) -> str:
    if isinstance(value, dict):
        value = value.get("location")
    return as_text(value) or DEFAULT_LOCATION


def _prize(value: Any) -> str:
    if not isinstance(value, str):
        return DEFAULT_PRIZE
    return strip_markup(value) or DEFAULT_PRIZE


def _count(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return 0
    return max(parsed, 0)


@register_source("devpost")
def _build_devpost_source(settings: SourceSettings) -> Source:
    return DevpostSource(settings)
