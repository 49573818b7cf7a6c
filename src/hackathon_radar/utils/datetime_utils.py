from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from dateutil import parser


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp_utc(value: Any) -> datetime | None:
    """Parse an upstream timestamp (ISO-8601 or free-form) into an aware UTC datetime."""
    if value is None:
        return None

    if isinstance(value, datetime):
        return to_utc(value)

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            return to_utc(parser.parse(value))
        except (ValueError, TypeError, OverflowError):
            return None

    return None


def format_timestamp(value: datetime | None) -> str:
    if value is None:
        return "never"
    return to_utc(value).strftime("%Y-%m-%d %H:%M UTC")
