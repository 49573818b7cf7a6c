from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

DEFAULT_SOURCE_ID = "devpost"
DEFAULT_SOURCE_URL = "https://devpost.com/api/hackathons"


class ConfigError(ValueError):
    """Raised when configuration is invalid."""


@dataclass(slots=True)
class SourceSettings:
    id: str = DEFAULT_SOURCE_ID
    type: str = DEFAULT_SOURCE_ID
    url: str = DEFAULT_SOURCE_URL
    options: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class CrawlSettings:
    max_pages: int = 10
    max_attempts: int = 3
    backoff_seconds: float = 1.0


@dataclass(slots=True)
class ScheduleSettings:
    interval_hours: float = 6.0
    run_on_start: bool = True

    @property
    def interval_seconds(self) -> float:
        return self.interval_hours * 3600


@dataclass(slots=True)
class AppConfig:
    source: SourceSettings = field(default_factory=SourceSettings)
    crawl: CrawlSettings = field(default_factory=CrawlSettings)
    schedule: ScheduleSettings = field(default_factory=ScheduleSettings)
    log_level: str = "INFO"


def as_bool(value: Any, *, field_name: str) -> bool:
    if isinstance(value, bool):
        return value

    if isinstance(value, int) and value in {0, 1}:
        return bool(value)

    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"true", "1", "yes", "on"}:
            return True
        if normalized in {"false", "0", "no", "off"}:
            return False

    raise ConfigError(f"{field_name} must be a boolean")


def as_int(value: Any, *, field_name: str, minimum: int | None = None) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{field_name} must be an integer")

    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{field_name} must be an integer") from exc

    if minimum is not None and parsed < minimum:
        raise ConfigError(f"{field_name} must be >= {minimum}")
    return parsed


def as_float(value: Any, *, field_name: str, minimum: float | None = None) -> float:
    if isinstance(value, bool):
        raise ConfigError(f"{field_name} must be a number")

    try:
        parsed = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{field_name} must be a number") from exc

    if minimum is not None and parsed < minimum:
        raise ConfigError(f"{field_name} must be >= {minimum}")
    return parsed


def _section(parsed: dict[str, Any], name: str) -> dict[str, Any]:
    raw = parsed.get(name, {}) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{name} must be a mapping")
    return raw


def parse_config(parsed: Any) -> AppConfig:
    if parsed is None:
        parsed = {}
    if not isinstance(parsed, dict):
        raise ConfigError("Config root must be a mapping")

    raw_source = _section(parsed, "source")
    source_id = str(raw_source.get("id", DEFAULT_SOURCE_ID)).strip()
    source_type = str(raw_source.get("type", DEFAULT_SOURCE_ID)).strip()
    source_url = str(raw_source.get("url", DEFAULT_SOURCE_URL)).strip()
    if not source_id or not source_type or not source_url:
        raise ConfigError("source must not have an empty id, type or url")

    source_settings = SourceSettings(
        id=source_id,
        type=source_type,
        url=source_url,
        options={
            key: value
            for key, value in raw_source.items()
            if key not in {"id", "type", "url"}
        },
    )

    raw_crawl = _section(parsed, "crawl")
    crawl_settings = CrawlSettings(
        max_pages=as_int(
            raw_crawl.get("max_pages", 10),
            field_name="crawl.max_pages",
            minimum=1,
        ),
        max_attempts=as_int(
            raw_crawl.get("max_attempts", 3),
            field_name="crawl.max_attempts",
            minimum=1,
        ),
        backoff_seconds=as_float(
            raw_crawl.get("backoff_seconds", 1.0),
            field_name="crawl.backoff_seconds",
            minimum=0,
        ),
    )

    raw_schedule = _section(parsed, "schedule")
    interval_hours = as_float(
        raw_schedule.get("interval_hours", 6.0),
        field_name="schedule.interval_hours",
    )
    if interval_hours <= 0:
        raise ConfigError("schedule.interval_hours must be > 0")
    schedule_settings = ScheduleSettings(
        interval_hours=interval_hours,
        run_on_start=as_bool(
            raw_schedule.get("run_on_start", True),
            field_name="schedule.run_on_start",
        ),
    )

    return AppConfig(
        source=source_settings,
        crawl=crawl_settings,
        schedule=schedule_settings,
        log_level=str(parsed.get("log_level", "INFO")).upper(),
    )


def load_config(path: str | Path) -> AppConfig:
    config_path = Path(path).expanduser().resolve()
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        try:
            parsed = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Config file is not valid YAML: {exc}") from exc

    return parse_config(parsed)
