from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from hackathon_radar.cache import HackathonCache, build_cache
from hackathon_radar.config import ConfigError, load_config
from hackathon_radar.logging_config import setup_logging
from hackathon_radar.models import HackathonListing
from hackathon_radar.utils.datetime_utils import format_timestamp

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hackathon-radar",
        description="Crawl hackathon listings and keep a fresh in-memory snapshot.",
    )
    parser.add_argument(
        "-c",
        "--config",
        default="config.yaml",
        help="Path to config YAML file (default: config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        help="Override config log level (e.g. INFO, DEBUG)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    crawl = subparsers.add_parser("crawl", help="Crawl once and print the listings")
    crawl.add_argument(
        "--json",
        action="store_true",
        help="Print listings as a JSON array",
    )
    subparsers.add_parser("serve", help="Keep the cache warm on the configured schedule")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        app_config = load_config(args.config)
        setup_logging(args.log_level or app_config.log_level)
        cache = build_cache(app_config)
    except ConfigError as exc:
        print(f"Config error: {exc}", file=sys.stderr)
        return 2

    if args.command == "crawl":
        return asyncio.run(_crawl_once(cache, as_json=args.json))

    try:
        asyncio.run(_serve(cache))
    except KeyboardInterrupt:
        logger.info("Interrupted; shutting down")
    return 0


async def _crawl_once(cache: HackathonCache, *, as_json: bool) -> int:
    listings = await cache.list()
    listings.sort(key=lambda item: item.title.lower())

    if as_json:
        print(json.dumps([listing.to_dict() for listing in listings], indent=2))
    else:
        for listing in listings:
            _print_listing(listing)

    stats = cache.orchestrator.last_stats
    if stats is not None:
        logger.info(
            "Crawl finished | listings=%d pages=%d attempts=%d error=%s",
            len(listings),
            stats.pages_fetched,
            stats.attempts,
            stats.error or "none",
        )
    if stats is None:
        return 0
    if stats.upstream_unreachable:
        logger.error("Crawl fetched no pages; upstream unreachable")
        return 1
    return 0 if stats.ok else 1


async def _serve(cache: HackathonCache) -> None:
    cache.start()
    try:
        await asyncio.Event().wait()
    finally:
        await cache.stop()


def _print_listing(listing: HackathonListing) -> None:
    dates = " - ".join(value for value in (listing.start_date, listing.end_date) if value)
    print(listing.title or "(untitled)")
    print(f"  URL: {listing.url}")
    print(f"  Dates: {dates or 'unknown'}")
    print(f"  Location: {listing.location}")
    print(f"  Prize: {listing.prize}")
    if listing.tags:
        print(f"  Tags: {', '.join(sorted(listing.tags))}")
    print(f"  Participants: {listing.participant_count}")
    print(f"  Updated: {format_timestamp(listing.last_updated)}")
    print("")


if __name__ == "__main__":
    raise SystemExit(main())
