from __future__ import annotations

import asyncio
from typing import Any

import pytest
import requests

from hackathon_radar.config import SourceSettings
from hackathon_radar.models import DEFAULT_PRIZE
from hackathon_radar.sources import DevpostSource, create_source
from hackathon_radar.sources.base import STOP_EMPTY_PAGE, STOP_ERROR, STOP_MAX_PAGES
from hackathon_radar.sources.registry import SourceRegistrationError

API_URL = "https://devpost.com/api/hackathons"


class _DummyResponse:
    def __init__(self, payload: Any, status_code: int = 200) -> None:
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self) -> Any:
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


def _record(slug: str, **overrides: Any) -> dict[str, Any]:
    record: dict[str, Any] = {
        "title": f"Hack {slug}",
        "url": f"https://{slug}.devpost.com/",
        "tagline": "Build something useful",
        "submission_period_dates": "Feb 09, 2025 - Mar 15, 2025",
        "displayed_location": {"icon": "globe", "location": "Online"},
        "prize_amount": "$<span data-currency-value>10,000</span>",
        "themes": [{"id": 23, "name": "Machine Learning/AI"}],
        "registrations_count": 120,
    }
    record.update(overrides)
    return record


def _source(**options: Any) -> DevpostSource:
    options.setdefault("courtesy_delay_seconds", 0)
    return DevpostSource(SourceSettings(id="devpost", type="devpost", url=API_URL, options=options))


def _recording_sleep(delays: list[float]):
    async def _sleep(seconds: float) -> None:
        delays.append(seconds)

    return _sleep


def _paged_get(pages: dict[int, Any], calls: list[dict[str, Any]]):
    def _fake_get(url: str, *args, **kwargs) -> _DummyResponse:
        assert url == API_URL
        params = kwargs["params"]
        calls.append(params)
        page = pages.get(params["page"], [])
        if isinstance(page, Exception):
            raise page
        if isinstance(page, _DummyResponse):
            return page
        return _DummyResponse({"hackathons": page, "meta": {"total_count": 99}})

    return _fake_get


def test_record_is_mapped_to_listing(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict[str, Any]] = []
    monkeypatch.setattr("requests.get", _paged_get({1: [_record("alpha")]}, calls))

    result = asyncio.run(_source().fetch_all_pages(10))

    assert len(result.listings) == 1
    listing = result.listings[0]
    assert listing.url == "https://alpha.devpost.com/"
    assert listing.title == "Hack alpha"
    assert listing.description == "Build something useful"
    assert listing.start_date == "Feb 9, 2025"
    assert listing.end_date == "Mar 15, 2025"
    assert listing.raw_start_date == "Feb 09, 2025"
    assert listing.raw_end_date == "Mar 15, 2025"
    assert listing.source == "devpost"
    assert listing.location == "Online"
    assert listing.prize == "$10,000"
    assert listing.tags == frozenset({"Machine Learning/AI"})
    assert listing.participant_count == 120
    assert listing.last_updated is None


def test_request_parameters_and_headers(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: dict[str, Any] = {}

    def _fake_get(url: str, *args, **kwargs) -> _DummyResponse:
        seen.update(kwargs)
        return _DummyResponse({"hackathons": []})

    monkeypatch.setattr("requests.get", _fake_get)

    asyncio.run(_source(page_size=9, timeout_seconds=5).fetch_all_pages(1))

    assert seen["params"] == {
        "page": 1,
        "per_page": 9,
        "status": "open",
        "order_by": "deadline",
        "sort_by": "deadline",
    }
    assert seen["headers"]["Accept"] == "application/json"
    assert seen["timeout"] == 5


def test_continuation_end_date_borrows_start_month(monkeypatch: pytest.MonkeyPatch) -> None:
    record = _record("beta", submission_period_dates="Feb 09 - 15, 2025")
    monkeypatch.setattr("requests.get", _paged_get({1: [record]}, []))

    listing = asyncio.run(_source().fetch_all_pages(1)).listings[0]

    assert listing.start_date.startswith("Feb 9, ")
    assert listing.end_date == "Feb 15, 2025"


def test_missing_fields_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    record = {"url": "https://gamma.devpost.com/", "description": "From description"}
    monkeypatch.setattr("requests.get", _paged_get({1: [record]}, []))

    listing = asyncio.run(_source().fetch_all_pages(1)).listings[0]

    assert listing.title == ""
    assert listing.description == "From description"
    assert listing.start_date == ""
    assert listing.end_date == ""
    assert listing.location == "Online"
    assert listing.prize == DEFAULT_PRIZE
    assert listing.tags == frozenset()
    assert listing.participant_count == 0


def test_records_without_resolvable_url_are_discarded(monkeypatch: pytest.MonkeyPatch) -> None:
    records = [
        _record("no-url", url=""),
        _record("null-url", url=None),
        _record("relative", url="/hackathons/relative-hack"),
        "not a record",
        _record("negative", registrations_count=-4, displayed_location=None, prize_amount=None),
    ]
    monkeypatch.setattr("requests.get", _paged_get({1: records}, []))

    listings = asyncio.run(_source().fetch_all_pages(1)).listings

    assert [item.url for item in listings] == [
        "https://devpost.com/hackathons/relative-hack",
        "https://negative.devpost.com/",
    ]
    assert listings[1].participant_count == 0
    assert listings[1].location == "Online"
    assert listings[1].prize == DEFAULT_PRIZE


def test_pagination_stops_on_empty_page_with_delay_between_pages(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    calls: list[dict[str, Any]] = []
    pages = {1: [_record("a1"), _record("a2")], 2: [_record("b1")], 3: []}
    monkeypatch.setattr("requests.get", _paged_get(pages, calls))

    delays: list[float] = []
    source = _source(courtesy_delay_seconds=0.5)
    source.sleep = _recording_sleep(delays)

    result = asyncio.run(source.fetch_all_pages(10))

    assert [params["page"] for params in calls] == [1, 2, 3]
    assert delays == [0.5, 0.5]
    assert result.pages_fetched == 2
    assert result.stop_reason == STOP_EMPTY_PAGE
    assert result.error is None
    assert len(result.listings) == 3


def test_no_delay_before_single_page(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("requests.get", _paged_get({1: []}, []))
    delays: list[float] = []
    source = _source(courtesy_delay_seconds=0.5)
    source.sleep = _recording_sleep(delays)

    result = asyncio.run(source.fetch_all_pages(10))

    assert delays == []
    assert result.listings == []
    assert result.stop_reason == STOP_EMPTY_PAGE


def test_page_error_keeps_partial_results(monkeypatch: pytest.MonkeyPatch) -> None:
    pages = {1: [_record("a1")], 2: requests.ConnectionError("connection reset")}
    calls: list[dict[str, Any]] = []
    monkeypatch.setattr("requests.get", _paged_get(pages, calls))
    source = _source()
    source.sleep = _recording_sleep([])

    result = asyncio.run(source.fetch_all_pages(10))

    assert len(calls) == 2
    assert [item.url for item in result.listings] == ["https://a1.devpost.com/"]
    assert result.stop_reason == STOP_ERROR
    assert result.error is not None
    assert "page 2" in result.error


@pytest.mark.parametrize(
    "response",
    [
        _DummyResponse({"error": "nope"}, status_code=503),
        _DummyResponse(ValueError("Expecting value: line 1 column 1")),
        _DummyResponse(["not", "an", "object"]),
        _DummyResponse({"unexpected": True}),
    ],
)
def test_bad_first_page_returns_empty_result(
    monkeypatch: pytest.MonkeyPatch,
    response: _DummyResponse,
) -> None:
    monkeypatch.setattr("requests.get", _paged_get({1: response}, []))

    result = asyncio.run(_source().fetch_all_pages(10))

    assert result.listings == []
    assert result.pages_fetched == 0
    assert result.stop_reason == STOP_ERROR


def test_pagination_stops_at_page_cap(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict[str, Any]] = []

    def _fake_get(url: str, *args, **kwargs) -> _DummyResponse:
        page = kwargs["params"]["page"]
        calls.append(kwargs["params"])
        return _DummyResponse({"hackathons": [_record(f"p{page}")]})

    monkeypatch.setattr("requests.get", _fake_get)
    delays: list[float] = []
    source = _source(courtesy_delay_seconds=0.5)
    source.sleep = _recording_sleep(delays)

    result = asyncio.run(source.fetch_all_pages(3))

    assert [params["page"] for params in calls] == [1, 2, 3]
    assert len(delays) == 2
    assert result.stop_reason == STOP_MAX_PAGES
    assert result.pages_fetched == 3
    assert len(result.listings) == 3


def test_skip_ended_drops_closed_hackathons(monkeypatch: pytest.MonkeyPatch) -> None:
    records = [
        _record("closed", submission_period_ends_at="2020-01-01T00:00:00-05:00"),
        _record("open", submission_period_ends_at="2999-01-01T00:00:00-05:00"),
        _record("unknown"),
    ]
    monkeypatch.setattr("requests.get", _paged_get({1: records}, []))

    kept = asyncio.run(_source(skip_ended=True).fetch_all_pages(1)).listings
    everything = asyncio.run(_source().fetch_all_pages(1)).listings

    assert [item.title for item in kept] == ["Hack open", "Hack unknown"]
    assert len(everything) == 3


def test_registry_builds_devpost_source() -> None:
    source = create_source(SourceSettings())

    assert isinstance(source, DevpostSource)
    assert source.url == API_URL
    assert source.site_url == "https://devpost.com/"


def test_registry_rejects_unknown_type() -> None:
    with pytest.raises(SourceRegistrationError):
        create_source(SourceSettings(id="mlh", type="mlh", url="https://mlh.io"))
