"""Normalize the loosely structured date strings listing APIs hand out.

Upstream periods look like ``"Feb 09 - Mar 15, 2025"`` or ``"Feb 09 - 15, 2025"``:
the start often lacks a year and the end may lack a month. Everything here is
total: when a value cannot be understood the raw string is returned unchanged.
"""

from __future__ import annotations

import logging
import re
from datetime import date

logger = logging.getLogger(__name__)

_FULL_DATE = re.compile(r"([A-Za-z]+)\.?\s+(\d{1,2}),?\s+(\d{4})(?!\d)")
_MONTH_DAY = re.compile(r"([A-Za-z]+)\.?\s+(\d{1,2})(?!\d)")
_DAY_YEAR = re.compile(r"(?<!\d)(\d{1,2}),?\s+(\d{4})(?!\d)")
_PERIOD_SEPARATOR = re.compile(r"\s+[-–—]\s+")

# English regardless of the process locale
_MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

_MONTHS: dict[str, int] = {"sept": 9}
for _number, _name in enumerate(_MONTH_NAMES, start=1):
    _MONTHS[_name[:3].lower()] = _number
    _MONTHS[_name.lower()] = _number


def month_number(token: str) -> int | None:
    return _MONTHS.get(token.strip().rstrip(".").lower())


def render_date(value: date) -> str:
    return f"{_MONTH_NAMES[value.month - 1][:3]} {value.day}, {value.year}"


def normalize_date(
    raw: str | None,
    is_end_date: bool = False,
    *,
    month_hint: int | None = None,
    today: date | None = None,
) -> str:
    """Return the canonical ``Mon D, YYYY`` rendering of ``raw``.

    ``month_hint`` is the month of the other half of the same period and is
    only used for continuation fragments such as ``"15, 2025"``.
    """
    rendered, _ = _normalize(raw, is_end_date, month_hint, today or date.today())
    return rendered


def split_period(period: str | None) -> tuple[str, str]:
    if not isinstance(period, str):
        return "", ""
    parts = _PERIOD_SEPARATOR.split(period.strip(), maxsplit=1)
    start = parts[0].strip()
    end = parts[1].strip() if len(parts) > 1 else ""
    return start, end


def normalize_date_range(period: str | None, today: date | None = None) -> tuple[str, str]:
    """Split a ``"<start> - <end>"`` period and normalize both halves.

    The start's month is handed to the end so ``"Feb 09 - 15, 2025"`` resolves
    to ``("Feb 9, ...", "Feb 15, 2025")``.
    """
    reference = today or date.today()
    raw_start, raw_end = split_period(period)
    start, start_month = _normalize(raw_start, False, None, reference)
    end, _ = _normalize(raw_end, True, start_month, reference)
    return start, end


def _normalize(
    raw: str | None,
    is_end_date: bool,
    month_hint: int | None,
    today: date,
) -> tuple[str, int | None]:
    if not isinstance(raw, str):
        return "", month_hint
    value = raw.strip()
    if not value:
        return "", month_hint

    label = "end date" if is_end_date else "start date"

    match, month = _find_month(_FULL_DATE, value)
    if match:
        try:
            parsed = date(int(match.group(3)), month, int(match.group(2)))
        except ValueError:
            logger.warning("Invalid %s %r", label, value)
            return value, month_hint
        return render_date(parsed), month

    match, month = _find_month(_MONTH_DAY, value)
    if match:
        parsed = _infer_year(month, int(match.group(2)), today)
        if parsed is None:
            logger.warning("Invalid %s %r", label, value)
            return value, month_hint
        return render_date(parsed), month

    match = _DAY_YEAR.search(value)
    if match:
        if month_hint is None:
            logger.warning("No month available to complete %s %r", label, value)
            return value, month_hint
        try:
            parsed = date(int(match.group(2)), month_hint, int(match.group(1)))
        except ValueError:
            logger.warning("Invalid %s %r", label, value)
            return value, month_hint
        return render_date(parsed), month_hint

    logger.warning("Failed to parse %s %r", label, value)
    return value, month_hint


def _infer_year(month: int, day: int, today: date) -> date | None:
    year = today.year + 1 if month < today.month else today.year
    for candidate_year in (year, year + 1):
        try:
            candidate = date(candidate_year, month, day)
        except ValueError:
            # Feb 29 only exists in leap years
            continue
        if candidate >= today:
            return candidate
    return None


def _find_month(pattern: re.Pattern[str], value: str) -> tuple[re.Match[str] | None, int | None]:
    """First match of ``pattern`` whose leading word is a month name.

    Surrounding text such as ``"@ 11:45pm EST"`` or ``"(PST)"`` is ignored.
    """
    for match in pattern.finditer(value):
        month = month_number(match.group(1))
        if month is not None:
            return match, month
    return None, None
