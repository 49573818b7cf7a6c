from __future__ import annotations

import html as html_lib
import re

_HTML_TAGS = re.compile(r"<[^>]*>")
_MULTISPACE = re.compile(r"\s+")


def normalize_whitespace(value: str) -> str:
    return _MULTISPACE.sub(" ", value).strip()


def strip_markup(value: str) -> str:
    """Drop inline markup such as ``$<span data-currency-value>10,000</span>``."""
    without_tags = _HTML_TAGS.sub("", value)
    return normalize_whitespace(html_lib.unescape(without_tags))


def as_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return normalize_whitespace(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""
