from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

DEFAULT_TAG_FIELDS = ("themes", "technologies", "platforms")


def collect_tags(record: Any, fields: Iterable[str] = DEFAULT_TAG_FIELDS) -> set[str]:
    """Flatten the ``{"name": ...}`` items of several list fields into one set.

    Missing fields, non-list values and items without a usable name are
    ignored, so a malformed record yields an empty set rather than an error.
    """
    if not isinstance(record, Mapping):
        return set()

    tags: set[str] = set()
    for field_name in fields:
        tags.update(_extract_names(record.get(field_name)))
    return tags


def _extract_names(items: Any) -> list[str]:
    if not isinstance(items, list):
        return []

    names: list[str] = []
    for item in items:
        if not isinstance(item, Mapping):
            continue
        name = item.get("name")
        if not isinstance(name, str):
            continue
        value = name.strip()
        if value:
            names.append(value)
    return names
