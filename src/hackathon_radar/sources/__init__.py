"""Listing sources and registry."""

from .base import FetchResult, PageFetchError, Source
from .devpost_source import DevpostSource
from .registry import create_source, register_source, registered_source_types

__all__ = [
    "DevpostSource",
    "FetchResult",
    "PageFetchError",
    "Source",
    "create_source",
    "register_source",
    "registered_source_types",
]
