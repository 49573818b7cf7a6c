"""Hackathon discovery and freshness cache."""

from .cache import HackathonCache, build_cache
from .models import HackathonListing

__all__ = ["HackathonCache", "HackathonListing", "build_cache"]
__version__ = "0.1.0"
