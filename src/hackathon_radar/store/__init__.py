"""Snapshot storage."""

from .base import Snapshot
from .snapshot_store import SnapshotStore

__all__ = ["Snapshot", "SnapshotStore"]
