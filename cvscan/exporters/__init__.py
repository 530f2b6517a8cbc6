"""Snapshot exporters."""

from .snapshot import SnapshotWriter

__all__ = ["SnapshotWriter"]
