"""Storage module for the latest supply snapshot."""

from .snapshot_store import SnapshotStore

__all__ = ["SnapshotStore"]
