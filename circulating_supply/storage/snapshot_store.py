"""In-memory holder of the latest published supply snapshot."""

import threading

from ..core.models import Snapshot


class SnapshotStore:
    """
    Single-slot store shared by the refresh loop and request handlers.

    The refresh loop is the only writer. Snapshots are frozen, so replacing
    the reference under the lock is enough to keep both figures paired.
    """

    def __init__(self, initial: Snapshot | None = None):
        self._lock = threading.Lock()
        self._snapshot = initial or Snapshot()

    def current(self) -> Snapshot:
        """Return the snapshot currently published."""
        with self._lock:
            return self._snapshot

    def publish(self, snapshot: Snapshot) -> None:
        """Replace the published snapshot."""
        if not isinstance(snapshot, Snapshot):
            raise TypeError(f"Expected Snapshot, got {type(snapshot).__name__}")
        with self._lock:
            self._snapshot = snapshot
