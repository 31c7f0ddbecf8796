"""Fake in-memory change cache for testing."""

import threading

from restack.core.change_cache.abc import ChangeCache
from restack.core.change_cache.types import CachedFileChange


class FakeChangeCache(ChangeCache):
    """In-memory fake keyed by (repo_path, workspace_id).

    Snapshots are swapped under a lock so concurrent readers see either the
    old or the new snapshot, never both. Every replace is recorded in
    ``replace_calls``.
    """

    def __init__(
        self, snapshots: dict[tuple[str, int | None], list[CachedFileChange]] | None = None
    ) -> None:
        self._lock = threading.Lock()
        self._snapshots: dict[tuple[str, int | None], list[CachedFileChange]] = dict(
            snapshots or {}
        )
        self._replace_calls: list[tuple[str, int | None, int]] = []

    @property
    def replace_calls(self) -> list[tuple[str, int | None, int]]:
        """Recorded (repo_path, workspace_id, row_count) replaces, for test assertions."""
        with self._lock:
            return list(self._replace_calls)

    def replace_snapshot(
        self, repo_path: str, workspace_id: int | None, changes: list[CachedFileChange]
    ) -> None:
        snapshot = list(changes)
        with self._lock:
            self._snapshots[(repo_path, workspace_id)] = snapshot
            self._replace_calls.append((repo_path, workspace_id, len(snapshot)))

    def get_snapshot(self, repo_path: str, workspace_id: int | None) -> list[CachedFileChange]:
        with self._lock:
            rows = list(self._snapshots.get((repo_path, workspace_id), []))
        return sorted(rows, key=lambda c: c.file_path)

    def clear_snapshot(self, repo_path: str, workspace_id: int | None) -> None:
        with self._lock:
            self._snapshots.pop((repo_path, workspace_id), None)
