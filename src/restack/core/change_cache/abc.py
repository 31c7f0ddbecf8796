"""Abstract interface for the per-repository change cache."""

from abc import ABC, abstractmethod

from restack.core.change_cache.types import CachedFileChange


class ChangeCache(ABC):
    """Abstract interface for change-set snapshots keyed by (workspace_id, file_path).

    A snapshot is the full set of rows for one workspace_id. Readers must never
    observe a mix of two snapshots, so replace_snapshot swaps the whole set at
    once.
    """

    @abstractmethod
    def replace_snapshot(
        self, repo_path: str, workspace_id: int | None, changes: list[CachedFileChange]
    ) -> None:
        """Atomically replace every cached row of a workspace with ``changes``."""
        ...

    @abstractmethod
    def get_snapshot(self, repo_path: str, workspace_id: int | None) -> list[CachedFileChange]:
        """Return the cached rows of a workspace ordered by file path."""
        ...

    @abstractmethod
    def clear_snapshot(self, repo_path: str, workspace_id: int | None) -> None:
        """Drop every cached row of a workspace."""
        ...
