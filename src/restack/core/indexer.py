"""File indexer collaborator.

The rescan engine tells the indexer what to refresh after each cache sync:
a whole workspace after a full rescan, or just the touched files after an
incremental one. Indexing itself lives outside restack.
"""

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class FileIndexer(ABC):
    """Abstract interface for the external file indexer."""

    @abstractmethod
    def index_workspace(self, repo_path: str, workspace_path: str) -> None:
        """Reindex every file of a workspace."""
        ...

    @abstractmethod
    def index_changed_files(self, repo_path: str, workspace_path: str, paths: list[str]) -> None:
        """Reindex the given workspace-relative paths."""
        ...


class NoopFileIndexer(FileIndexer):
    """Indexer used when no external index is configured."""

    def index_workspace(self, repo_path: str, workspace_path: str) -> None:
        logger.debug("No indexer configured; skipping full index of %s", workspace_path)

    def index_changed_files(self, repo_path: str, workspace_path: str, paths: list[str]) -> None:
        logger.debug("No indexer configured; skipping %d changed file(s)", len(paths))
