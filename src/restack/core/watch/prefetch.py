"""Eager versus lazy hunk prefetch decision."""

from dataclasses import dataclass

from restack.core.vcs.types import ChangeStats

DEFAULT_MAX_FILES = 10
DEFAULT_MAX_LINES = 50


@dataclass(frozen=True)
class HunkPrefetchPolicy:
    """Prefetch hunks inline only for small change sets.

    Small edits are the common case and get fully warm cache rows; large
    change sets leave hunks unset for on-demand fetching, bounding the work
    done per filesystem event.
    """

    max_files: int = DEFAULT_MAX_FILES
    max_lines: int = DEFAULT_MAX_LINES

    def should_prefetch(self, stats: ChangeStats | None, change_count: int) -> bool:
        """Decide from change stats, or from the change count when stats are unavailable."""
        if stats is None:
            return change_count <= self.max_files
        return stats.file_count <= self.max_files and stats.total_lines <= self.max_lines
