"""Change cache: per-workspace snapshots of changed files and their hunks."""

from restack.core.change_cache.abc import ChangeCache
from restack.core.change_cache.fake import FakeChangeCache
from restack.core.change_cache.sqlite import SqliteChangeCache
from restack.core.change_cache.types import UNTRACKED_MARKER, CachedFileChange

__all__ = [
    "UNTRACKED_MARKER",
    "CachedFileChange",
    "ChangeCache",
    "FakeChangeCache",
    "SqliteChangeCache",
]
