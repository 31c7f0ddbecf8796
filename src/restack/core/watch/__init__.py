"""Filesystem watching and change-cache rescans."""

from restack.core.watch.classify import RescanPlan, WatchedPath, classify_batch
from restack.core.watch.coordinator import WatchCoordinator, watched_paths_for_repo
from restack.core.watch.prefetch import HunkPrefetchPolicy
from restack.core.watch.rescan import RescanEngine
from restack.core.watch.watcher import FileWatcher, WatchdogFileWatcher, WatchSession

__all__ = [
    "FileWatcher",
    "HunkPrefetchPolicy",
    "RescanEngine",
    "RescanPlan",
    "WatchCoordinator",
    "WatchSession",
    "WatchdogFileWatcher",
    "WatchedPath",
    "classify_batch",
    "watched_paths_for_repo",
]
