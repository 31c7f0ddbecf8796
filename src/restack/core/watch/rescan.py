"""Recompute a workspace's cached change set.

Both rescan kinds rebuild the whole snapshot from the current working-tree
status and replace the cache in one step; they differ only in what the
indexer is asked to refresh afterwards. Given the same on-disk state and
clock, a full and an incremental rescan write identical rows.
"""

import json
import logging
from concurrent.futures import ThreadPoolExecutor

from restack.core.change_cache.abc import ChangeCache
from restack.core.change_cache.types import CachedFileChange
from restack.core.indexer import FileIndexer
from restack.core.notifier import ChangeNotification, ChangeNotifier
from restack.core.time.abc import Time
from restack.core.vcs.abc import Vcs
from restack.core.vcs.parsing import StatusEntry, parse_status_line
from restack.core.vcs.types import ChangeStats
from restack.core.watch.prefetch import HunkPrefetchPolicy

logger = logging.getLogger(__name__)

DEFAULT_HUNK_WORKERS = 8


class RescanEngine:
    """Populates the change cache for one workspace at a time."""

    def __init__(
        self,
        *,
        vcs: Vcs,
        change_cache: ChangeCache,
        indexer: FileIndexer,
        notifier: ChangeNotifier,
        time: Time,
        policy: HunkPrefetchPolicy | None = None,
        hunk_workers: int = DEFAULT_HUNK_WORKERS,
    ) -> None:
        self._vcs = vcs
        self._cache = change_cache
        self._indexer = indexer
        self._notifier = notifier
        self._time = time
        self._policy = policy if policy is not None else HunkPrefetchPolicy()
        self._hunk_workers = hunk_workers

    def full_rescan(
        self,
        repo_path: str,
        workspace_id: int | None,
        workspace_path: str,
        reindex: bool = True,
    ) -> bool:
        """Rebuild the snapshot and, when reindex is set, reindex the workspace.

        Returns:
            False if the change list could not be read (cache left untouched)
        """
        if not self._sync_snapshot(repo_path, workspace_id, workspace_path):
            return False
        if reindex:
            try:
                self._indexer.index_workspace(repo_path, workspace_path)
            except Exception:
                logger.exception("Reindexing %s failed", workspace_path)
        self._notify(workspace_path, workspace_id)
        return True

    def incremental_rescan(
        self,
        repo_path: str,
        workspace_id: int | None,
        workspace_path: str,
        changed_paths: list[str],
    ) -> bool:
        """Rebuild the snapshot and reindex only changed_paths.

        Returns:
            False if the change list could not be read (cache left untouched)
        """
        if not self._sync_snapshot(repo_path, workspace_id, workspace_path):
            return False
        if changed_paths:
            try:
                self._indexer.index_changed_files(repo_path, workspace_path, changed_paths)
            except Exception:
                logger.exception("Indexing changed files in %s failed", workspace_path)
        self._notify(workspace_path, workspace_id)
        return True

    def _sync_snapshot(
        self, repo_path: str, workspace_id: int | None, workspace_path: str
    ) -> bool:
        try:
            lines = self._vcs.list_changed_files(workspace_path)
        except RuntimeError as e:
            logger.warning("Could not list changes in %s: %s", workspace_path, e)
            return False

        entries = _unique_entries(lines)
        stats = self._change_stats(workspace_path)
        eager = self._policy.should_prefetch(stats, len(entries))
        logger.debug(
            "%d change(s) in %s; %s hunk prefetch",
            len(entries),
            workspace_path,
            "eager" if eager else "lazy",
        )
        hunks = self._prefetch_hunks(workspace_path, entries) if eager else {}

        updated_at = self._time.now().isoformat()
        rows = [
            CachedFileChange(
                workspace_id=workspace_id,
                file_path=entry.path,
                staged_status=entry.staged_status,
                workspace_status=entry.workspace_status,
                is_untracked=entry.is_untracked,
                hunks_json=hunks.get(entry.path),
                updated_at=updated_at,
            )
            for entry in entries
        ]
        self._cache.replace_snapshot(repo_path, workspace_id, rows)
        return True

    def _change_stats(self, workspace_path: str) -> ChangeStats | None:
        try:
            return self._vcs.get_change_stats(workspace_path)
        except RuntimeError as e:
            logger.debug("Change stats unavailable for %s: %s", workspace_path, e)
            return None

    def _prefetch_hunks(
        self, workspace_path: str, entries: list[StatusEntry]
    ) -> dict[str, str | None]:
        if not entries:
            return {}

        workers = max(1, min(self._hunk_workers, len(entries)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                entry.path: executor.submit(self._vcs.get_file_hunks, workspace_path, entry.path)
                for entry in entries
            }

        results: dict[str, str | None] = {}
        for path, future in futures.items():
            try:
                hunks = future.result()
            except Exception as e:
                logger.warning("Could not load hunks for %s: %s", path, e)
                results[path] = None
                continue
            results[path] = json.dumps([hunk.to_dict() for hunk in hunks])
        return results

    def _notify(self, workspace_path: str, workspace_id: int | None) -> None:
        self._notifier.notify(
            ChangeNotification(workspace_path=workspace_path, workspace_id=workspace_id)
        )


def _unique_entries(lines: list[str]) -> list[StatusEntry]:
    entries: dict[str, StatusEntry] = {}
    for line in lines:
        entry = parse_status_line(line)
        if entry is not None and entry.path not in entries:
            entries[entry.path] = entry
    return list(entries.values())
