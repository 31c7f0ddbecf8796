"""One debounced watch session per repository.

The coordinator owns the repository -> session map. Event batches are routed
under a shared lock; start and stop take it exclusively. Rescans themselves
run outside the lock so a slow rescan never blocks start/stop.
"""

import logging
from dataclasses import dataclass

from restack.core.errors import WorkspaceNotFoundError
from restack.core.vcs.abc import Vcs
from restack.core.watch.classify import WatchedPath, classify_batch
from restack.core.watch.rescan import RescanEngine
from restack.core.watch.rwlock import ReadWriteLock
from restack.core.watch.watcher import FileWatcher, WatchSession
from restack.core.workspace_store.abc import WorkspaceStore

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 2.0


@dataclass(frozen=True)
class _RepoWatch:
    watched: tuple[WatchedPath, ...]
    session: WatchSession


class WatchCoordinator:
    """Keeps change caches in sync with filesystem activity."""

    def __init__(
        self,
        *,
        file_watcher: FileWatcher,
        rescan_engine: RescanEngine,
        workspace_store: WorkspaceStore,
        vcs: Vcs,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
    ) -> None:
        self._file_watcher = file_watcher
        self._rescan = rescan_engine
        self._store = workspace_store
        self._vcs = vcs
        self._debounce_seconds = debounce_seconds
        self._lock = ReadWriteLock()
        self._watches: dict[str, _RepoWatch] = {}

    def start_watching(self, repo_path: str, watched_paths: list[WatchedPath]) -> bool:
        """Open a watch session for repo_path unless one is already running.

        Returns:
            True if a new session was started
        """
        with self._lock.write_locked():
            if repo_path in self._watches:
                logger.debug("Already watching %s", repo_path)
                return False
            session = self._file_watcher.watch(
                [w.path for w in watched_paths],
                self._debounce_seconds,
                lambda batch: self._handle_batch(repo_path, batch),
            )
            self._watches[repo_path] = _RepoWatch(watched=tuple(watched_paths), session=session)
        logger.debug("Started watching %s (%d root(s))", repo_path, len(watched_paths))
        return True

    def stop_watching(self, repo_path: str) -> bool:
        """Stop the session for repo_path if there is one.

        Returns:
            True if a session was stopped
        """
        with self._lock.write_locked():
            repo_watch = self._watches.pop(repo_path, None)
        if repo_watch is None:
            return False
        repo_watch.session.stop()
        logger.debug("Stopped watching %s", repo_path)
        return True

    def stop_all(self) -> None:
        with self._lock.write_locked():
            watches = list(self._watches.values())
            self._watches.clear()
        for repo_watch in watches:
            repo_watch.session.stop()

    def is_watching(self, repo_path: str) -> bool:
        with self._lock.read_locked():
            return repo_path in self._watches

    def trigger_rescan(self, repo_path: str, workspace_id: int | None) -> bool:
        """Run a full rescan with reindex immediately, bypassing the debounce.

        Returns:
            False if the change list could not be read

        Raises:
            WorkspaceNotFoundError: If workspace_id is not registered
        """
        if workspace_id is None:
            return self._rescan.full_rescan(repo_path, None, repo_path, reindex=True)

        workspace = self._store.get_workspace(repo_path, workspace_id)
        if workspace is None:
            raise WorkspaceNotFoundError(repo_path, workspace_id)
        return self._rescan.full_rescan(
            repo_path, workspace_id, workspace.workspace_path, reindex=True
        )

    def _handle_batch(self, repo_path: str, paths: list[str]) -> None:
        with self._lock.read_locked():
            repo_watch = self._watches.get(repo_path)
        if repo_watch is None:
            logger.debug("Dropping %d event(s) for unwatched %s", len(paths), repo_path)
            return

        plan = classify_batch(paths, repo_watch.watched, self._vcs.is_path_ignored)
        if plan.is_empty:
            return

        for owner in plan.full:
            try:
                self._rescan.full_rescan(repo_path, owner.workspace_id, owner.path, reindex=True)
            except Exception:
                logger.exception("Full rescan of %s failed", owner.path)

        for owner, rel_paths in plan.incremental.items():
            try:
                self._rescan.incremental_rescan(
                    repo_path, owner.workspace_id, owner.path, list(rel_paths)
                )
            except Exception:
                logger.exception("Incremental rescan of %s failed", owner.path)


def watched_paths_for_repo(store: WorkspaceStore, repo_path: str) -> list[WatchedPath]:
    """The repository root plus every registered workspace."""
    watched = [WatchedPath(path=repo_path, workspace_id=None)]
    watched.extend(
        WatchedPath(path=w.workspace_path, workspace_id=w.id)
        for w in store.list_workspaces(repo_path)
    )
    return watched
