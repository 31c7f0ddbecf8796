"""Tests for WatchCoordinator session management and event routing."""

import pytest
from tests.fakes.file_watcher import FakeFileWatcher
from tests.fakes.indexer import FakeFileIndexer
from tests.fakes.notifier import FakeChangeNotifier

from restack.core.change_cache import FakeChangeCache
from restack.core.errors import WorkspaceNotFoundError
from restack.core.time.fake import FakeTime
from restack.core.vcs import ChangeStats, FakeVcs
from restack.core.watch import RescanEngine, WatchCoordinator, WatchedPath, watched_paths_for_repo
from restack.core.workspace_store import FakeWorkspaceStore, Workspace

REPO = "/repo"
WS_PATH = "/repo/.workspaces/feat-a"
WORKSPACE = Workspace(
    id=1,
    repo_path=REPO,
    workspace_name="feat-a",
    workspace_path=WS_PATH,
    branch_name="feat-a",
    target_branch="main",
)


class _Harness:
    def __init__(self, vcs: FakeVcs | None = None) -> None:
        self.vcs = vcs if vcs is not None else FakeVcs(
            changed_files={REPO: [" M README.md"], WS_PATH: [" M src/a.py"]},
            change_stats={
                REPO: ChangeStats(file_count=1, lines_added=1, lines_deleted=0),
                WS_PATH: ChangeStats(file_count=1, lines_added=1, lines_deleted=0),
            },
        )
        self.store = FakeWorkspaceStore([WORKSPACE])
        self.cache = FakeChangeCache()
        self.indexer = FakeFileIndexer()
        self.notifier = FakeChangeNotifier()
        self.file_watcher = FakeFileWatcher()
        self.coordinator = WatchCoordinator(
            file_watcher=self.file_watcher,
            rescan_engine=RescanEngine(
                vcs=self.vcs,
                change_cache=self.cache,
                indexer=self.indexer,
                notifier=self.notifier,
                time=FakeTime(),
            ),
            workspace_store=self.store,
            vcs=self.vcs,
            debounce_seconds=0.5,
        )

    def start(self) -> None:
        self.coordinator.start_watching(REPO, watched_paths_for_repo(self.store, REPO))


def test_watched_paths_cover_repo_root_and_workspaces() -> None:
    store = FakeWorkspaceStore([WORKSPACE])

    assert watched_paths_for_repo(store, REPO) == [
        WatchedPath(path=REPO, workspace_id=None),
        WatchedPath(path=WS_PATH, workspace_id=1),
    ]


def test_start_watching_is_idempotent_per_repo() -> None:
    harness = _Harness()

    harness.start()
    harness.start()

    assert len(harness.file_watcher.watch_calls) == 1
    call = harness.file_watcher.watch_calls[0]
    assert call.roots == (REPO, WS_PATH)
    assert call.debounce_seconds == 0.5
    assert harness.coordinator.is_watching(REPO)


def test_stop_watching_disposes_session_once() -> None:
    harness = _Harness()
    harness.start()
    session = harness.file_watcher.watch_calls[0].session

    assert harness.coordinator.stop_watching(REPO)
    assert not harness.coordinator.stop_watching(REPO)

    assert session.stop_count == 1
    assert not harness.coordinator.is_watching(REPO)


def test_stop_all_stops_every_session() -> None:
    harness = _Harness()
    harness.start()
    harness.coordinator.start_watching("/other", [WatchedPath(path="/other", workspace_id=None)])

    harness.coordinator.stop_all()

    assert all(call.session.stopped for call in harness.file_watcher.watch_calls)
    assert not harness.coordinator.is_watching(REPO)


def test_head_change_triggers_full_rescan_with_reindex() -> None:
    harness = _Harness()
    harness.start()

    harness.file_watcher.deliver([f"{WS_PATH}/.git/HEAD"])

    assert harness.indexer.workspace_calls == [(REPO, WS_PATH)]
    assert harness.indexer.changed_file_calls == []
    assert [row.file_path for row in harness.cache.get_snapshot(REPO, 1)] == ["src/a.py"]


def test_metadata_write_triggers_no_rescan() -> None:
    harness = _Harness()
    harness.start()

    harness.file_watcher.deliver([f"{REPO}/.git/index", f"{WS_PATH}/.jj/working_copy/tree"])

    assert harness.cache.replace_calls == []
    assert harness.notifier.notifications == []


def test_source_edit_triggers_incremental_rescan_of_owner() -> None:
    harness = _Harness()
    harness.start()

    harness.file_watcher.deliver([f"{WS_PATH}/src/a.py"])

    assert harness.indexer.changed_file_calls == [(REPO, WS_PATH, ["src/a.py"])]
    assert harness.indexer.workspace_calls == []
    assert harness.cache.replace_calls == [(REPO, 1, 1)]


def test_batch_after_stop_is_dropped() -> None:
    harness = _Harness()
    harness.start()
    harness.coordinator.stop_watching(REPO)

    harness.file_watcher.deliver([f"{WS_PATH}/src/a.py"])

    assert harness.cache.replace_calls == []


def test_trigger_rescan_for_workspace() -> None:
    harness = _Harness()

    assert harness.coordinator.trigger_rescan(REPO, 1)

    assert harness.indexer.workspace_calls == [(REPO, WS_PATH)]
    assert harness.cache.replace_calls == [(REPO, 1, 1)]


def test_trigger_rescan_for_repo_root() -> None:
    harness = _Harness()

    assert harness.coordinator.trigger_rescan(REPO, None)

    assert harness.cache.replace_calls == [(REPO, None, 1)]


def test_trigger_rescan_unknown_workspace_raises() -> None:
    harness = _Harness()

    with pytest.raises(WorkspaceNotFoundError):
        harness.coordinator.trigger_rescan(REPO, 99)
