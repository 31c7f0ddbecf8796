"""Tests for the watch and rescan commands."""

from pathlib import Path

from click.testing import CliRunner
from tests.fakes.file_watcher import FakeFileWatcher
from tests.fakes.indexer import FakeFileIndexer
from tests.fakes.notifier import FakeChangeNotifier

from restack.cli.cli import cli
from restack.core.change_cache import FakeChangeCache
from restack.core.context import RestackContext
from restack.core.errors import ProcessError
from restack.core.time.fake import FakeTime
from restack.core.vcs import ChangeStats, FakeVcs
from restack.core.workspace_store import FakeWorkspaceStore, Workspace

REPO = "/repo"
WS_PATH = "/repo/.workspaces/feat-a"


def _store() -> FakeWorkspaceStore:
    return FakeWorkspaceStore(
        [
            Workspace(
                id=1,
                repo_path=REPO,
                workspace_name="feat-a",
                workspace_path=WS_PATH,
                branch_name="feat-a",
                target_branch="main",
            )
        ]
    )


def _vcs() -> FakeVcs:
    return FakeVcs(
        changed_files={REPO: [" M README.md"], WS_PATH: [" M a.py", "?? b.py"]},
        change_stats={
            REPO: ChangeStats(file_count=1, lines_added=1, lines_deleted=0),
            WS_PATH: ChangeStats(file_count=2, lines_added=3, lines_deleted=0),
        },
    )


def test_rescan_workspace_reports_cached_count() -> None:
    cache = FakeChangeCache()
    indexer = FakeFileIndexer()
    ctx = RestackContext.for_test(
        vcs=_vcs(), workspace_store=_store(), change_cache=cache, indexer=indexer, cwd=Path(REPO)
    )

    result = CliRunner().invoke(cli, ["rescan", "--workspace-id", "1"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Cached 2 changed file(s)." in result.output
    assert indexer.workspace_calls == [(REPO, WS_PATH)]


def test_rescan_failure_leaves_cache() -> None:
    vcs = FakeVcs(changed_files_raises={REPO: ProcessError("Failed to read working tree status")})
    ctx = RestackContext.for_test(vcs=vcs, cwd=Path(REPO))

    result = CliRunner().invoke(cli, ["rescan"], obj=ctx)

    assert result.exit_code == 1
    assert "cache left unchanged" in result.output


def test_rescan_unknown_workspace() -> None:
    ctx = RestackContext.for_test(cwd=Path(REPO))

    result = CliRunner().invoke(cli, ["rescan", "--workspace-id", "8"], obj=ctx)

    assert result.exit_code == 1
    assert "Workspace 8 not found" in result.output


def test_watch_rescans_watches_and_stops_on_interrupt() -> None:
    file_watcher = FakeFileWatcher()
    notifier = FakeChangeNotifier()
    cache = FakeChangeCache()
    time = FakeTime(sleep_raises=KeyboardInterrupt())
    ctx = RestackContext.for_test(
        vcs=_vcs(),
        workspace_store=_store(),
        change_cache=cache,
        file_watcher=file_watcher,
        notifier=notifier,
        time=time,
        cwd=Path(REPO),
    )

    result = CliRunner().invoke(cli, ["watch"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Watching 2 path(s) under /repo" in result.output
    assert f"Updated {WS_PATH}" in result.output
    assert "Stopped watching." in result.output
    assert [n.workspace_path for n in notifier.notifications] == [REPO, WS_PATH]
    assert [c.file_path for c in cache.get_snapshot(REPO, 1)] == ["a.py", "b.py"]

    assert len(file_watcher.watch_calls) == 1
    call = file_watcher.watch_calls[0]
    assert call.roots == (REPO, WS_PATH)
    assert call.debounce_seconds == 2.0
    assert call.session.stopped
    assert time.sleep_calls == [1.0]
