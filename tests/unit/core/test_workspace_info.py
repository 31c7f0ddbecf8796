"""Tests for collect_workspace_info."""

import pytest

from restack.core.errors import WorkspaceNotFoundError
from restack.core.vcs import ChangeStats, FakeVcs
from restack.core.workspace_info import collect_workspace_info
from restack.core.workspace_store import FakeWorkspaceStore, Workspace

REPO = "/repo"
WS_PATH = "/repo/.workspaces/feat-a"


def _store(target: str | None = "origin/main", last: str = "0123456789ab") -> FakeWorkspaceStore:
    return FakeWorkspaceStore(
        [
            Workspace(
                id=1,
                repo_path=REPO,
                workspace_name="feat-a",
                workspace_path=WS_PATH,
                branch_name="feat-a",
                target_branch=target,
                last_rebased_commit=last,
            )
        ]
    )


def test_collects_every_field() -> None:
    vcs = FakeVcs(
        commit_ids={"main@origin": "0123456789ab"},
        changed_files={WS_PATH: [" M a.py"]},
        conflicted_files={WS_PATH: ["b.py"]},
        change_stats={WS_PATH: ChangeStats(file_count=1, lines_added=2, lines_deleted=0)},
        remotes=["origin"],
    )

    info = collect_workspace_info(vcs, _store(), REPO, 1)

    assert info.changed_files == [" M a.py"]
    assert info.conflicted_files == ["b.py"]
    assert info.change_stats == ChangeStats(file_count=1, lines_added=2, lines_deleted=0)
    assert info.target_commit == "0123456789ab"
    assert info.is_synced
    assert vcs.conflicted_files_calls == [(WS_PATH, "main@origin")]


def test_failed_field_does_not_void_others() -> None:
    vcs = FakeVcs(changed_files={WS_PATH: ["?? new.py"]}, remotes=["origin"])

    info = collect_workspace_info(vcs, _store(), REPO, 1)

    assert info.changed_files == ["?? new.py"]
    assert info.change_stats is None
    assert info.target_commit is None
    assert not info.is_synced


def test_untracked_workspace_skips_target_lookup() -> None:
    vcs = FakeVcs()

    info = collect_workspace_info(vcs, _store(target=None), REPO, 1)

    assert info.target_commit is None
    assert vcs.resolve_calls == []
    assert vcs.conflicted_files_calls == [(WS_PATH, None)]


def test_unknown_workspace_raises() -> None:
    with pytest.raises(WorkspaceNotFoundError):
        collect_workspace_info(FakeVcs(), FakeWorkspaceStore(), REPO, 5)
