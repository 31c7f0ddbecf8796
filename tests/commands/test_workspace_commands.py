"""Tests for workspace, info, and config commands."""

from dataclasses import replace
from pathlib import Path

from click.testing import CliRunner

from restack.cli.cli import cli
from restack.core.context import RestackContext
from restack.core.global_config import GlobalConfig, InMemoryConfigStore
from restack.core.vcs import ChangeStats, FakeVcs
from restack.core.workspace_store import FakeWorkspaceStore, Workspace

REPO = "/repo"


def test_workspace_list_empty() -> None:
    ctx = RestackContext.for_test(cwd=Path(REPO))

    result = CliRunner().invoke(cli, ["workspace", "list"], obj=ctx)

    assert result.exit_code == 0
    assert "No workspaces registered." in result.output


def test_workspace_add_then_list() -> None:
    store = FakeWorkspaceStore()
    ctx = RestackContext.for_test(workspace_store=store, cwd=Path(REPO))
    runner = CliRunner()

    added = runner.invoke(
        cli,
        ["workspace", "add", "parser", "/repo/.workspaces/parser", "--branch", "parser",
         "--target", "main"],
        obj=ctx,
    )
    listed = runner.invoke(cli, ["workspace", "list"], obj=ctx)

    assert added.exit_code == 0, added.output
    assert "Registered workspace parser (#1)" in added.output
    assert listed.exit_code == 0
    assert "parser" in listed.output
    assert "main" in listed.output


def test_workspace_add_rejects_self_target() -> None:
    store = FakeWorkspaceStore()
    ctx = RestackContext.for_test(workspace_store=store, cwd=Path(REPO))

    result = CliRunner().invoke(
        cli, ["workspace", "add", "main", "/repo/main", "--branch", "main", "--target", "main"],
        obj=ctx,
    )

    assert result.exit_code == 1
    assert store.workspaces == []


def test_workspace_remove() -> None:
    store = FakeWorkspaceStore(
        [Workspace(id=4, repo_path=REPO, workspace_name="a", workspace_path="/a", branch_name="a")]
    )
    ctx = RestackContext.for_test(workspace_store=store, cwd=Path(REPO))
    runner = CliRunner()

    removed = runner.invoke(cli, ["workspace", "remove", "4"], obj=ctx)
    missing = runner.invoke(cli, ["workspace", "remove", "4"], obj=ctx)

    assert removed.exit_code == 0
    assert "Removed workspace #4" in removed.output
    assert missing.exit_code == 1
    assert "Workspace 4 not found" in missing.output


def test_info_shows_live_state() -> None:
    ws_path = "/repo/.workspaces/feat-a"
    store = FakeWorkspaceStore(
        [
            Workspace(
                id=1,
                repo_path=REPO,
                workspace_name="feat-a",
                workspace_path=ws_path,
                branch_name="feat-a",
                target_branch="main",
                last_rebased_commit="0123456789ab",
            )
        ]
    )
    vcs = FakeVcs(
        commit_ids={"main": "0123456789ab"},
        changed_files={ws_path: [" M a.py", "?? b.py"]},
        conflicted_files={ws_path: ["a.py"]},
        change_stats={ws_path: ChangeStats(file_count=2, lines_added=5, lines_deleted=1)},
    )
    ctx = RestackContext.for_test(vcs=vcs, workspace_store=store, cwd=Path(REPO))

    result = CliRunner().invoke(cli, ["info", "1"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "feat-a (#1)" in result.output
    assert "+5 -1" in result.output
    assert "up to date" in result.output
    assert "a.py" in result.output


def test_info_unknown_workspace() -> None:
    ctx = RestackContext.for_test(cwd=Path(REPO))

    result = CliRunner().invoke(cli, ["info", "3"], obj=ctx)

    assert result.exit_code == 1
    assert "Workspace 3 not found" in result.output


def test_config_list_prints_every_key() -> None:
    config = replace(GlobalConfig(), default_branch="trunk")
    ctx = RestackContext.for_test(config=config)

    result = CliRunner().invoke(cli, ["config", "list"], obj=ctx)

    assert result.exit_code == 0
    assert "default_branch = trunk" in result.output
    assert "eager_hunk_max_files = 10" in result.output


def test_config_set_saves_parsed_value() -> None:
    config_store = InMemoryConfigStore()
    ctx = RestackContext.for_test(config_store=config_store)

    result = CliRunner().invoke(cli, ["config", "set", "hunk_workers", "3"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert config_store.load().hunk_workers == 3
    assert "Set hunk_workers = 3" in result.output


def test_config_set_rejects_unknown_key() -> None:
    ctx = RestackContext.for_test()

    result = CliRunner().invoke(cli, ["config", "set", "colour", "blue"], obj=ctx)

    assert result.exit_code == 1
    assert "Unknown config key 'colour'" in result.output
