"""Tests for event batch classification."""

from pathlib import PurePath

from restack.core.watch.classify import (
    WatchedPath,
    classify_batch,
    find_owner,
    should_process,
)

REPO = WatchedPath(path="/repo", workspace_id=None)
WS1 = WatchedPath(path="/repo/.workspaces/ws1", workspace_id=1)
WS10 = WatchedPath(path="/repo/.workspaces/ws10", workspace_id=10)
WATCHED = [REPO, WS1, WS10]


def _never_ignored(path: str) -> bool:
    return False


def test_find_owner_prefers_longest_match() -> None:
    assert find_owner("/repo/.workspaces/ws1/src/a.py", WATCHED) == WS1
    assert find_owner("/repo/src/a.py", WATCHED) == REPO


def test_find_owner_matches_whole_components() -> None:
    assert find_owner("/repo/.workspaces/ws10/a.py", WATCHED) == WS10
    assert find_owner("/elsewhere/a.py", WATCHED) is None


def test_should_process_filters_metadata_and_build_dirs() -> None:
    assert should_process(PurePath("src/app.py"))
    assert not should_process(PurePath(".git/index"))
    assert not should_process(PurePath(".jj/repo/op_heads/heads/abc"))
    assert not should_process(PurePath("web/node_modules/react/index.js"))
    assert not should_process(PurePath("target/debug/app"))
    assert not should_process(PurePath(".restack/local.db-wal"))
    assert should_process(PurePath(".git/HEAD"))


def test_file_named_like_excluded_dir_is_processed() -> None:
    assert should_process(PurePath("docs/target"))


def test_metadata_write_produces_no_work() -> None:
    plan = classify_batch(
        ["/repo/.git/index", "/repo/.git/refs/heads/main", "/repo/.jj/working_copy/checkout"],
        WATCHED,
        _never_ignored,
    )

    assert plan.is_empty


def test_head_marker_triggers_full_rescan_of_owner() -> None:
    plan = classify_batch(["/repo/.workspaces/ws1/.git/HEAD"], WATCHED, _never_ignored)

    assert plan.full == (WS1,)
    assert plan.incremental == {}


def test_full_rescan_supersedes_incremental_for_same_owner() -> None:
    plan = classify_batch(
        ["/repo/.git/HEAD", "/repo/src/a.py", "/repo/.workspaces/ws1/b.py"],
        WATCHED,
        _never_ignored,
    )

    assert plan.full == (REPO,)
    assert plan.incremental == {WS1: ("b.py",)}


def test_paths_grouped_per_owner_relative_to_root() -> None:
    plan = classify_batch(
        [
            "/repo/.workspaces/ws1/src/a.py",
            "/repo/.workspaces/ws1/src/b.py",
            "/repo/README.md",
            "/repo/README.md",
        ],
        WATCHED,
        _never_ignored,
    )

    assert plan.full == ()
    assert plan.incremental == {
        REPO: ("README.md",),
        WS1: ("src/a.py", "src/b.py"),
    }


def test_ignored_paths_are_dropped() -> None:
    ignored = {"/repo/build.log"}

    plan = classify_batch(
        ["/repo/build.log", "/repo/src/a.py"], WATCHED, lambda path: path in ignored
    )

    assert plan.incremental == {REPO: ("src/a.py",)}


def test_own_database_writes_are_dropped() -> None:
    plan = classify_batch(
        ["/repo/.restack/local.db", "/repo/.restack/local.db-journal"],
        WATCHED,
        _never_ignored,
    )

    assert plan.is_empty
