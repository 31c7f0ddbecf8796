"""Tests for RealVcs command construction and output handling.

Subprocess calls are patched; no jj or git binary is needed.
"""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from restack.core.errors import ProcessError, ResolutionError
from restack.core.vcs import RealVcs

RUN = "restack.core.vcs.real.run_subprocess_with_context"


def _completed(
    cmd: list[str], stdout: str = "", stderr: str = "", returncode: int = 0
) -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr=stderr)


def test_resolve_commit_id_returns_short_id() -> None:
    with patch(RUN) as mock_run:
        mock_run.return_value = _completed([], stdout="0123456789ab\n")

        commit_id = RealVcs().resolve_commit_id("/repo", "main@origin")

        assert commit_id == "0123456789ab"
        cmd = mock_run.call_args.args[0]
        assert cmd == ["jj", "log", "-r", "main@origin", "--no-graph", "-T", "commit_id.short(12)"]
        assert mock_run.call_args.kwargs["cwd"] == Path("/repo")


def test_resolve_commit_id_failure_raises_resolution_error() -> None:
    with patch(RUN) as mock_run:
        mock_run.return_value = _completed(
            [], stderr="Error: Revision `nope` doesn't exist\n", returncode=1
        )

        with pytest.raises(ResolutionError) as exc_info:
            RealVcs().resolve_commit_id("/repo", "nope")

        assert exc_info.value.ref == "nope"
        assert "doesn't exist" in str(exc_info.value)


def test_resolve_commit_id_empty_output_raises() -> None:
    with patch(RUN) as mock_run:
        mock_run.return_value = _completed([], stdout="")

        with pytest.raises(ResolutionError):
            RealVcs().resolve_commit_id("/repo", "main")


def test_resolve_conflicted_bookmark_lists_candidates() -> None:
    with patch(RUN) as mock_run:
        mock_run.side_effect = [
            _completed([], stderr='Error: Name "main" is conflicted\n', returncode=1),
            _completed([], stdout="0123456789ab\nfedcba987654\n"),
        ]

        with pytest.raises(ResolutionError) as exc_info:
            RealVcs().resolve_commit_id("/repo", "main")

        message = str(exc_info.value)
        assert "0123456789ab, fedcba987654" in message
        assert "jj bookmark set main -r <REVISION>" in message
        assert mock_run.call_args_list[1].args[0][3] == "bookmarks(exact:main)"


def test_rebase_reports_conflicts_from_output() -> None:
    with patch(RUN) as mock_run:
        mock_run.return_value = _completed(
            [], stdout="Rebased 2 commits\n", stderr="New conflicts appeared in 1 commits\n"
        )

        result = RealVcs(jj_binary="/opt/jj").rebase("/ws", "roots(main..@)", "main")

        assert result.success
        assert result.has_conflicts
        assert mock_run.call_args.args[0] == [
            "/opt/jj",
            "rebase",
            "-s",
            "roots(main..@)",
            "-d",
            "main",
        ]
        assert mock_run.call_args.kwargs["check"] is False


def test_rebase_nonzero_exit_is_failure() -> None:
    with patch(RUN) as mock_run:
        mock_run.return_value = _completed([], stderr="Error: bad revset", returncode=1)

        result = RealVcs().rebase("/ws", "roots(main..@)", "main")

        assert not result.success
        assert result.message == "Error: bad revset"


def test_conflicted_files_fall_back_to_status_when_diff_fails() -> None:
    status = (
        "Working copy  (@) : abc feat | (conflict) wip\n"
        "There are unresolved conflicts at these paths:\n"
        "src/app.py 2-sided conflict\n"
    )
    with patch(RUN) as mock_run:
        mock_run.side_effect = [ProcessError("Failed to diff"), _completed([], stdout=status)]

        assert RealVcs().list_conflicted_files("/ws", "main") == ["src/app.py"]


def test_conflicted_files_use_summary_when_target_given() -> None:
    with patch(RUN) as mock_run:
        mock_run.return_value = _completed([], stdout="M a.py\nC b.py\n")

        assert RealVcs().list_conflicted_files("/ws", "main") == ["b.py"]
        assert mock_run.call_args.args[0] == [
            "jj",
            "diff",
            "--from",
            "main",
            "--to",
            "@",
            "--summary",
        ]


def test_list_changed_files_merges_untracked_and_skips_dirs(tmp_path: Path) -> None:
    (tmp_path / "newdir").mkdir()
    with patch(RUN) as mock_run:
        mock_run.side_effect = [
            _completed(
                [], stdout=" M src/app.py\0R  new name.py\0old name.py\0?? notes.txt\0?? newdir/\0"
            ),
            _completed([], stdout="notes.txt\0newdir/inner.py\0"),
        ]

        lines = RealVcs().list_changed_files(str(tmp_path))

    assert lines == [" M src/app.py", "R  new name.py", "?? notes.txt", "?? newdir/inner.py"]
    status_cmd = mock_run.call_args_list[0].args[0]
    assert status_cmd == ["git", "status", "--porcelain", "-z"]


def test_get_change_stats_counts_untracked_lines(tmp_path: Path) -> None:
    (tmp_path / "new.txt").write_text("one\ntwo\nthree\n", encoding="utf-8")
    with patch(RUN) as mock_run:
        mock_run.side_effect = [
            _completed([], stdout="4\t2\tsrc/app.py\n"),
            _completed([], stdout="new.txt\0"),
        ]

        stats = RealVcs().get_change_stats(str(tmp_path))

    assert (stats.file_count, stats.lines_added, stats.lines_deleted) == (2, 7, 2)


def test_get_file_hunks_numbers_staged_before_unstaged() -> None:
    diff = "--- a/a.py\n+++ b/a.py\n@@ -1 +1 @@\n-x\n+y\n"
    with patch(RUN) as mock_run:
        mock_run.side_effect = [_completed([], stdout=diff), _completed([], stdout=diff)]

        hunks = RealVcs().get_file_hunks("/ws", "a.py")

        assert [h.id for h in hunks] == ["staged-0", "unstaged-1"]
        assert "--cached" in mock_run.call_args_list[0].args[0]
        assert "--cached" not in mock_run.call_args_list[1].args[0]


def test_commit_advances_branch_bookmark() -> None:
    with patch(RUN) as mock_run:
        mock_run.return_value = _completed([])

        message = RealVcs().commit("/ws", "Add feature", "feat-a")

        assert message == "Committed successfully to branch 'feat-a'"
        assert [c.args[0] for c in mock_run.call_args_list] == [
            ["jj", "commit", "-m", "Add feature"],
            ["jj", "bookmark", "set", "feat-a", "-r", "@-"],
        ]


def test_split_passes_paths() -> None:
    with patch(RUN) as mock_run:
        mock_run.return_value = _completed([])

        RealVcs().split("/ws", "Part one", ["a.py", "b.py"], "feat-a")

        assert mock_run.call_args_list[0].args[0] == [
            "jj",
            "split",
            "-r",
            "@",
            "-m",
            "Part one",
            "a.py",
            "b.py",
        ]


def test_list_remotes_failure_returns_empty() -> None:
    with patch(RUN) as mock_run:
        mock_run.side_effect = ProcessError("Failed to list remotes")

        assert RealVcs().list_remotes("/repo") == []


def test_workspace_branch_detached_head_is_none() -> None:
    with patch("restack.core.vcs.real.subprocess.run") as mock_run:
        mock_run.return_value = _completed([], stdout="HEAD\n")

        assert RealVcs().get_workspace_branch("/ws") is None


def test_path_outside_git_repo_is_not_ignored(tmp_path: Path) -> None:
    with patch("restack.core.vcs.real.subprocess.run") as mock_run:
        assert not RealVcs().is_path_ignored(str(tmp_path / "a.txt"))
        mock_run.assert_not_called()


def test_ignored_path_uses_check_ignore(tmp_path: Path) -> None:
    (tmp_path / ".git").mkdir()
    with patch("restack.core.vcs.real.subprocess.run") as mock_run:
        mock_run.return_value = _completed([], returncode=0)

        assert RealVcs().is_path_ignored(str(tmp_path / "build.log"))
        assert mock_run.call_args.kwargs["cwd"] == tmp_path
