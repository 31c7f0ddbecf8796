"""Fake version-control gateway for testing.

FakeVcs is an in-memory implementation that accepts pre-configured state in
its constructor. Construct instances directly with keyword arguments.
"""

import threading

from restack.core.errors import ProcessError, ResolutionError
from restack.core.vcs.abc import Vcs
from restack.core.vcs.types import ChangeStats, DiffHunk, VcsRebaseResult


class FakeVcs(Vcs):
    """In-memory fake implementation of version-control operations.

    This class has NO public setup methods. All state is provided via constructor
    using keyword arguments with sensible defaults (empty dicts). Mutating calls
    are recorded and exposed through read-only properties. Safe to share
    between threads.
    """

    def __init__(
        self,
        *,
        commit_ids: dict[str, str] | None = None,
        rebase_results: dict[str, VcsRebaseResult] | None = None,
        rebase_raises: dict[str, Exception] | None = None,
        set_current_edit_raises: dict[str, Exception] | None = None,
        conflicted_files: dict[str, list[str]] | None = None,
        changed_files: dict[str, list[str]] | None = None,
        changed_files_raises: dict[str, Exception] | None = None,
        file_hunks: dict[tuple[str, str], list[DiffHunk]] | None = None,
        file_hunks_raises: dict[tuple[str, str], Exception] | None = None,
        ignored_paths: set[str] | None = None,
        change_stats: dict[str, ChangeStats] | None = None,
        branches: dict[str, str] | None = None,
        remotes: list[str] | None = None,
    ) -> None:
        """Create FakeVcs with pre-configured state.

        Args:
            commit_ids: Mapping of engine ref -> commit id; unknown refs raise ResolutionError
            rebase_results: Mapping of working dir -> rebase result (default: clean success)
            rebase_raises: Mapping of working dir -> exception raised by rebase()
            set_current_edit_raises: Mapping of working dir -> exception raised by set_current_edit()
            conflicted_files: Mapping of working dir -> conflicted paths
            changed_files: Mapping of working dir -> porcelain status lines
            changed_files_raises: Mapping of working dir -> exception raised by list_changed_files()
            file_hunks: Mapping of (working dir, path) -> hunks
            file_hunks_raises: Mapping of (working dir, path) -> exception raised by get_file_hunks()
            ignored_paths: Absolute paths reported as ignored
            change_stats: Mapping of working dir -> stats; missing dirs raise ProcessError
            branches: Mapping of working dir -> checked-out branch
            remotes: Remote names returned by list_remotes()
        """
        self._lock = threading.Lock()
        self._commit_ids = commit_ids if commit_ids is not None else {}
        self._rebase_results = rebase_results if rebase_results is not None else {}
        self._rebase_raises = rebase_raises if rebase_raises is not None else {}
        self._set_current_edit_raises = (
            set_current_edit_raises if set_current_edit_raises is not None else {}
        )
        self._conflicted_files = conflicted_files if conflicted_files is not None else {}
        self._changed_files = changed_files if changed_files is not None else {}
        self._changed_files_raises = changed_files_raises if changed_files_raises is not None else {}
        self._file_hunks = file_hunks if file_hunks is not None else {}
        self._file_hunks_raises = file_hunks_raises if file_hunks_raises is not None else {}
        self._ignored_paths = ignored_paths if ignored_paths is not None else set()
        self._change_stats = change_stats if change_stats is not None else {}
        self._branches = branches if branches is not None else {}
        self._remotes = remotes if remotes is not None else []

        self._resolve_calls: list[tuple[str, str]] = []
        self._rebase_calls: list[tuple[str, str, str]] = []
        self._set_current_edit_calls: list[tuple[str, str]] = []
        self._conflicted_files_calls: list[tuple[str, str | None]] = []
        self._file_hunks_calls: list[tuple[str, str]] = []
        self._commit_calls: list[tuple[str, str, str]] = []
        self._split_calls: list[tuple[str, str, list[str], str]] = []

    @property
    def resolve_calls(self) -> list[tuple[str, str]]:
        """(repo_path, ref) per resolve_commit_id() call."""
        with self._lock:
            return list(self._resolve_calls)

    @property
    def rebase_calls(self) -> list[tuple[str, str, str]]:
        """(working_dir, revset, target_ref) per rebase() call."""
        with self._lock:
            return list(self._rebase_calls)

    @property
    def set_current_edit_calls(self) -> list[tuple[str, str]]:
        with self._lock:
            return list(self._set_current_edit_calls)

    @property
    def conflicted_files_calls(self) -> list[tuple[str, str | None]]:
        with self._lock:
            return list(self._conflicted_files_calls)

    @property
    def file_hunks_calls(self) -> list[tuple[str, str]]:
        with self._lock:
            return list(self._file_hunks_calls)

    @property
    def commit_calls(self) -> list[tuple[str, str, str]]:
        with self._lock:
            return list(self._commit_calls)

    @property
    def split_calls(self) -> list[tuple[str, str, list[str], str]]:
        with self._lock:
            return list(self._split_calls)

    def resolve_commit_id(self, repo_path: str, ref: str) -> str:
        with self._lock:
            self._resolve_calls.append((repo_path, ref))
        if ref not in self._commit_ids:
            raise ResolutionError(ref, "no commit found")
        return self._commit_ids[ref]

    def rebase(self, working_dir: str, revset: str, target_ref: str) -> VcsRebaseResult:
        with self._lock:
            self._rebase_calls.append((working_dir, revset, target_ref))
        if working_dir in self._rebase_raises:
            raise self._rebase_raises[working_dir]
        return self._rebase_results.get(
            working_dir,
            VcsRebaseResult(success=True, message="Rebased 1 commits", has_conflicts=False),
        )

    def set_current_edit(self, working_dir: str, branch_ref: str) -> None:
        with self._lock:
            self._set_current_edit_calls.append((working_dir, branch_ref))
        if working_dir in self._set_current_edit_raises:
            raise self._set_current_edit_raises[working_dir]

    def list_conflicted_files(self, working_dir: str, target_ref: str | None) -> list[str]:
        with self._lock:
            self._conflicted_files_calls.append((working_dir, target_ref))
        return list(self._conflicted_files.get(working_dir, []))

    def list_changed_files(self, working_dir: str) -> list[str]:
        if working_dir in self._changed_files_raises:
            raise self._changed_files_raises[working_dir]
        return list(self._changed_files.get(working_dir, []))

    def get_file_hunks(self, working_dir: str, path: str) -> list[DiffHunk]:
        with self._lock:
            self._file_hunks_calls.append((working_dir, path))
        key = (working_dir, path)
        if key in self._file_hunks_raises:
            raise self._file_hunks_raises[key]
        return list(self._file_hunks.get(key, []))

    def is_path_ignored(self, path: str) -> bool:
        return path in self._ignored_paths

    def get_change_stats(self, working_dir: str) -> ChangeStats:
        if working_dir not in self._change_stats:
            raise ProcessError(f"Failed to count changed lines in {working_dir}")
        return self._change_stats[working_dir]

    def get_workspace_branch(self, working_dir: str) -> str | None:
        return self._branches.get(working_dir)

    def commit(self, working_dir: str, message: str, branch_name: str) -> str:
        with self._lock:
            self._commit_calls.append((working_dir, message, branch_name))
        return f"Committed successfully to branch '{branch_name}'"

    def split(self, working_dir: str, message: str, paths: list[str], branch_name: str) -> str:
        with self._lock:
            self._split_calls.append((working_dir, message, list(paths), branch_name))
        return f"Committed successfully to branch '{branch_name}'"

    def list_remotes(self, repo_path: str) -> list[str]:
        return list(self._remotes)
