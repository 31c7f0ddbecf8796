"""Production gateway running jj and git as subprocesses.

jj performs history operations (resolve, rebase, edit, commit, split);
git reads the working tree (status, hunks, ignore rules, line stats).
"""

import logging
import subprocess
from pathlib import Path

from restack.core.errors import ProcessError, ResolutionError
from restack.core.subprocess import run_subprocess_with_context
from restack.core.vcs.abc import Vcs
from restack.core.vcs.parsing import (
    UNTRACKED_CODE,
    has_conflict_text,
    parse_commit_candidates,
    parse_conflicts_from_status,
    parse_conflicts_from_summary,
    parse_diff_hunks,
    parse_numstat,
    parse_remote_names,
    parse_status_line,
    split_porcelain_z,
)
from restack.core.vcs.types import ChangeStats, DiffHunk, VcsRebaseResult

logger = logging.getLogger(__name__)

COMMIT_ID_TEMPLATE = "commit_id.short(12)"


class RealVcs(Vcs):
    """Production implementation using subprocess.

    Binary names are configurable so a user can point at a specific jj or git
    install.
    """

    def __init__(self, *, jj_binary: str = "jj", git_binary: str = "git") -> None:
        self._jj = jj_binary
        self._git = git_binary

    def resolve_commit_id(self, repo_path: str, ref: str) -> str:
        try:
            result = run_subprocess_with_context(
                [self._jj, "log", "-r", ref, "--no-graph", "-T", COMMIT_ID_TEMPLATE],
                operation_context=f"resolve '{ref}'",
                cwd=Path(repo_path),
                check=False,
            )
        except ProcessError as e:
            raise ResolutionError(ref, str(e)) from e

        if result.returncode != 0:
            stderr = result.stderr.strip()
            if "conflicted" in stderr and not ref.startswith("bookmarks("):
                candidates = self._bookmark_candidates(repo_path, ref)
                if candidates:
                    raise ResolutionError(
                        ref,
                        f"conflicted bookmark has multiple revisions: [{', '.join(candidates)}]. "
                        f"Use `jj bookmark set {ref} -r <REVISION>` to resolve.",
                    )
            raise ResolutionError(ref, stderr or f"exit code {result.returncode}")

        commit_id = result.stdout.strip()
        if not commit_id:
            raise ResolutionError(ref, "no commit found")
        return commit_id

    def _bookmark_candidates(self, repo_path: str, ref: str) -> list[str]:
        bookmark = ref.split("@", 1)[0]
        result = run_subprocess_with_context(
            [
                self._jj,
                "log",
                "-r",
                f"bookmarks(exact:{bookmark})",
                "--no-graph",
                "-T",
                f'{COMMIT_ID_TEMPLATE} ++ "\\n"',
            ],
            operation_context=f"list revisions of bookmark '{bookmark}'",
            cwd=Path(repo_path),
            check=False,
        )
        if result.returncode != 0:
            return []
        return parse_commit_candidates(result.stdout)

    def rebase(self, working_dir: str, revset: str, target_ref: str) -> VcsRebaseResult:
        logger.debug("Rebasing %s onto %s in %s", revset, target_ref, working_dir)
        result = run_subprocess_with_context(
            [self._jj, "rebase", "-s", revset, "-d", target_ref],
            operation_context=f"rebase '{revset}' onto '{target_ref}'",
            cwd=Path(working_dir),
            check=False,
        )
        message = f"{result.stdout}{result.stderr}".strip()
        return VcsRebaseResult(
            success=result.returncode == 0,
            message=message,
            has_conflicts=has_conflict_text(message),
        )

    def set_current_edit(self, working_dir: str, branch_ref: str) -> None:
        run_subprocess_with_context(
            [self._jj, "edit", branch_ref],
            operation_context=f"edit '{branch_ref}'",
            cwd=Path(working_dir),
        )

    def list_conflicted_files(self, working_dir: str, target_ref: str | None) -> list[str]:
        if target_ref is not None:
            try:
                result = run_subprocess_with_context(
                    [self._jj, "diff", "--from", target_ref, "--to", "@", "--summary"],
                    operation_context=f"diff working copy against '{target_ref}'",
                    cwd=Path(working_dir),
                )
                return parse_conflicts_from_summary(result.stdout)
            except ProcessError as e:
                logger.warning("jj diff failed, falling back to status: %s", e)

        result = run_subprocess_with_context(
            [self._jj, "st", "--no-pager"],
            operation_context="read working copy status",
            cwd=Path(working_dir),
            check=False,
        )
        if result.returncode != 0:
            return []
        return parse_conflicts_from_status(result.stdout)

    def list_changed_files(self, working_dir: str) -> list[str]:
        root = Path(working_dir)
        status = run_subprocess_with_context(
            [self._git, "status", "--porcelain", "-z"],
            operation_context="read working tree status",
            cwd=root,
        )

        lines: list[str] = []
        seen: set[str] = set()
        for line in split_porcelain_z(status.stdout):
            entry = parse_status_line(line)
            if entry is None or _is_directory_entry(root, entry.path):
                continue
            lines.append(line)
            if entry.is_untracked:
                seen.add(entry.path)

        untracked = run_subprocess_with_context(
            [self._git, "ls-files", "--others", "--exclude-standard", "-z"],
            operation_context="list untracked files",
            cwd=root,
            check=False,
        )
        if untracked.returncode == 0:
            for path in untracked.stdout.split("\0"):
                if not path or path in seen:
                    continue
                lines.append(f"{UNTRACKED_CODE} {path}")
                seen.add(path)

        return lines

    def get_file_hunks(self, working_dir: str, path: str) -> list[DiffHunk]:
        staged = self._diff_for_file(working_dir, path, staged=True)
        unstaged = self._diff_for_file(working_dir, path, staged=False)

        hunks = parse_diff_hunks(staged, path, is_staged=True)
        hunks.extend(parse_diff_hunks(unstaged, path, is_staged=False, start_index=len(hunks)))
        return hunks

    def _diff_for_file(self, working_dir: str, path: str, *, staged: bool) -> str:
        cmd = [self._git, "diff", "--unified=3"]
        if staged:
            cmd.append("--cached")
        cmd.extend(["--", path])
        result = run_subprocess_with_context(
            cmd,
            operation_context=f"diff '{path}'",
            cwd=Path(working_dir),
        )
        return result.stdout

    def is_path_ignored(self, path: str) -> bool:
        repo_root = _find_git_root(Path(path))
        if repo_root is None:
            return False

        try:
            result = subprocess.run(
                [self._git, "check-ignore", "-q", path],
                cwd=repo_root,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            logger.debug("check-ignore unavailable for %s: %s", path, e)
            return False

        return result.returncode == 0

    def get_change_stats(self, working_dir: str) -> ChangeStats:
        root = Path(working_dir)
        numstat = run_subprocess_with_context(
            [self._git, "diff", "--numstat", "HEAD"],
            operation_context="count changed lines",
            cwd=root,
        )
        file_count, added, deleted = parse_numstat(numstat.stdout)

        untracked = run_subprocess_with_context(
            [self._git, "ls-files", "--others", "--exclude-standard", "-z"],
            operation_context="list untracked files",
            cwd=root,
        )
        for rel_path in untracked.stdout.split("\0"):
            if not rel_path:
                continue
            file_count += 1
            added += _count_lines(root / rel_path)

        return ChangeStats(file_count=file_count, lines_added=added, lines_deleted=deleted)

    def get_workspace_branch(self, working_dir: str) -> str | None:
        result = subprocess.run(
            [self._git, "rev-parse", "--abbrev-ref", "HEAD"],
            cwd=working_dir,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None

        branch = result.stdout.strip()
        if not branch or branch == "HEAD":
            return None
        return branch

    def commit(self, working_dir: str, message: str, branch_name: str) -> str:
        run_subprocess_with_context(
            [self._jj, "commit", "-m", message],
            operation_context="commit working copy",
            cwd=Path(working_dir),
        )
        self._advance_bookmark(working_dir, branch_name)
        return f"Committed successfully to branch '{branch_name}'"

    def split(self, working_dir: str, message: str, paths: list[str], branch_name: str) -> str:
        run_subprocess_with_context(
            [self._jj, "split", "-r", "@", "-m", message, *paths],
            operation_context=f"split {len(paths)} file(s) out of the working copy",
            cwd=Path(working_dir),
        )
        self._advance_bookmark(working_dir, branch_name)
        return f"Committed successfully to branch '{branch_name}'"

    def _advance_bookmark(self, working_dir: str, branch_name: str) -> None:
        # The new content lives in @-; @ is the fresh empty change on top.
        run_subprocess_with_context(
            [self._jj, "bookmark", "set", branch_name, "-r", "@-"],
            operation_context=f"advance bookmark '{branch_name}'",
            cwd=Path(working_dir),
        )

    def list_remotes(self, repo_path: str) -> list[str]:
        try:
            result = run_subprocess_with_context(
                [self._jj, "git", "remote", "list"],
                operation_context="list remotes",
                cwd=Path(repo_path),
            )
        except ProcessError as e:
            logger.warning("Could not list remotes: %s", e)
            return []
        return parse_remote_names(result.stdout)


def _is_directory_entry(root: Path, path: str) -> bool:
    if path.endswith("/"):
        return True
    return (root / path).is_dir()


def _find_git_root(path: Path) -> Path | None:
    for candidate in [path, *path.parents]:
        if (candidate / ".git").exists():
            return candidate
    return None


def _count_lines(path: Path) -> int:
    try:
        return path.read_bytes().count(b"\n")
    except OSError:
        return 0
