"""Abstract interface for the version-control engine gateway."""

from abc import ABC, abstractmethod

from restack.core.vcs.types import ChangeStats, DiffHunk, VcsRebaseResult


class Vcs(ABC):
    """Abstract interface for version-control operations.

    All implementations (real and fake) must implement this interface. Refs
    passed in are already in the engine's native syntax.

    Methods raise ProcessError when the engine cannot be run or a checked
    command fails, except where documented otherwise.
    """

    @abstractmethod
    def resolve_commit_id(self, repo_path: str, ref: str) -> str:
        """Resolve a ref to its commit id.

        Raises:
            ResolutionError: If the ref is unknown, ambiguous, or resolves to
                nothing
        """
        ...

    @abstractmethod
    def rebase(self, working_dir: str, revset: str, target_ref: str) -> VcsRebaseResult:
        """Move every commit selected by revset (and descendants) onto target_ref.

        A non-zero engine exit is reported as success=False, not raised.
        """
        ...

    @abstractmethod
    def set_current_edit(self, working_dir: str, branch_ref: str) -> None:
        """Point the working copy at branch_ref so it reflects the rebased content."""
        ...

    @abstractmethod
    def list_conflicted_files(self, working_dir: str, target_ref: str | None) -> list[str]:
        """List paths with unresolved conflicts relative to target_ref.

        With target_ref None only the working copy itself is inspected.
        """
        ...

    @abstractmethod
    def list_changed_files(self, working_dir: str) -> list[str]:
        """List working-tree changes as two-column porcelain status lines."""
        ...

    @abstractmethod
    def get_file_hunks(self, working_dir: str, path: str) -> list[DiffHunk]:
        """Get staged hunks followed by unstaged hunks for one file."""
        ...

    @abstractmethod
    def is_path_ignored(self, path: str) -> bool:
        """Check whether an absolute path is excluded by ignore rules.

        Never raises; paths outside any repository are not ignored.
        """
        ...

    @abstractmethod
    def get_change_stats(self, working_dir: str) -> ChangeStats:
        """Count changed files and changed lines of the working copy."""
        ...

    @abstractmethod
    def get_workspace_branch(self, working_dir: str) -> str | None:
        """Get the checked-out branch name, or None when detached."""
        ...

    @abstractmethod
    def commit(self, working_dir: str, message: str, branch_name: str) -> str:
        """Commit the working-copy change and advance branch_name onto it.

        Returns:
            Human-readable confirmation
        """
        ...

    @abstractmethod
    def split(self, working_dir: str, message: str, paths: list[str], branch_name: str) -> str:
        """Split paths out of the working copy into a new parent commit.

        branch_name is advanced onto the new commit.

        Returns:
            Human-readable confirmation
        """
        ...

    @abstractmethod
    def list_remotes(self, repo_path: str) -> list[str]:
        """List configured remote names. Returns [] when they cannot be read."""
        ...
