"""Abstract interface for the workspace registry."""

from abc import ABC, abstractmethod

from restack.core.workspace_store.types import Workspace


class WorkspaceStore(ABC):
    """Abstract interface for workspace persistence.

    Implementations include:
    - FakeWorkspaceStore: In-memory for testing
    - SqliteWorkspaceStore: Per-repository SQLite database

    Implementations must tolerate concurrent readers from several orchestrator
    threads. Each write is independently atomic; no cross-row transactions are
    required or offered.

    Field getters and updaters raise WorkspaceNotFoundError for unknown ids;
    only get_workspace reports absence by returning None.
    """

    @abstractmethod
    def list_workspaces(self, repo_path: str) -> list[Workspace]:
        """List all workspaces of a repository, ordered by branch name."""
        ...

    @abstractmethod
    def list_workspaces_by_target(self, repo_path: str, target_branch: str) -> list[Workspace]:
        """List workspaces whose target_branch equals the given branch."""
        ...

    @abstractmethod
    def get_workspace(self, repo_path: str, workspace_id: int) -> Workspace | None:
        """Get a workspace by id.

        Returns:
            The Workspace if found, None otherwise
        """
        ...

    @abstractmethod
    def add_workspace(
        self,
        repo_path: str,
        *,
        workspace_name: str,
        workspace_path: str,
        branch_name: str,
        target_branch: str | None,
    ) -> Workspace:
        """Register a newly provisioned workspace.

        The workspace starts with last_rebased_commit set to NEVER_SYNCED so the
        first rebase trigger always runs.
        """
        ...

    @abstractmethod
    def delete_workspace(self, repo_path: str, workspace_id: int) -> bool:
        """Delete a workspace and its cached change rows.

        Returns:
            True if the workspace existed and was deleted
        """
        ...

    @abstractmethod
    def get_last_rebased_commit(self, repo_path: str, workspace_id: int) -> str | None:
        """Read the target commit recorded at the last rebase attempt."""
        ...

    @abstractmethod
    def update_last_rebased_commit(self, repo_path: str, workspace_id: int, commit_id: str) -> None:
        """Record the target commit of a rebase attempt.

        Raises:
            WorkspaceNotFoundError: If the workspace does not exist
        """
        ...

    @abstractmethod
    def get_has_conflicts(self, repo_path: str, workspace_id: int) -> bool:
        """Read the conflict flag of a workspace."""
        ...

    @abstractmethod
    def update_has_conflicts(self, repo_path: str, workspace_id: int, has_conflicts: bool) -> None:
        """Set the conflict flag of a workspace.

        Raises:
            WorkspaceNotFoundError: If the workspace does not exist
        """
        ...

    @abstractmethod
    def get_target_branch(self, repo_path: str, workspace_id: int) -> str | None:
        """Read the target branch of a workspace."""
        ...

    @abstractmethod
    def update_target_branch(
        self, repo_path: str, workspace_id: int, target_branch: str | None
    ) -> None:
        """Change (or clear) the target branch of a workspace.

        Raises:
            WorkspaceNotFoundError: If the workspace does not exist
        """
        ...
