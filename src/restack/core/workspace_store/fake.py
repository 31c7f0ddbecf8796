"""Fake in-memory workspace registry for testing."""

import threading
from dataclasses import replace

from restack.core.change_cache.abc import ChangeCache
from restack.core.errors import WorkspaceNotFoundError
from restack.core.workspace_store.abc import WorkspaceStore
from restack.core.workspace_store.types import NEVER_SYNCED, Workspace


class FakeWorkspaceStore(WorkspaceStore):
    """In-memory fake implementation for testing.

    State is provided via constructor or captured during execution. Every
    write is recorded in ``writes`` so tests can assert on the exact sequence
    of registry mutations. A lock makes it safe to share across threads.
    """

    def __init__(
        self,
        workspaces: list[Workspace] | None = None,
        *,
        change_cache: ChangeCache | None = None,
        created_at: str = "2024-01-01T00:00:00+00:00",
    ) -> None:
        """Create FakeWorkspaceStore.

        Args:
            workspaces: Optional initial workspaces (any repositories)
            change_cache: Optional cache whose rows are cascaded on delete
            created_at: Timestamp given to workspaces created via add_workspace
        """
        self._lock = threading.Lock()
        self._workspaces: dict[tuple[str, int], Workspace] = {}
        for workspace in workspaces or []:
            self._workspaces[(workspace.repo_path, workspace.id)] = workspace
        self._change_cache = change_cache
        self._created_at = created_at
        self._next_id = max((w.id for w in workspaces or []), default=0) + 1
        self._writes: list[tuple[str, int, object]] = []

    @property
    def workspaces(self) -> list[Workspace]:
        """All stored workspaces, for test assertions."""
        with self._lock:
            return list(self._workspaces.values())

    @property
    def writes(self) -> list[tuple[str, int, object]]:
        """Recorded (field, workspace_id, value) writes, for test assertions."""
        with self._lock:
            return list(self._writes)

    def list_workspaces(self, repo_path: str) -> list[Workspace]:
        with self._lock:
            found = [w for (repo, _), w in self._workspaces.items() if repo == repo_path]
        return sorted(found, key=lambda w: w.branch_name.lower())

    def list_workspaces_by_target(self, repo_path: str, target_branch: str) -> list[Workspace]:
        return [w for w in self.list_workspaces(repo_path) if w.target_branch == target_branch]

    def get_workspace(self, repo_path: str, workspace_id: int) -> Workspace | None:
        with self._lock:
            return self._workspaces.get((repo_path, workspace_id))

    def add_workspace(
        self,
        repo_path: str,
        *,
        workspace_name: str,
        workspace_path: str,
        branch_name: str,
        target_branch: str | None,
    ) -> Workspace:
        with self._lock:
            workspace = Workspace(
                id=self._next_id,
                repo_path=repo_path,
                workspace_name=workspace_name,
                workspace_path=workspace_path,
                branch_name=branch_name,
                target_branch=target_branch,
                last_rebased_commit=NEVER_SYNCED,
                has_conflicts=False,
                created_at=self._created_at,
            )
            self._workspaces[(repo_path, workspace.id)] = workspace
            self._next_id += 1
            self._writes.append(("add", workspace.id, workspace_name))
        return workspace

    def delete_workspace(self, repo_path: str, workspace_id: int) -> bool:
        with self._lock:
            if (repo_path, workspace_id) not in self._workspaces:
                return False
            del self._workspaces[(repo_path, workspace_id)]
            self._writes.append(("delete", workspace_id, None))
        if self._change_cache is not None:
            self._change_cache.clear_snapshot(repo_path, workspace_id)
        return True

    def get_last_rebased_commit(self, repo_path: str, workspace_id: int) -> str | None:
        return self._require(repo_path, workspace_id).last_rebased_commit

    def update_last_rebased_commit(self, repo_path: str, workspace_id: int, commit_id: str) -> None:
        self._update(repo_path, workspace_id, "last_rebased_commit", commit_id)

    def get_has_conflicts(self, repo_path: str, workspace_id: int) -> bool:
        return self._require(repo_path, workspace_id).has_conflicts

    def update_has_conflicts(self, repo_path: str, workspace_id: int, has_conflicts: bool) -> None:
        self._update(repo_path, workspace_id, "has_conflicts", has_conflicts)

    def get_target_branch(self, repo_path: str, workspace_id: int) -> str | None:
        return self._require(repo_path, workspace_id).target_branch

    def update_target_branch(
        self, repo_path: str, workspace_id: int, target_branch: str | None
    ) -> None:
        self._update(repo_path, workspace_id, "target_branch", target_branch)

    def _require(self, repo_path: str, workspace_id: int) -> Workspace:
        workspace = self.get_workspace(repo_path, workspace_id)
        if workspace is None:
            raise WorkspaceNotFoundError(repo_path, workspace_id)
        return workspace

    def _update(self, repo_path: str, workspace_id: int, field: str, value: object) -> None:
        key = (repo_path, workspace_id)
        with self._lock:
            if key not in self._workspaces:
                raise WorkspaceNotFoundError(repo_path, workspace_id)
            self._workspaces[key] = replace(self._workspaces[key], **{field: value})
            self._writes.append((field, workspace_id, value))
