"""SQLite-backed workspace registry stored in the repository's local database."""

import sqlite3
from datetime import UTC, datetime

from restack.core import local_db
from restack.core.errors import WorkspaceNotFoundError
from restack.core.workspace_store.abc import WorkspaceStore
from restack.core.workspace_store.types import NEVER_SYNCED, Workspace

_COLUMNS = (
    "id, workspace_name, workspace_path, branch_name, target_branch, "
    "last_rebased_commit, has_conflicts, created_at"
)


class SqliteWorkspaceStore(WorkspaceStore):
    """Production registry.

    Schema (see restack.core.local_db):
    - workspaces: one row per workspace, keyed by autoincrement id
    - changed_files rows reference workspaces(id) ON DELETE CASCADE
    """

    def list_workspaces(self, repo_path: str) -> list[Workspace]:
        with local_db.connect(repo_path) as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM workspaces ORDER BY branch_name COLLATE NOCASE ASC"
            ).fetchall()
        return [_workspace_from_row(repo_path, row) for row in rows]

    def list_workspaces_by_target(self, repo_path: str, target_branch: str) -> list[Workspace]:
        with local_db.connect(repo_path) as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM workspaces WHERE target_branch = ? "
                "ORDER BY branch_name COLLATE NOCASE ASC",
                (target_branch,),
            ).fetchall()
        return [_workspace_from_row(repo_path, row) for row in rows]

    def get_workspace(self, repo_path: str, workspace_id: int) -> Workspace | None:
        with local_db.connect(repo_path) as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM workspaces WHERE id = ?", (workspace_id,)
            ).fetchone()
        if row is None:
            return None
        return _workspace_from_row(repo_path, row)

    def add_workspace(
        self,
        repo_path: str,
        *,
        workspace_name: str,
        workspace_path: str,
        branch_name: str,
        target_branch: str | None,
    ) -> Workspace:
        created_at = datetime.now(UTC).isoformat()
        with local_db.connect(repo_path) as conn:
            cursor = conn.execute(
                "INSERT INTO workspaces (workspace_name, workspace_path, branch_name, "
                "target_branch, last_rebased_commit, has_conflicts, created_at) "
                "VALUES (?, ?, ?, ?, ?, 0, ?)",
                (
                    workspace_name,
                    workspace_path,
                    branch_name,
                    target_branch,
                    NEVER_SYNCED,
                    created_at,
                ),
            )
            workspace_id = cursor.lastrowid
        if workspace_id is None:
            raise RuntimeError(f"Failed to insert workspace '{workspace_name}'")
        return Workspace(
            id=workspace_id,
            repo_path=repo_path,
            workspace_name=workspace_name,
            workspace_path=workspace_path,
            branch_name=branch_name,
            target_branch=target_branch,
            last_rebased_commit=NEVER_SYNCED,
            has_conflicts=False,
            created_at=created_at,
        )

    def delete_workspace(self, repo_path: str, workspace_id: int) -> bool:
        with local_db.connect(repo_path) as conn:
            cursor = conn.execute("DELETE FROM workspaces WHERE id = ?", (workspace_id,))
        return cursor.rowcount > 0

    def get_last_rebased_commit(self, repo_path: str, workspace_id: int) -> str | None:
        return self._require(repo_path, workspace_id).last_rebased_commit

    def update_last_rebased_commit(self, repo_path: str, workspace_id: int, commit_id: str) -> None:
        self._update(repo_path, workspace_id, "last_rebased_commit", commit_id)

    def get_has_conflicts(self, repo_path: str, workspace_id: int) -> bool:
        return self._require(repo_path, workspace_id).has_conflicts

    def update_has_conflicts(self, repo_path: str, workspace_id: int, has_conflicts: bool) -> None:
        self._update(repo_path, workspace_id, "has_conflicts", int(has_conflicts))

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

    def _update(self, repo_path: str, workspace_id: int, column: str, value: object) -> None:
        # column is always one of our literal field names, never user input
        with local_db.connect(repo_path) as conn:
            cursor = conn.execute(
                f"UPDATE workspaces SET {column} = ? WHERE id = ?", (value, workspace_id)
            )
        if cursor.rowcount == 0:
            raise WorkspaceNotFoundError(repo_path, workspace_id)


def _workspace_from_row(repo_path: str, row: sqlite3.Row) -> Workspace:
    return Workspace(
        id=row["id"],
        repo_path=repo_path,
        workspace_name=row["workspace_name"],
        workspace_path=row["workspace_path"],
        branch_name=row["branch_name"],
        target_branch=row["target_branch"],
        last_rebased_commit=row["last_rebased_commit"],
        has_conflicts=bool(row["has_conflicts"]),
        created_at=row["created_at"],
    )
