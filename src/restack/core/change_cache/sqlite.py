"""SQLite-backed change cache stored in the repository's local database."""

import sqlite3

from restack.core import local_db
from restack.core.change_cache.abc import ChangeCache
from restack.core.change_cache.types import CachedFileChange


class SqliteChangeCache(ChangeCache):
    """Production change cache.

    A snapshot replace is one transaction (DELETE then INSERT), so readers on
    other connections see either the previous snapshot or the new one.
    """

    def replace_snapshot(
        self, repo_path: str, workspace_id: int | None, changes: list[CachedFileChange]
    ) -> None:
        with local_db.connect(repo_path) as conn:
            conn.execute("DELETE FROM changed_files WHERE workspace_id IS ?", (workspace_id,))
            conn.executemany(
                "INSERT OR REPLACE INTO changed_files (workspace_id, file_path, staged_status, "
                "workspace_status, is_untracked, hunks_json, updated_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?)",
                [
                    (
                        workspace_id,
                        change.file_path,
                        change.staged_status,
                        change.workspace_status,
                        int(change.is_untracked),
                        change.hunks_json,
                        change.updated_at,
                    )
                    for change in changes
                ],
            )

    def get_snapshot(self, repo_path: str, workspace_id: int | None) -> list[CachedFileChange]:
        with local_db.connect(repo_path) as conn:
            rows = conn.execute(
                "SELECT workspace_id, file_path, staged_status, workspace_status, is_untracked, "
                "hunks_json, updated_at FROM changed_files WHERE workspace_id IS ? "
                "ORDER BY file_path",
                (workspace_id,),
            ).fetchall()
        return [_change_from_row(row) for row in rows]

    def clear_snapshot(self, repo_path: str, workspace_id: int | None) -> None:
        with local_db.connect(repo_path) as conn:
            conn.execute("DELETE FROM changed_files WHERE workspace_id IS ?", (workspace_id,))


def _change_from_row(row: sqlite3.Row) -> CachedFileChange:
    return CachedFileChange(
        workspace_id=row["workspace_id"],
        file_path=row["file_path"],
        staged_status=row["staged_status"],
        workspace_status=row["workspace_status"],
        is_untracked=bool(row["is_untracked"]),
        hunks_json=row["hunks_json"],
        updated_at=row["updated_at"],
    )
