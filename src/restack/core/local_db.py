"""Per-repository SQLite database backing the registry and change cache.

The database lives at ``<repo>/.restack/local.db``. Connections are opened per
operation so each thread gets its own; SQLite serializes writers and the
stores rely only on single-statement (or single-transaction) atomicity.
"""

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

LOCAL_DIR_NAME = ".restack"
LOCAL_DB_NAME = "local.db"

# Seconds a writer waits on a locked database before failing.
BUSY_TIMEOUT_SECONDS = 30.0

SCHEMA = """\
CREATE TABLE IF NOT EXISTS workspaces (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    workspace_name TEXT NOT NULL,
    workspace_path TEXT NOT NULL UNIQUE,
    branch_name TEXT NOT NULL,
    target_branch TEXT,
    last_rebased_commit TEXT,
    has_conflicts INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_workspaces_target ON workspaces(target_branch);

CREATE TABLE IF NOT EXISTS changed_files (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    workspace_id INTEGER,
    file_path TEXT NOT NULL,
    staged_status TEXT,
    workspace_status TEXT,
    is_untracked INTEGER NOT NULL DEFAULT 0,
    hunks_json TEXT,
    updated_at TEXT NOT NULL,
    FOREIGN KEY (workspace_id) REFERENCES workspaces(id) ON DELETE CASCADE,
    UNIQUE(workspace_id, file_path)
);

CREATE INDEX IF NOT EXISTS idx_changed_files_workspace ON changed_files(workspace_id);
"""


def get_local_db_path(repo_path: str) -> Path:
    """Return the database path for a repository."""
    return Path(repo_path) / LOCAL_DIR_NAME / LOCAL_DB_NAME


@contextmanager
def connect(repo_path: str) -> Iterator[sqlite3.Connection]:
    """Open the repository database, creating it and its schema on first use.

    The connection is committed on a clean exit, rolled back on error, and
    always closed.
    """
    db_path = get_local_db_path(repo_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path, timeout=BUSY_TIMEOUT_SECONDS)
    try:
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        conn.executescript(SCHEMA)
        with conn:
            yield conn
    finally:
        conn.close()
