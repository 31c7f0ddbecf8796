"""Workspace registry: the persisted list of workspaces per repository."""

from restack.core.workspace_store.abc import WorkspaceStore
from restack.core.workspace_store.fake import FakeWorkspaceStore
from restack.core.workspace_store.sqlite import SqliteWorkspaceStore
from restack.core.workspace_store.types import NEVER_SYNCED, Workspace

__all__ = [
    "NEVER_SYNCED",
    "FakeWorkspaceStore",
    "SqliteWorkspaceStore",
    "Workspace",
    "WorkspaceStore",
]
