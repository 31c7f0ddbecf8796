"""Aggregate read of one workspace's live state.

Each field comes from an independent engine query. They run concurrently and
each may fail on its own: a failed field is None and the rest are still
returned.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import TypeVar

from restack.core.branch_names import to_engine_ref
from restack.core.errors import WorkspaceNotFoundError
from restack.core.vcs.abc import Vcs
from restack.core.vcs.types import ChangeStats
from restack.core.workspace_store.abc import WorkspaceStore
from restack.core.workspace_store.types import Workspace

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class WorkspaceInfo:
    workspace: Workspace
    changed_files: list[str] | None
    conflicted_files: list[str] | None
    change_stats: ChangeStats | None
    target_commit: str | None

    @property
    def is_synced(self) -> bool:
        """True when the recorded rebase commit matches the target's current commit."""
        return (
            self.target_commit is not None
            and self.workspace.last_rebased_commit == self.target_commit
        )


def collect_workspace_info(
    vcs: Vcs, store: WorkspaceStore, repo_path: str, workspace_id: int
) -> WorkspaceInfo:
    """Query every field of a workspace in parallel.

    Raises:
        WorkspaceNotFoundError: If the workspace does not exist
    """
    workspace = store.get_workspace(repo_path, workspace_id)
    if workspace is None:
        raise WorkspaceNotFoundError(repo_path, workspace_id)

    path = workspace.workspace_path
    engine_ref: str | None = None
    if workspace.target_branch is not None:
        engine_ref = to_engine_ref(workspace.target_branch, vcs.list_remotes(repo_path) or None)

    with ThreadPoolExecutor(max_workers=4) as executor:
        changed = executor.submit(vcs.list_changed_files, path)
        conflicted = executor.submit(vcs.list_conflicted_files, path, engine_ref)
        stats = executor.submit(vcs.get_change_stats, path)
        target: Future[str] | None = None
        if engine_ref is not None:
            target = executor.submit(vcs.resolve_commit_id, repo_path, engine_ref)

    return WorkspaceInfo(
        workspace=workspace,
        changed_files=_result_or_none(changed, "changed files", path),
        conflicted_files=_result_or_none(conflicted, "conflicted files", path),
        change_stats=_result_or_none(stats, "change stats", path),
        target_commit=_result_or_none(target, "target commit", path) if target else None,
    )


def _result_or_none(future: Future[T], label: str, path: str) -> T | None:
    try:
        return future.result()
    except Exception as e:
        logger.warning("Could not read %s for %s: %s", label, path, e)
        return None
