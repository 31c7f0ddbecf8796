"""Auto-rebase of stacked workspaces onto their moving target branches."""

from restack.core.rebase.orchestrator import RebaseOrchestrator, spawn_rebase_after_commit
from restack.core.rebase.types import BatchResult, RebaseResult, WorkspaceRebaseOutcome

__all__ = [
    "BatchResult",
    "RebaseOrchestrator",
    "RebaseResult",
    "WorkspaceRebaseOutcome",
    "spawn_rebase_after_commit",
]
