"""Result values produced by the rebase orchestrator. Never persisted."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RebaseResult:
    """Outcome of one rebase, or the aggregate of a batch.

    A rebase that completed with conflicts has success True and has_conflicts
    True: conflicts need user action but are not an execution failure.
    """

    success: bool
    message: str
    has_conflicts: bool
    conflicted_files: tuple[str, ...] = ()


@dataclass(frozen=True)
class WorkspaceRebaseOutcome:
    """Per-workspace entry of a batch."""

    workspace_id: int
    workspace_name: str
    branch_name: str
    result: RebaseResult

    @property
    def completed(self) -> bool:
        return self.result.success


@dataclass(frozen=True)
class BatchResult:
    """All rebases performed for one target branch.

    rebased_branches lists the branches whose rebase completed, with or
    without conflicts.
    """

    target_branch: str
    target_commit: str
    rebased_branches: tuple[str, ...]
    result: RebaseResult
    outcomes: tuple[WorkspaceRebaseOutcome, ...]
