"""Workspace entity stored in the per-repository registry."""

from dataclasses import dataclass

# Stored in last_rebased_commit for freshly provisioned workspaces. It never
# equals a resolved commit id, so the next rebase trigger always fires.
NEVER_SYNCED = ""


@dataclass(frozen=True)
class Workspace:
    """An isolated working copy bound to one branch.

    target_branch is the upstream branch the workspace is kept rebased onto;
    None means the workspace is not tracked for auto-rebase.
    """

    id: int
    repo_path: str
    workspace_name: str
    workspace_path: str
    branch_name: str
    target_branch: str | None = None
    last_rebased_commit: str | None = NEVER_SYNCED
    has_conflicts: bool = False
    created_at: str = ""

    @property
    def is_self_targeting(self) -> bool:
        """True when the workspace targets its own branch (rebasing is a no-op)."""
        return self.target_branch is not None and self.branch_name == self.target_branch
