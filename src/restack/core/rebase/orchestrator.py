"""Keep stacked workspaces rebased onto their target branches.

For one target branch T the orchestrator:

1. loads every workspace tracking T (skipping the one that IS T),
2. resolves T to a commit id (failure aborts the group),
3. keeps only workspaces whose recorded last_rebased_commit differs,
4. rebases each of them sequentially with ``roots(T..@)`` so the whole local
   lineage moves, re-points the working copy at its own branch, and records
   conflicts,
5. persists last_rebased_commit for every attempt, successful or not.

A failed attempt is never retried automatically: the recorded commit matches
the target, so only a new target commit makes the workspace stale again.
"""

import logging

from restack.core.background.abc import Background
from restack.core.branch_names import to_engine_ref
from restack.core.errors import ResolutionError, RestackError, WorkspaceNotFoundError
from restack.core.rebase.types import BatchResult, RebaseResult, WorkspaceRebaseOutcome
from restack.core.vcs.abc import Vcs
from restack.core.workspace_store.abc import WorkspaceStore
from restack.core.workspace_store.types import Workspace

logger = logging.getLogger(__name__)


def lineage_revset(engine_ref: str) -> str:
    """Revset selecting the root commits between the target and the working copy."""
    return f"roots({engine_ref}..@)"


class RebaseOrchestrator:
    """Rebases workspaces that have fallen behind their target branch.

    Safe to call from several threads at once: groups are independent and the
    registry handles concurrent writes. Within a group workspaces are always
    rebased one at a time.
    """

    def __init__(self, *, vcs: Vcs, workspace_store: WorkspaceStore) -> None:
        self._vcs = vcs
        self._store = workspace_store

    def rebase_for_target(self, repo_path: str, target_branch: str) -> BatchResult | None:
        """Rebase every stale workspace tracking target_branch.

        Returns:
            The batch result, or None when no workspace tracks the branch or
            all of them are already synced with its current commit

        Raises:
            ResolutionError: If target_branch cannot be resolved
        """
        workspaces = [
            w
            for w in self._store.list_workspaces_by_target(repo_path, target_branch)
            if not w.is_self_targeting
        ]
        if not workspaces:
            logger.debug("No workspaces track %s", target_branch)
            return None

        engine_ref = self._engine_ref(repo_path, target_branch)
        target_commit = self._vcs.resolve_commit_id(repo_path, engine_ref)

        stale = [w for w in workspaces if w.last_rebased_commit != target_commit]
        if not stale:
            logger.debug(
                "All %d workspace(s) tracking %s are synced at %s",
                len(workspaces),
                target_branch,
                target_commit,
            )
            return None

        outcomes = [
            self._rebase_workspace(repo_path, workspace, engine_ref, target_commit)
            for workspace in stale
        ]
        return _batch_result(target_branch, target_commit, outcomes)

    def rebase_after_commit(self, repo_path: str, committed_branch: str) -> BatchResult | None:
        """Rebase the workspaces stacked on a branch that just received a commit."""
        return self.rebase_for_target(repo_path, committed_branch)

    def rebase_all(self, repo_path: str) -> list[BatchResult]:
        """Run rebase_for_target for every distinct target branch in the repository.

        A target that cannot be resolved is logged and skipped; the other
        groups still run.
        """
        targets = sorted(
            {w.target_branch for w in self._store.list_workspaces(repo_path) if w.target_branch}
        )

        results: list[BatchResult] = []
        for target_branch in targets:
            try:
                batch = self.rebase_for_target(repo_path, target_branch)
            except ResolutionError as e:
                logger.error("Skipping workspaces tracking %s: %s", target_branch, e)
                continue
            if batch is not None:
                results.append(batch)
        return results

    def rebase_one(
        self,
        repo_path: str,
        workspace_id: int,
        default_branch: str,
        force: bool = False,
    ) -> BatchResult | None:
        """Rebase a single workspace onto its target (or default_branch).

        Args:
            force: Rebase even when the workspace is already synced

        Returns:
            The batch result, or None when nothing needed doing

        Raises:
            WorkspaceNotFoundError: If the workspace does not exist
            ResolutionError: If the target cannot be resolved
        """
        workspace = self._store.get_workspace(repo_path, workspace_id)
        if workspace is None:
            raise WorkspaceNotFoundError(repo_path, workspace_id)

        target_branch = workspace.target_branch or default_branch
        if target_branch == workspace.branch_name:
            logger.debug("Workspace %s targets its own branch; nothing to do", workspace_id)
            return None

        engine_ref = self._engine_ref(repo_path, target_branch)
        target_commit = self._vcs.resolve_commit_id(repo_path, engine_ref)

        if not force and workspace.last_rebased_commit == target_commit:
            logger.debug("Workspace %s already synced at %s", workspace_id, target_commit)
            return None

        outcome = self._rebase_workspace(repo_path, workspace, engine_ref, target_commit)
        return _batch_result(target_branch, target_commit, [outcome])

    def retarget(self, repo_path: str, workspace_id: int, target_branch: str) -> RebaseResult:
        """Rebase a workspace onto a new target branch and start tracking it.

        The new target is only recorded when the rebase completed, with or
        without conflicts.

        Raises:
            WorkspaceNotFoundError: If the workspace does not exist
            ResolutionError: If the new target cannot be resolved
            RestackError: If the workspace would target its own branch
        """
        workspace = self._store.get_workspace(repo_path, workspace_id)
        if workspace is None:
            raise WorkspaceNotFoundError(repo_path, workspace_id)
        if target_branch == workspace.branch_name:
            raise RestackError(
                f"Workspace '{workspace.workspace_name}' cannot target its own branch "
                f"'{target_branch}'"
            )

        engine_ref = self._engine_ref(repo_path, target_branch)
        target_commit = self._vcs.resolve_commit_id(repo_path, engine_ref)

        outcome = self._rebase_workspace(repo_path, workspace, engine_ref, target_commit)
        if outcome.completed:
            self._store.update_target_branch(repo_path, workspace_id, target_branch)
        return outcome.result

    def _engine_ref(self, repo_path: str, target_branch: str) -> str:
        remotes = self._vcs.list_remotes(repo_path)
        return to_engine_ref(target_branch, remotes or None)

    def _rebase_workspace(
        self,
        repo_path: str,
        workspace: Workspace,
        engine_ref: str,
        target_commit: str,
    ) -> WorkspaceRebaseOutcome:
        logger.debug(
            "Rebasing workspace %s (%s) onto %s",
            workspace.workspace_name,
            workspace.branch_name,
            engine_ref,
        )
        try:
            vcs_result = self._vcs.rebase(
                workspace.workspace_path, lineage_revset(engine_ref), engine_ref
            )
        except RuntimeError as e:
            logger.error("Rebase of workspace '%s' failed: %s", workspace.workspace_name, e)
            self._store.update_last_rebased_commit(repo_path, workspace.id, target_commit)
            return WorkspaceRebaseOutcome(
                workspace_id=workspace.id,
                workspace_name=workspace.workspace_name,
                branch_name=workspace.branch_name,
                result=RebaseResult(success=False, message=str(e), has_conflicts=False),
            )

        # The rebase has run: conflict state is persisted whatever happens next
        edit_error: str | None = None
        try:
            self._vcs.set_current_edit(workspace.workspace_path, workspace.branch_name)
        except RuntimeError as e:
            logger.error(
                "Could not re-point workspace '%s' at %s: %s",
                workspace.workspace_name,
                workspace.branch_name,
                e,
            )
            edit_error = f"Rebased, but could not edit '{workspace.branch_name}': {e}"

        conflicted: list[str] = []
        try:
            conflicted = self._vcs.list_conflicted_files(workspace.workspace_path, engine_ref)
        except RuntimeError as e:
            logger.warning(
                "Could not list conflicted files of workspace '%s': %s",
                workspace.workspace_name,
                e,
            )

        has_conflicts = vcs_result.has_conflicts or bool(conflicted)
        self._store.update_has_conflicts(repo_path, workspace.id, has_conflicts)
        self._store.update_last_rebased_commit(repo_path, workspace.id, target_commit)

        if not vcs_result.success:
            logger.warning(
                "Rebase of workspace '%s' exited with an error", workspace.workspace_name
            )

        return WorkspaceRebaseOutcome(
            workspace_id=workspace.id,
            workspace_name=workspace.workspace_name,
            branch_name=workspace.branch_name,
            result=RebaseResult(
                success=vcs_result.success and edit_error is None,
                message=edit_error if edit_error is not None else vcs_result.message,
                has_conflicts=has_conflicts,
                conflicted_files=tuple(conflicted),
            ),
        )


def _batch_result(
    target_branch: str, target_commit: str, outcomes: list[WorkspaceRebaseOutcome]
) -> BatchResult:
    conflicted: list[str] = []
    for outcome in outcomes:
        conflicted.extend(outcome.result.conflicted_files)

    aggregate = RebaseResult(
        success=all(o.result.success for o in outcomes),
        message="\n".join(f"[{o.workspace_name}] {o.result.message}" for o in outcomes),
        has_conflicts=any(o.result.has_conflicts for o in outcomes),
        conflicted_files=tuple(conflicted),
    )
    return BatchResult(
        target_branch=target_branch,
        target_commit=target_commit,
        rebased_branches=tuple(o.branch_name for o in outcomes if o.completed),
        result=aggregate,
        outcomes=tuple(outcomes),
    )


def spawn_rebase_after_commit(
    background: Background,
    orchestrator: RebaseOrchestrator,
    repo_path: str,
    committed_branch: str,
) -> None:
    """Schedule rebase_after_commit as a detached task.

    Returns immediately; the outcome is only visible in the logs and in the
    registry.
    """

    def run() -> None:
        batch = orchestrator.rebase_after_commit(repo_path, committed_branch)
        if batch is None:
            logger.debug("No workspaces needed rebasing after commit to %s", committed_branch)
            return
        logger.info(
            "Rebased %d workspace(s) onto %s", len(batch.rebased_branches), committed_branch
        )

    background.spawn(run, name=f"rebase-after-commit:{committed_branch}")
