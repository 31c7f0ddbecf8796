"""Rebase commands: run the auto-rebase orchestrator on demand."""

import click

from restack.cli.ensure import fail
from restack.cli.output import user_output
from restack.cli.rendering import render_batch
from restack.cli.repo import repo_option, resolve_repo
from restack.core.context import RestackContext, build_orchestrator
from restack.core.errors import RestackError


@click.group("rebase")
def rebase_group() -> None:
    """Rebase stacked workspaces onto their target branches."""


@rebase_group.command("all")
@repo_option
@click.pass_obj
def rebase_all_cmd(ctx: RestackContext, repo: str | None) -> None:
    """Rebase every stale workspace, grouped by target branch."""
    repo_path = resolve_repo(ctx, repo)
    batches = build_orchestrator(ctx).rebase_all(repo_path)

    if not batches:
        user_output("All tracked workspaces are up to date.")
        return

    for batch in batches:
        render_batch(batch)

    if not all(batch.result.success for batch in batches):
        raise SystemExit(1)


@rebase_group.command("target")
@click.argument("branch")
@repo_option
@click.pass_obj
def rebase_target_cmd(ctx: RestackContext, branch: str, repo: str | None) -> None:
    """Rebase the stale workspaces tracking BRANCH."""
    repo_path = resolve_repo(ctx, repo)
    try:
        batch = build_orchestrator(ctx).rebase_for_target(repo_path, branch)
    except RestackError as e:
        fail(str(e))

    if batch is None:
        user_output(f"No workspaces tracking {branch} need rebasing.")
        return

    render_batch(batch)
    if not batch.result.success:
        raise SystemExit(1)


@rebase_group.command("one")
@click.argument("workspace_id", type=int)
@click.option("--force", is_flag=True, help="Rebase even if already synced with the target.")
@click.option(
    "--default-branch",
    default=None,
    help="Target used when the workspace tracks none. Defaults to the configured branch.",
)
@repo_option
@click.pass_obj
def rebase_one_cmd(
    ctx: RestackContext,
    workspace_id: int,
    force: bool,
    default_branch: str | None,
    repo: str | None,
) -> None:
    """Rebase a single workspace."""
    repo_path = resolve_repo(ctx, repo)
    branch = default_branch or ctx.config.default_branch
    try:
        batch = build_orchestrator(ctx).rebase_one(repo_path, workspace_id, branch, force=force)
    except RestackError as e:
        fail(str(e))

    if batch is None:
        user_output(f"Workspace {workspace_id} is already up to date.")
        return

    render_batch(batch)
    if not batch.result.success:
        raise SystemExit(1)
