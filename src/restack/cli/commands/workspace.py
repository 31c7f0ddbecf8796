"""Workspace registry commands."""

from pathlib import Path

import click

from restack.cli.ensure import Ensure
from restack.cli.output import user_output
from restack.cli.rendering import render_workspaces
from restack.cli.repo import repo_option, resolve_repo
from restack.core.context import RestackContext


@click.group("workspace")
def workspace_group() -> None:
    """Inspect and register workspaces."""


@workspace_group.command("list")
@repo_option
@click.pass_obj
def list_cmd(ctx: RestackContext, repo: str | None) -> None:
    """List workspaces with their sync and conflict state."""
    repo_path = resolve_repo(ctx, repo)
    workspaces = ctx.workspace_store.list_workspaces(repo_path)
    if not workspaces:
        user_output("No workspaces registered.")
        return
    render_workspaces(workspaces)


@workspace_group.command("add")
@click.argument("name")
@click.argument("path", type=click.Path(file_okay=False))
@click.option("--branch", required=True, help="Branch checked out in the workspace.")
@click.option("--target", default=None, help="Branch to keep the workspace rebased onto.")
@repo_option
@click.pass_obj
def add_cmd(
    ctx: RestackContext,
    name: str,
    path: str,
    branch: str,
    target: str | None,
    repo: str | None,
) -> None:
    """Register an existing working copy at PATH as workspace NAME."""
    repo_path = resolve_repo(ctx, repo)
    Ensure.invariant(
        target != branch, f"Workspace cannot target its own branch '{branch}'"
    )
    workspace = ctx.workspace_store.add_workspace(
        repo_path,
        workspace_name=name,
        workspace_path=str(Path(path)),
        branch_name=branch,
        target_branch=target,
    )
    user_output(f"Registered workspace {workspace.workspace_name} (#{workspace.id})")


@workspace_group.command("remove")
@click.argument("workspace_id", type=int)
@repo_option
@click.pass_obj
def remove_cmd(ctx: RestackContext, workspace_id: int, repo: str | None) -> None:
    """Forget a workspace and its cached changes. Files are left in place."""
    repo_path = resolve_repo(ctx, repo)
    Ensure.invariant(
        ctx.workspace_store.delete_workspace(repo_path, workspace_id),
        f"Workspace {workspace_id} not found in {repo_path}",
    )
    user_output(f"Removed workspace #{workspace_id}")
