"""Commit commands that schedule a background rebase of stacked workspaces."""

import click

from restack.cli.ensure import Ensure, fail
from restack.cli.output import user_output
from restack.cli.repo import repo_option, resolve_repo, workspace_for_cwd
from restack.core.context import RestackContext, build_orchestrator
from restack.core.errors import RestackError
from restack.core.rebase import spawn_rebase_after_commit


def _current_branch(ctx: RestackContext, repo_path: str) -> str:
    workspace = workspace_for_cwd(ctx, repo_path)
    if workspace is not None:
        return workspace.branch_name
    return Ensure.not_none(
        ctx.vcs.get_workspace_branch(str(ctx.cwd)),
        "Not on a branch. Check out a branch before committing.",
    )


@click.command("commit")
@click.option("-m", "--message", required=True, help="Commit message.")
@repo_option
@click.pass_obj
def commit_cmd(ctx: RestackContext, message: str, repo: str | None) -> None:
    """Commit the working copy and rebase workspaces stacked on this branch."""
    repo_path = resolve_repo(ctx, repo)
    branch = _current_branch(ctx, repo_path)
    try:
        user_output(ctx.vcs.commit(str(ctx.cwd), message, branch))
    except RestackError as e:
        fail(str(e))

    spawn_rebase_after_commit(ctx.background, build_orchestrator(ctx), repo_path, branch)


@click.command("split")
@click.option("-m", "--message", required=True, help="Message of the new commit.")
@click.argument("paths", nargs=-1, required=True)
@repo_option
@click.pass_obj
def split_cmd(ctx: RestackContext, message: str, paths: tuple[str, ...], repo: str | None) -> None:
    """Commit only PATHS and rebase workspaces stacked on this branch."""
    repo_path = resolve_repo(ctx, repo)
    branch = _current_branch(ctx, repo_path)
    try:
        user_output(ctx.vcs.split(str(ctx.cwd), message, list(paths), branch))
    except RestackError as e:
        fail(str(e))

    spawn_rebase_after_commit(ctx.background, build_orchestrator(ctx), repo_path, branch)
