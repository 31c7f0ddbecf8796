import click

from restack.cli.ensure import fail
from restack.cli.rendering import render_rebase_result
from restack.cli.repo import repo_option, resolve_repo
from restack.core.context import RestackContext, build_orchestrator
from restack.core.errors import RestackError


@click.command("retarget")
@click.argument("workspace_id", type=int)
@click.argument("branch")
@repo_option
@click.pass_obj
def retarget_cmd(ctx: RestackContext, workspace_id: int, branch: str, repo: str | None) -> None:
    """Rebase a workspace onto BRANCH and track it from now on.

    The new target is only saved when the rebase completes.
    """
    repo_path = resolve_repo(ctx, repo)
    try:
        result = build_orchestrator(ctx).retarget(repo_path, workspace_id, branch)
    except RestackError as e:
        fail(str(e))

    render_rebase_result(f"Workspace {workspace_id} -> {branch}", result)
    if not result.success:
        raise SystemExit(1)
