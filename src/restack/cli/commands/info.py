import click

from restack.cli.ensure import fail
from restack.cli.rendering import render_workspace_info
from restack.cli.repo import repo_option, resolve_repo
from restack.core.context import RestackContext
from restack.core.errors import RestackError
from restack.core.workspace_info import collect_workspace_info


@click.command("info")
@click.argument("workspace_id", type=int)
@repo_option
@click.pass_obj
def info_cmd(ctx: RestackContext, workspace_id: int, repo: str | None) -> None:
    """Show live status of one workspace."""
    repo_path = resolve_repo(ctx, repo)
    try:
        info = collect_workspace_info(ctx.vcs, ctx.workspace_store, repo_path, workspace_id)
    except RestackError as e:
        fail(str(e))
    render_workspace_info(info)
