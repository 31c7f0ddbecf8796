import click

from restack.cli.ensure import fail
from restack.cli.output import user_output
from restack.cli.repo import repo_option, resolve_repo
from restack.core.context import RestackContext, build_coordinator
from restack.core.errors import RestackError


@click.command("rescan")
@click.option(
    "--workspace-id",
    type=int,
    default=None,
    help="Workspace to rescan. Defaults to the repository root.",
)
@repo_option
@click.pass_obj
def rescan_cmd(ctx: RestackContext, workspace_id: int | None, repo: str | None) -> None:
    """Rebuild the cached change set now, with a full reindex."""
    repo_path = resolve_repo(ctx, repo)
    try:
        synced = build_coordinator(ctx).trigger_rescan(repo_path, workspace_id)
    except RestackError as e:
        fail(str(e))

    if not synced:
        fail("Could not read working tree changes; cache left unchanged")

    changes = ctx.change_cache.get_snapshot(repo_path, workspace_id)
    user_output(f"Cached {len(changes)} changed file(s).")
