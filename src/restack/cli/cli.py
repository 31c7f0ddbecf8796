import logging
import os

import click

from restack.cli.commands.commit import commit_cmd, split_cmd
from restack.cli.commands.config import config_group
from restack.cli.commands.info import info_cmd
from restack.cli.commands.rebase import rebase_group
from restack.cli.commands.rescan import rescan_cmd
from restack.cli.commands.retarget import retarget_cmd
from restack.cli.commands.watch import watch_cmd
from restack.cli.commands.workspace import workspace_group
from restack.cli.ensure import fail
from restack.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags

DEBUG_ENV_VAR = "RESTACK_DEBUG"
DEBUG_LOG_FORMAT = "[DEBUG %(name)s:%(lineno)d] %(message)s"


def configure_logging(verbose: bool) -> None:
    if verbose or os.getenv(DEBUG_ENV_VAR):
        logging.basicConfig(level=logging.DEBUG, format=DEBUG_LOG_FORMAT)
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="restack")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Keep stacked workspaces rebased and their change caches current."""
    configure_logging(verbose)
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        try:
            ctx.obj = create_context()
        except ValueError as e:
            fail(str(e))


cli.add_command(commit_cmd)
cli.add_command(config_group)
cli.add_command(info_cmd)
cli.add_command(rebase_group)
cli.add_command(rescan_cmd)
cli.add_command(retarget_cmd)
cli.add_command(split_cmd)
cli.add_command(watch_cmd)
cli.add_command(workspace_group)


def main() -> None:
    """CLI entry point used by the `restack` console script."""
    cli()
