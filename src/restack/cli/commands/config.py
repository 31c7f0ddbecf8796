from dataclasses import replace

import click

from restack.cli.ensure import fail
from restack.cli.output import machine_output, user_output
from restack.core.context import RestackContext
from restack.core.global_config import config_keys, parse_config_value


@click.group("config")
def config_group() -> None:
    """Read and change global settings."""


@config_group.command("list")
@click.pass_obj
def config_list(ctx: RestackContext) -> None:
    """Print every setting as key = value."""
    for key in config_keys():
        machine_output(f"{key} = {getattr(ctx.config, key)}")


@config_group.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_obj
def config_set(ctx: RestackContext, key: str, value: str) -> None:
    """Set KEY to VALUE in the global config file."""
    try:
        parsed = parse_config_value(key, value)
    except ValueError as e:
        fail(str(e))

    ctx.config_store.save(replace(ctx.config, **{key: parsed}))
    user_output(f"Set {key} = {parsed} in {ctx.config_store.path()}")
