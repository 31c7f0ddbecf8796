"""Repository and workspace resolution shared by commands."""

from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

import click

from restack.core.context import RestackContext
from restack.core.repo_discovery import discover_repo_root
from restack.core.watch.classify import find_owner
from restack.core.watch.coordinator import watched_paths_for_repo
from restack.core.workspace_store.types import Workspace

F = TypeVar("F", bound=Callable[..., object])


def repo_option(fn: F) -> F:
    """Add the --repo option (defaults to the repository containing cwd)."""
    return click.option(
        "--repo",
        "repo",
        type=click.Path(file_okay=False),
        default=None,
        help="Repository root. Defaults to the repository containing the current directory.",
    )(fn)


def resolve_repo(ctx: RestackContext, repo: str | None) -> str:
    """The explicit --repo, else the discovered root, else cwd itself."""
    if repo is not None:
        return str(Path(repo))
    root = discover_repo_root(ctx.cwd)
    if root is None:
        return str(ctx.cwd)
    return str(root)


def workspace_for_cwd(ctx: RestackContext, repo_path: str) -> Workspace | None:
    """The registered workspace containing the current directory, if any."""
    owner = find_owner(str(ctx.cwd), watched_paths_for_repo(ctx.workspace_store, repo_path))
    if owner is None or owner.workspace_id is None:
        return None
    return ctx.workspace_store.get_workspace(repo_path, owner.workspace_id)
