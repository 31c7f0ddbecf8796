"""Rendering of core result values for the terminal."""

import click
from rich.table import Table

from restack.cli.output import print_table, user_output
from restack.core.rebase.types import BatchResult, RebaseResult
from restack.core.workspace_info import WorkspaceInfo
from restack.core.workspace_store.types import NEVER_SYNCED, Workspace


def status_label(result: RebaseResult) -> str:
    if not result.success:
        return click.style("failed", fg="red")
    if result.has_conflicts:
        return click.style("conflicts", fg="yellow")
    return click.style("rebased", fg="green")


def render_rebase_result(label: str, result: RebaseResult) -> None:
    user_output(f"{label}: {status_label(result)}")
    for path in result.conflicted_files:
        user_output(f"  C {path}")
    if not result.success and result.message:
        for line in result.message.splitlines():
            user_output(f"  {line}")


def render_batch(batch: BatchResult) -> None:
    user_output(
        click.style(batch.target_branch, fg="cyan", bold=True)
        + f" @ {batch.target_commit} "
        + f"({len(batch.rebased_branches)}/{len(batch.outcomes)} rebased)"
    )
    for outcome in batch.outcomes:
        render_rebase_result(f"  {outcome.workspace_name} ({outcome.branch_name})", outcome.result)


def short_commit(commit_id: str | None) -> str:
    if commit_id is None or commit_id == NEVER_SYNCED:
        return "-"
    return commit_id[:12]


def render_workspaces(workspaces: list[Workspace]) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("id", style="cyan", no_wrap=True)
    table.add_column("name", no_wrap=True)
    table.add_column("branch", no_wrap=True)
    table.add_column("target", no_wrap=True)
    table.add_column("synced", no_wrap=True)
    table.add_column("conflicts", no_wrap=True)

    for workspace in workspaces:
        table.add_row(
            str(workspace.id),
            workspace.workspace_name,
            workspace.branch_name,
            workspace.target_branch or "-",
            short_commit(workspace.last_rebased_commit),
            "yes" if workspace.has_conflicts else "no",
        )

    print_table(table)


def _or_unknown(value: object | None) -> str:
    return "unknown" if value is None else str(value)


def render_workspace_info(info: WorkspaceInfo) -> None:
    workspace = info.workspace
    table = Table(show_header=False, box=None)
    table.add_column("field", style="bold", no_wrap=True)
    table.add_column("value")

    table.add_row("workspace", f"{workspace.workspace_name} (#{workspace.id})")
    table.add_row("path", workspace.workspace_path)
    table.add_row("branch", workspace.branch_name)
    table.add_row("target", workspace.target_branch or "-")
    table.add_row("target commit", _or_unknown(info.target_commit))
    table.add_row("synced commit", short_commit(workspace.last_rebased_commit))
    table.add_row("up to date", "yes" if info.is_synced else "no")

    if info.changed_files is None:
        table.add_row("changed files", "unknown")
    else:
        table.add_row("changed files", str(len(info.changed_files)))

    if info.change_stats is None:
        table.add_row("lines", "unknown")
    else:
        stats = info.change_stats
        table.add_row("lines", f"+{stats.lines_added} -{stats.lines_deleted}")

    if info.conflicted_files is None:
        table.add_row("conflicts", "unknown")
    elif info.conflicted_files:
        table.add_row("conflicts", "\n".join(info.conflicted_files))
    else:
        table.add_row("conflicts", "none")

    print_table(table)
