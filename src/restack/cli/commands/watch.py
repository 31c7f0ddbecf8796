import logging
from dataclasses import replace

import click

from restack.cli.output import user_output
from restack.cli.repo import repo_option, resolve_repo
from restack.core.context import RestackContext, build_coordinator
from restack.core.notifier import CallbackChangeNotifier, ChangeNotification
from restack.core.watch.coordinator import watched_paths_for_repo

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 1.0


@click.command("watch")
@repo_option
@click.pass_obj
def watch_cmd(ctx: RestackContext, repo: str | None) -> None:
    """Keep change caches in sync with the filesystem until interrupted.

    Every workspace and the repository root are rescanned once at startup.
    """
    repo_path = resolve_repo(ctx, repo)

    def echo(notification: ChangeNotification) -> None:
        user_output(f"Updated {notification.workspace_path}")
        ctx.notifier.notify(notification)

    coordinator = build_coordinator(replace(ctx, notifier=CallbackChangeNotifier(echo)))
    watched = watched_paths_for_repo(ctx.workspace_store, repo_path)

    for root in watched:
        coordinator.trigger_rescan(repo_path, root.workspace_id)

    coordinator.start_watching(repo_path, watched)
    user_output(f"Watching {len(watched)} path(s) under {repo_path}. Press Ctrl+C to stop.")
    try:
        while True:
            ctx.time.sleep(POLL_INTERVAL_SECONDS)
    except KeyboardInterrupt:
        logger.debug("Interrupted; stopping watch")
    finally:
        coordinator.stop_all()
    user_output("Stopped watching.")
