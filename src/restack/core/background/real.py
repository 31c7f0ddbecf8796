"""Thread-backed implementation of Background."""

import logging
import threading
from collections.abc import Callable

from restack.core.background.abc import Background

logger = logging.getLogger(__name__)


class ThreadBackground(Background):
    """Starts one non-daemon thread per task.

    spawn() returns immediately. The interpreter joins outstanding tasks at
    shutdown, so a CLI command can print its result and exit while a spawned
    rebase still runs to completion.
    """

    def spawn(self, fn: Callable[[], object], *, name: str) -> None:
        thread = threading.Thread(target=_run_logged, args=(fn, name), name=name, daemon=False)
        thread.start()


def _run_logged(fn: Callable[[], object], name: str) -> None:
    try:
        fn()
    except Exception:
        logger.exception("Background task '%s' failed", name)
