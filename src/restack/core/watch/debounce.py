"""Debounced path queue feeding the rescan pipeline."""

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class EventDebouncer:
    """Collects paths and flushes them as one batch after a quiet interval.

    Every add() restarts the timer, so a burst of writes produces a single
    callback once the burst has been quiet for delay_seconds. Callbacks never
    overlap: paths arriving while a batch is being processed are queued and
    drained by the busy worker or by the next timer flush.
    """

    def __init__(self, delay_seconds: float, process_cb: Callable[[list[str]], None]) -> None:
        self._delay = delay_seconds
        self._process_cb = process_cb
        self._lock = threading.Lock()
        self._processing_lock = threading.Lock()
        self._paths: set[str] = set()
        self._pending: set[str] = set()
        self._timer: threading.Timer | None = None
        self._closed = False

    def add(self, path: str) -> None:
        with self._lock:
            if self._closed:
                return
            self._paths.add(path)
            if self._timer is not None:
                self._timer.cancel()
            self._timer = self._start_timer()

    def flush(self) -> None:
        """Process everything queued so far on the calling thread."""
        with self._lock:
            paths = sorted(self._paths | self._pending)
            self._paths.clear()
            self._pending.clear()
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

        if not paths:
            return

        if not self._processing_lock.acquire(blocking=False):
            with self._lock:
                self._pending.update(paths)
                if self._timer is None and not self._closed:
                    self._timer = self._start_timer()
            return

        try:
            batch = paths
            while True:
                try:
                    self._process_cb(batch)
                except Exception:
                    logger.exception("Processing a batch of %d path(s) failed", len(batch))
                with self._lock:
                    if not self._pending:
                        break
                    batch = sorted(self._pending)
                    self._pending.clear()
        finally:
            self._processing_lock.release()

    def close(self) -> None:
        """Cancel any scheduled flush and ignore further paths."""
        with self._lock:
            self._closed = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._paths.clear()
            self._pending.clear()

    def _start_timer(self) -> threading.Timer:
        timer = threading.Timer(self._delay, self.flush)
        timer.daemon = True
        timer.start()
        return timer
