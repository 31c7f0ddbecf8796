"""Recursive filesystem watch sessions.

A session watches a set of directory trees and delivers debounced batches of
absolute file paths to a callback. The watchdog-backed implementation is
used in production; tests inject a fake.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from restack.core.watch.debounce import EventDebouncer

logger = logging.getLogger(__name__)

BatchCallback = Callable[[list[str]], None]


class WatchSession(ABC):
    """Handle to a running watch."""

    @abstractmethod
    def stop(self) -> None:
        """Stop delivering events. Idempotent."""
        ...


class FileWatcher(ABC):
    """Opens debounced recursive watch sessions."""

    @abstractmethod
    def watch(
        self, roots: list[str], debounce_seconds: float, on_batch: BatchCallback
    ) -> WatchSession:
        """Start watching roots recursively.

        Args:
            roots: Absolute directory paths
            debounce_seconds: Quiet interval before a batch is delivered
            on_batch: Receives each coalesced batch of absolute file paths
        """
        ...


class _ForwardingHandler(FileSystemEventHandler):
    """Forwards file (not directory) event paths to the debouncer."""

    def __init__(self, debouncer: EventDebouncer) -> None:
        super().__init__()
        self._debouncer = debouncer

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._debouncer.add(_as_str(event.src_path))
        dest_path = getattr(event, "dest_path", "")
        if dest_path:
            self._debouncer.add(_as_str(dest_path))


class WatchdogSession(WatchSession):
    def __init__(self, observer: BaseObserver, debouncer: EventDebouncer) -> None:
        self._observer = observer
        self._debouncer = debouncer
        self._stopped = False

    def stop(self) -> None:
        if self._stopped:
            return
        self._stopped = True
        self._observer.stop()
        self._observer.join()
        self._debouncer.close()


class WatchdogFileWatcher(FileWatcher):
    """Production watcher backed by a watchdog Observer."""

    def watch(
        self, roots: list[str], debounce_seconds: float, on_batch: BatchCallback
    ) -> WatchSession:
        debouncer = EventDebouncer(debounce_seconds, on_batch)
        handler = _ForwardingHandler(debouncer)
        observer = Observer()
        for root in roots:
            if not Path(root).is_dir():
                logger.warning("Not watching missing directory %s", root)
                continue
            observer.schedule(handler, root, recursive=True)
        observer.daemon = True
        observer.start()
        logger.debug("Watching %d root(s) with %.1fs debounce", len(roots), debounce_seconds)
        return WatchdogSession(observer, debouncer)


def _as_str(path: str | bytes) -> str:
    if isinstance(path, bytes):
        return path.decode()
    return path
