"""Fake FileWatcher that lets tests deliver event batches by hand.

No filesystem observer is started. Each watch() call is recorded together
with its callback; deliver() invokes that callback as the debouncer would
after its quiet period.
"""

from dataclasses import dataclass

from restack.core.watch.watcher import BatchCallback, FileWatcher, WatchSession


class FakeWatchSession(WatchSession):
    def __init__(self) -> None:
        self._stop_count = 0

    @property
    def stopped(self) -> bool:
        return self._stop_count > 0

    @property
    def stop_count(self) -> int:
        return self._stop_count

    def stop(self) -> None:
        self._stop_count += 1


@dataclass(frozen=True)
class WatchCall:
    roots: tuple[str, ...]
    debounce_seconds: float
    on_batch: BatchCallback
    session: FakeWatchSession


class FakeFileWatcher(FileWatcher):
    """In-memory fake implementation of FileWatcher.

    This class has NO public setup methods. Calls are captured during
    execution and exposed through ``watch_calls``.
    """

    def __init__(self) -> None:
        self._watch_calls: list[WatchCall] = []

    @property
    def watch_calls(self) -> list[WatchCall]:
        return list(self._watch_calls)

    def watch(
        self, roots: list[str], debounce_seconds: float, on_batch: BatchCallback
    ) -> WatchSession:
        session = FakeWatchSession()
        self._watch_calls.append(
            WatchCall(
                roots=tuple(roots),
                debounce_seconds=debounce_seconds,
                on_batch=on_batch,
                session=session,
            )
        )
        return session

    def deliver(self, paths: list[str], *, index: int = -1) -> None:
        """Hand a debounced batch to the callback of watch call ``index``."""
        self._watch_calls[index].on_batch(list(paths))
