"""Fake Time implementation for testing.

FakeTime returns a fixed instant and tracks sleep() calls without sleeping.
"""

from datetime import UTC, datetime

from restack.core.time.abc import Time

DEFAULT_FAKE_NOW = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)


class FakeTime(Time):
    """In-memory fake that never advances unless told to.

    This class has NO public setup methods. All state is provided via constructor
    or captured during execution.
    """

    def __init__(
        self,
        now: datetime = DEFAULT_FAKE_NOW,
        *,
        sleep_raises: BaseException | None = None,
    ) -> None:
        """Create FakeTime.

        Args:
            now: Instant returned by now()
            sleep_raises: Raised by sleep() after recording the call, e.g.
                KeyboardInterrupt to end a blocking loop
        """
        self._now = now
        self._sleep_raises = sleep_raises
        self._sleep_calls: list[float] = []

    @property
    def sleep_calls(self) -> list[float]:
        """Seconds values passed to sleep(), for test assertions only."""
        return self._sleep_calls

    def now(self) -> datetime:
        return self._now

    def sleep(self, seconds: float) -> None:
        self._sleep_calls.append(seconds)
        if self._sleep_raises is not None:
            raise self._sleep_raises
