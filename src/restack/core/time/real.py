"""Real time implementation using the system clock."""

import time
from datetime import UTC, datetime

from restack.core.time.abc import Time


class RealTime(Time):
    """Production implementation backed by datetime.now() and time.sleep()."""

    def now(self) -> datetime:
        return datetime.now(UTC)

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)
