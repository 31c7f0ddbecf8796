"""Abstract interface for detached background work."""

from abc import ABC, abstractmethod
from collections.abc import Callable


class Background(ABC):
    """Runs fire-and-forget tasks.

    The caller gets no handle and never sees the task's outcome. Implementations
    must log, not propagate, anything the task raises.
    """

    @abstractmethod
    def spawn(self, fn: Callable[[], object], *, name: str) -> None:
        """Schedule fn to run detached from the caller.

        Args:
            fn: Zero-argument callable
            name: Short task label used in logs
        """
        ...
