"""Change notifications emitted after every cache sync."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeNotification:
    """A workspace's cached change set was refreshed.

    workspace_id None denotes the repository root.
    """

    workspace_path: str
    workspace_id: int | None


class ChangeNotifier(ABC):
    """Receives a notification each time a snapshot is written."""

    @abstractmethod
    def notify(self, notification: ChangeNotification) -> None: ...


class LoggingChangeNotifier(ChangeNotifier):
    def notify(self, notification: ChangeNotification) -> None:
        logger.info("Changes refreshed for %s", notification.workspace_path)


class CallbackChangeNotifier(ChangeNotifier):
    """Forwards each notification to a callable."""

    def __init__(self, callback: Callable[[ChangeNotification], None]) -> None:
        self._callback = callback

    def notify(self, notification: ChangeNotification) -> None:
        self._callback(notification)
