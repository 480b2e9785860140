import logging
from typing import List, Literal, Protocol

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class Notification(BaseModel):
    level: Literal["success", "error"]
    message: str


class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    @property
    def has_errors(self) -> bool: ...


class CollectingNotifier:
    """Collects user-facing messages for one request and logs them."""

    def __init__(self):
        self.notifications: List[Notification] = []

    def success(self, message: str) -> None:
        logger.info(message)
        self.notifications.append(Notification(level="success", message=message))

    def error(self, message: str) -> None:
        logger.warning(message)
        self.notifications.append(Notification(level="error", message=message))

    @property
    def has_errors(self) -> bool:
        return any(n.level == "error" for n in self.notifications)
