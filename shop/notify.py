import logging
import os
from typing import List

from .logger import get_logger
from .models import Notification, Severity

logger = get_logger(__name__)

NOTIFICATIONS_ENABLED = os.getenv("NOTIFICATIONS_ENABLED", "true").lower() == "true"

_LEVELS = {
    Severity.SUCCESS: logging.INFO,
    Severity.INFO: logging.INFO,
    Severity.ERROR: logging.WARNING,
}


class Notifier:
    """
    Collects user-facing messages for the render adapter.

    Messages are always logged; they are only queued for display when
    notifications are enabled.
    """

    def __init__(self, enabled: bool = NOTIFICATIONS_ENABLED):
        self.enabled = enabled
        self._pending: List[Notification] = []

    def notify(self, message: str, severity: Severity = Severity.SUCCESS) -> None:
        severity = Severity(severity)
        logger.log(_LEVELS[severity], "[%s] %s", severity.value, message)
        if self.enabled:
            self._pending.append(Notification(severity=severity, message=message))

    def success(self, message: str) -> None:
        self.notify(message, Severity.SUCCESS)

    def info(self, message: str) -> None:
        self.notify(message, Severity.INFO)

    def error(self, message: str) -> None:
        self.notify(message, Severity.ERROR)

    @property
    def pending(self) -> List[Notification]:
        return list(self._pending)

    def drain(self) -> List[Notification]:
        out, self._pending = self._pending, []
        return out
