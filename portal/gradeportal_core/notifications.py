import logging
from typing import Optional

from .view import Notification, ViewContext

logger = logging.getLogger(__name__)

KINDS = ("success", "error")


class NotificationCenter:
    """Single alert slot: the latest notification replaces whatever is shown."""

    def __init__(self, view: ViewContext):
        self.view = view

    @property
    def current(self) -> Optional[Notification]:
        return self.view.notification

    def notify(self, message: str, kind: str = "success") -> Notification:
        if kind not in KINDS:
            raise ValueError(f"Unknown notification kind: {kind}")
        note = Notification(message=message, kind=kind)
        self.view.notification = note
        logger.debug(f"Notification [{kind}]: {message}")
        return note

    def success(self, message: str) -> Notification:
        return self.notify(message, "success")

    def error(self, message: str) -> Notification:
        return self.notify(message, "error")

    def dismiss(self):
        self.view.notification = None

    # Same effect as dismiss; used when a new submission starts
    clear = dismiss
