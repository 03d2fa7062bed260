"""Transient on-screen notifications.

A NotificationPresenter owns one fixed-position container, created the first
time something is shown. Each notification schedules its own removal: it stays
visible for the configured lifetime, loses its ``show`` class, and is detached
from the container after the fade delay. Notifications never share timers.
"""

import asyncio
import itertools
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from contactflow.types import Severity

logger = logging.getLogger(__name__)

CONTAINER_ID = "notification-container"
DEFAULT_LIFETIME_MS = 5000
DEFAULT_FADE_MS = 150

_ids = itertools.count(1)


@dataclass
class Notification:
    """A single alert in the notification container.

    Attributes:
        message: Text shown to the user
        severity: Alert severity
        visible: False once the fade-out has started
        attached: False once removed from the container
    """
    message: str
    severity: Severity = Severity.INFO
    visible: bool = True
    attached: bool = True
    notification_id: int = field(default_factory=lambda: next(_ids))

    @property
    def css_class(self) -> str:
        classes = f"alert alert-{self.severity.value} alert-dismissible fade"
        return f"{classes} show" if self.visible else classes


@dataclass
class NotificationContainer:
    """The fixed region notifications are stacked into, in insertion order."""
    element_id: str = CONTAINER_ID
    css_class: str = "position-fixed top-0 end-0 p-3"
    children: List[Notification] = field(default_factory=list)

    def append(self, notification: Notification) -> None:
        self.children.append(notification)

    def remove(self, notification: Notification) -> None:
        if notification in self.children:
            self.children.remove(notification)


class NotificationPresenter:
    """Shows auto-dismissing notifications.

    Must be used from inside a running event loop; removal is driven by
    ``loop.call_later``.
    """

    def __init__(
        self,
        lifetime_ms: float = DEFAULT_LIFETIME_MS,
        fade_ms: float = DEFAULT_FADE_MS,
    ) -> None:
        self.lifetime_ms = lifetime_ms
        self.fade_ms = fade_ms
        self.container: Optional[NotificationContainer] = None
        self._timers: Dict[int, asyncio.TimerHandle] = {}

    @property
    def notifications(self) -> List[Notification]:
        """Notifications currently attached, oldest first."""
        if self.container is None:
            return []
        return list(self.container.children)

    def _ensure_container(self) -> NotificationContainer:
        if self.container is None:
            self.container = NotificationContainer()
        return self.container

    def show(self, message: str, severity: Severity = Severity.INFO) -> Notification:
        """Append a notification and schedule its removal."""
        if isinstance(severity, str):
            severity = Severity(severity)
        notification = Notification(message=message, severity=severity)
        self._ensure_container().append(notification)
        logger.debug("Notification %s shown: %s", severity.value, message)

        loop = asyncio.get_running_loop()
        self._timers[notification.notification_id] = loop.call_later(
            self.lifetime_ms / 1000, self._hide, notification
        )
        return notification

    def _hide(self, notification: Notification) -> None:
        notification.visible = False
        loop = asyncio.get_running_loop()
        self._timers[notification.notification_id] = loop.call_later(
            self.fade_ms / 1000, self._detach, notification
        )

    def _detach(self, notification: Notification) -> None:
        self._timers.pop(notification.notification_id, None)
        notification.attached = False
        if self.container is not None:
            self.container.remove(notification)

    def dismiss(self, notification: Notification) -> None:
        """Remove a notification immediately, as its close button does."""
        handle = self._timers.pop(notification.notification_id, None)
        if handle is not None:
            handle.cancel()
        notification.visible = False
        self._detach(notification)

    def close(self) -> None:
        """Cancel every pending removal timer (document teardown)."""
        for handle in self._timers.values():
            handle.cancel()
        self._timers.clear()


__all__ = [
    "CONTAINER_ID",
    "Notification",
    "NotificationContainer",
    "NotificationPresenter",
]
