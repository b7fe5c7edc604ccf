"""FeedbackChannel: a single transient, auto-clearing notification."""

from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import Property, QObject, QTimer, Signal, Slot

from .settings import CanvasSettings
from .types import Notification, NotificationKind

logger = logging.getLogger(__name__)


class FeedbackChannel(QObject):
    """Holds the current message; a newer message always replaces the old one.

    The clear timer belongs to the channel and is restarted for every new
    message, so a stale timeout can never erase a newer notification.
    """

    notificationChanged = Signal()

    def __init__(self, settings: Optional[CanvasSettings] = None, parent=None):
        super().__init__(parent)
        self._settings = settings or CanvasSettings()
        self._current = Notification()
        self._clear_timer = QTimer(self)
        self._clear_timer.setSingleShot(True)
        self._clear_timer.timeout.connect(self.clear)

    @property
    def current(self) -> Notification:
        return self._current

    @property
    def clear_pending(self) -> bool:
        return self._clear_timer.isActive()

    @Property(str, notify=notificationChanged)
    def message(self) -> str:
        return self._current.text

    @Property(str, notify=notificationChanged)
    def kind(self) -> str:
        return self._current.kind.value

    @Property(bool, notify=notificationChanged)
    def visible(self) -> bool:
        return not self._current.is_empty

    def notify(self, kind: NotificationKind, text: str) -> None:
        if kind is NotificationKind.NONE:
            self.clear()
            return
        self._clear_timer.stop()
        self._current = Notification(kind, text)
        logger.info("Notification (%s): %s", kind.value, text)
        self.notificationChanged.emit()
        self._clear_timer.start(self._settings.delay_for(kind))

    @Slot()
    def clear(self) -> None:
        self._clear_timer.stop()
        if self._current.is_empty:
            return
        self._current = Notification()
        self.notificationChanged.emit()
