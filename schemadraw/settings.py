"""Tunable canvas and notification settings persisted with QSettings."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from PySide6.QtCore import QSettings

from .constants import (
    CONNECTED_DELAY_MS,
    DEFAULT_NODE_HEIGHT,
    DEFAULT_NODE_WIDTH,
    DUPLICATE_PLACEMENT_DELAY_MS,
    FAILURE_DELAY_MS,
    MIN_NODE_HEIGHT,
    MIN_NODE_WIDTH,
)
from .types import NotificationKind

logger = logging.getLogger(__name__)

ORGANIZATION = "SchemaDraw"
APPLICATION = "SchemaDraw"

_KEYS: Dict[str, str] = {
    "default_width": "canvas/defaultWidth",
    "default_height": "canvas/defaultHeight",
    "min_width": "canvas/minWidth",
    "min_height": "canvas/minHeight",
    "duplicate_delay_ms": "notifications/duplicateDelayMs",
    "connected_delay_ms": "notifications/connectedDelayMs",
    "failure_delay_ms": "notifications/failureDelayMs",
}


@dataclass
class CanvasSettings:
    """Sizes and notification delays used by the canvas core."""

    default_width: float = DEFAULT_NODE_WIDTH
    default_height: float = DEFAULT_NODE_HEIGHT
    min_width: float = MIN_NODE_WIDTH
    min_height: float = MIN_NODE_HEIGHT
    duplicate_delay_ms: int = DUPLICATE_PLACEMENT_DELAY_MS
    connected_delay_ms: int = CONNECTED_DELAY_MS
    failure_delay_ms: int = FAILURE_DELAY_MS

    def delay_for(self, kind: NotificationKind) -> int:
        """Return the auto-clear delay in milliseconds for a notification kind."""
        if kind is NotificationKind.DUPLICATE_PLACEMENT:
            return self.duplicate_delay_ms
        if kind is NotificationKind.CONNECTED:
            return self.connected_delay_ms
        return self.failure_delay_ms

    @classmethod
    def load(cls, qsettings: Optional[QSettings] = None) -> "CanvasSettings":
        """Read overrides from QSettings, keeping defaults for anything invalid."""
        if qsettings is None:
            qsettings = QSettings(ORGANIZATION, APPLICATION)
        defaults = cls()
        values: Dict[str, Any] = {}
        for field in fields(cls):
            default = getattr(defaults, field.name)
            stored = qsettings.value(_KEYS[field.name])
            if stored is None or stored == "":
                values[field.name] = default
                continue
            # QSettings returns strings for INI-backed values
            try:
                value = type(default)(float(stored))
            except (TypeError, ValueError, OverflowError):
                logger.warning("Ignoring invalid setting %s=%r", _KEYS[field.name], stored)
                value = default
            if not math.isfinite(value):
                logger.warning("Ignoring non-finite setting %s=%r", _KEYS[field.name], stored)
                value = default
            elif value <= 0:
                logger.warning("Ignoring non-positive setting %s=%r", _KEYS[field.name], stored)
                value = default
            values[field.name] = value
        return cls(**values)

    def save(self, qsettings: Optional[QSettings] = None) -> None:
        if qsettings is None:
            qsettings = QSettings(ORGANIZATION, APPLICATION)
        for field in fields(self):
            qsettings.setValue(_KEYS[field.name], getattr(self, field.name))
        qsettings.sync()
