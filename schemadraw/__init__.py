"""SchemaDraw entity-relationship canvas built with PySide6 and QML.

The core keeps pointer gestures, stored coordinates and connection
geometry consistent while tables are dragged around the canvas.
"""

from .canvas import CanvasState
from .constants import SAMPLE_TEMPLATES, TEMPLATE_MIME_TYPE
from .controller import InteractionController, PointerSubscription
from .errors import DuplicatePlacement, MalformedDragPayload, SchemaDrawError
from .feedback import FeedbackChannel
from .palette import PaletteModel
from .payload import decode_template, encode_template
from .routing import ConnectionRouter, column_anchor_offset, route_connection
from .settings import CanvasSettings
from .types import (
    ColumnRef,
    ColumnSpec,
    Connection,
    CurveGeometry,
    GestureKind,
    GestureState,
    NodeTemplate,
    Notification,
    NotificationKind,
    PlacedNode,
    Point,
    Size,
)
from .ui import create_schemadraw_window, main

__all__ = [
    "CanvasSettings",
    "CanvasState",
    "ColumnRef",
    "ColumnSpec",
    "Connection",
    "ConnectionRouter",
    "CurveGeometry",
    "DuplicatePlacement",
    "FeedbackChannel",
    "GestureKind",
    "GestureState",
    "InteractionController",
    "MalformedDragPayload",
    "NodeTemplate",
    "Notification",
    "NotificationKind",
    "PaletteModel",
    "PlacedNode",
    "Point",
    "PointerSubscription",
    "SAMPLE_TEMPLATES",
    "SchemaDrawError",
    "Size",
    "TEMPLATE_MIME_TYPE",
    "column_anchor_offset",
    "create_schemadraw_window",
    "decode_template",
    "encode_template",
    "main",
    "route_connection",
]
