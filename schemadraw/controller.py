"""InteractionController: turns pointer gestures into canvas mutations.

The controller owns one ``GestureState``. A gesture starts only from the
idle state, so placing, moving, resizing and connecting can never overlap.
Move and resize hold a ``PointerSubscription`` for exactly as long as the
gesture lasts; every way out of a gesture goes through ``_end_gesture``,
which releases it.

All pointer coordinates handed to the controller are client-space. They are
converted with ``client - surfaceOrigin + scrollOffset`` before anything is
stored, which keeps stored positions independent of scrolling.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from PySide6.QtCore import Property, QMimeData, QObject, Signal, Slot

from .canvas import CanvasState
from .errors import DuplicatePlacement, MalformedDragPayload
from .feedback import FeedbackChannel
from .payload import decode_template, template_from_mime_data
from .types import ColumnRef, GestureKind, GestureState, NodeTemplate, NotificationKind, Point, Size

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "Could not read the dragged table"


class PointerSubscription:
    """Delivers pointer moves to one handler until released."""

    def __init__(self, on_move: Callable[[Point], None]):
        self._on_move = on_move
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def dispatch(self, client: Point) -> None:
        if self._active:
            self._on_move(client)

    def release(self) -> bool:
        """Detach the handler. Returns False if it was already released."""
        if not self._active:
            return False
        self._active = False
        return True


class InteractionController(QObject):
    """Interprets palette, grip, resize-handle and column gestures."""

    gestureChanged = Signal()
    hoverChanged = Signal()
    pointerCaptureChanged = Signal()
    surfaceChanged = Signal()

    def __init__(self, canvas: CanvasState, feedback: FeedbackChannel, parent=None):
        super().__init__(parent)
        self._canvas = canvas
        self._feedback = feedback
        self._gesture = GestureState.idle()
        self._subscription: Optional[PointerSubscription] = None
        self._hovered: Optional[ColumnRef] = None
        self._surface_origin = Point(0.0, 0.0)
        self._surface_size: Optional[Size] = None
        self._scroll_offset = Point(0.0, 0.0)

    # --- Gesture state ------------------------------------------------------
    @property
    def gesture(self) -> GestureState:
        return self._gesture

    @property
    def subscription(self) -> Optional[PointerSubscription]:
        return self._subscription

    @Property(str, notify=gestureChanged)
    def gestureKind(self) -> str:
        return self._gesture.kind.value

    @Property(bool, notify=gestureChanged)
    def isBusy(self) -> bool:
        return not self._gesture.is_idle

    @Property(bool, notify=pointerCaptureChanged)
    def pointerCaptured(self) -> bool:
        return self._subscription is not None

    @Property(str, notify=gestureChanged)
    def activeNodeId(self) -> str:
        return self._gesture.node_id

    @Property(str, notify=hoverChanged)
    def hoveredNodeId(self) -> str:
        return self._hovered.node_id if self._hovered else ""

    @Property(str, notify=hoverChanged)
    def hoveredColumnId(self) -> str:
        return self._hovered.column_id if self._hovered else ""

    @Property(str, notify=hoverChanged)
    def dropTargetKey(self) -> str:
        """``"nodeId/columnId"`` of the armed drop target, or ''."""
        if self._hovered is None:
            return ""
        if not self.isDropTarget(self._hovered.node_id, self._hovered.column_id):
            return ""
        return f"{self._hovered.node_id}/{self._hovered.column_id}"

    def _set_gesture(self, state: GestureState) -> None:
        if state == self._gesture:
            return
        logger.debug("Gesture %s -> %s", self._gesture.kind.value, state.kind.value)
        self._gesture = state
        self.gestureChanged.emit()

    def _acquire_pointer(self, on_move: Callable[[Point], None]) -> None:
        self._subscription = PointerSubscription(on_move)
        self.pointerCaptureChanged.emit()

    def _release_pointer(self) -> None:
        subscription = self._subscription
        if subscription is None:
            return
        self._subscription = None
        subscription.release()
        self.pointerCaptureChanged.emit()

    def _end_gesture(self) -> None:
        self._release_pointer()
        self._set_hover(None)
        self._set_gesture(GestureState.idle())

    @Slot()
    def cancelGesture(self) -> None:
        """Abandon whatever gesture is in flight without touching the canvas."""
        if not self._gesture.is_idle:
            logger.debug("Cancelled %s gesture", self._gesture.kind.value)
        self._end_gesture()

    # --- Coordinates --------------------------------------------------------
    @Slot(float, float, float, float)
    def setSurfaceGeometry(self, x: float, y: float, width: float, height: float) -> None:
        """Set the canvas viewport rectangle in client coordinates."""
        self._surface_origin = Point(x, y)
        self._surface_size = Size(width, height)
        self.surfaceChanged.emit()

    @Slot(float, float)
    def setScrollOffset(self, x: float, y: float) -> None:
        self._scroll_offset = Point(x, y)
        self.surfaceChanged.emit()

    def to_canvas(self, client_x: float, client_y: float) -> Point:
        return Point(client_x, client_y) - self._surface_origin + self._scroll_offset

    def is_over_surface(self, client_x: float, client_y: float) -> bool:
        if self._surface_size is None:
            return True
        local = Point(client_x, client_y) - self._surface_origin
        return 0 <= local.x <= self._surface_size.width and 0 <= local.y <= self._surface_size.height

    # --- Place --------------------------------------------------------------
    @Slot(str, result=bool)
    def beginPlace(self, payload: str) -> bool:
        """Start dragging a palette template."""
        if not self._gesture.is_idle:
            return False
        try:
            template = decode_template(payload)
        except MalformedDragPayload as exc:
            self._report_malformed(exc)
            return False
        self._set_gesture(GestureState.placing(template))
        return True

    @Slot(str, float, float, result=bool)
    def dropOnCanvas(self, payload: str, client_x: float, client_y: float) -> bool:
        """Finish a place gesture. Returns True if a table was placed."""
        if self._gesture.kind not in (GestureKind.NONE, GestureKind.PLACING):
            return False
        try:
            template = decode_template(payload)
        except MalformedDragPayload as exc:
            self._end_gesture()
            self._report_malformed(exc)
            return False
        return self._place(template, client_x, client_y)

    def dropMimeOnCanvas(self, mime_data: Optional[QMimeData], client_x: float, client_y: float) -> bool:
        if self._gesture.kind not in (GestureKind.NONE, GestureKind.PLACING):
            return False
        try:
            template = template_from_mime_data(mime_data)
        except MalformedDragPayload as exc:
            self._end_gesture()
            self._report_malformed(exc)
            return False
        return self._place(template, client_x, client_y)

    def _place(self, template: NodeTemplate, client_x: float, client_y: float) -> bool:
        self._end_gesture()
        if not self.is_over_surface(client_x, client_y):
            logger.debug("Dropped %s outside the canvas", template.id)
            return False
        try:
            self._canvas.placeNode(template, self.to_canvas(client_x, client_y))
        except DuplicatePlacement as exc:
            logger.info("Rejected duplicate placement of %s", exc.node_id)
            self._feedback.notify(NotificationKind.DUPLICATE_PLACEMENT, str(exc))
            return False
        return True

    def _report_malformed(self, exc: MalformedDragPayload) -> None:
        logger.warning("Malformed drag payload: %s", exc)
        self._feedback.notify(NotificationKind.FAILURE, FAILURE_MESSAGE)

    # --- Move ---------------------------------------------------------------
    @Slot(str, result=bool)
    def beginMove(self, node_id: str) -> bool:
        """Start moving a table by its grip."""
        if not self._gesture.is_idle or self._subscription is not None:
            return False
        if not self._canvas.hasNode(node_id):
            return False
        self._set_gesture(GestureState.moving(node_id))
        self._acquire_pointer(self._move_to)
        return True

    def _move_to(self, client: Point) -> None:
        self._canvas.moveNode(self._gesture.node_id, self.to_canvas(client.x, client.y))

    # --- Resize -------------------------------------------------------------
    @Slot(str, float, float, result=bool)
    def beginResize(self, node_id: str, client_x: float, client_y: float) -> bool:
        """Start resizing a table from its handle."""
        if not self._gesture.is_idle or self._subscription is not None:
            return False
        node = self._canvas.getNode(node_id)
        if node is None:
            return False
        self._set_gesture(
            GestureState.resizing(node_id, self.to_canvas(client_x, client_y), node.size)
        )
        self._acquire_pointer(self._resize_to)
        return True

    def _resize_to(self, client: Point) -> None:
        gesture = self._gesture
        delta = self.to_canvas(client.x, client.y) - gesture.initial_pointer
        self._canvas.resizeNode(
            gesture.node_id,
            Size(gesture.initial_size.width + delta.x, gesture.initial_size.height + delta.y),
        )

    # --- Pointer stream for move/resize --------------------------------------
    @Slot(float, float)
    def pointerMove(self, client_x: float, client_y: float) -> None:
        if self._subscription is not None:
            self._subscription.dispatch(Point(client_x, client_y))

    @Slot()
    def pointerRelease(self) -> None:
        if self._gesture.is_spatial:
            self._end_gesture()

    # --- Connect ------------------------------------------------------------
    @Slot(str, str, result=bool)
    def beginConnect(self, node_id: str, column_id: str) -> bool:
        """Start dragging a column towards another table's column."""
        if not self._gesture.is_idle:
            return False
        node = self._canvas.getNode(node_id)
        if node is None or node.template.column_index(column_id) < 0:
            return False
        self._set_gesture(GestureState.connecting(ColumnRef(node_id, column_id)))
        return True

    def _set_hover(self, column: Optional[ColumnRef]) -> None:
        if column == self._hovered:
            return
        self._hovered = column
        self.hoverChanged.emit()

    @Slot(str, str)
    def hoverColumn(self, node_id: str, column_id: str) -> None:
        if self._gesture.kind is not GestureKind.CONNECTING:
            return
        self._set_hover(ColumnRef(node_id, column_id))

    @Slot()
    def leaveColumn(self) -> None:
        self._set_hover(None)

    @Slot(str, str, result=bool)
    def isDropTarget(self, node_id: str, column_id: str) -> bool:
        """True while a column from another table is dragged over this column."""
        if self._gesture.kind is not GestureKind.CONNECTING:
            return False
        if self._hovered != ColumnRef(node_id, column_id):
            return False
        return self._gesture.origin.node_id != node_id

    @Slot(str, str, result=bool)
    def dropOnColumn(self, node_id: str, column_id: str) -> bool:
        """Finish a connect gesture. Returns True if a connection was added."""
        if self._gesture.kind is not GestureKind.CONNECTING:
            return False
        origin = self._gesture.origin
        self._end_gesture()
        if origin.node_id == node_id:
            return False
        target = self._canvas.getNode(node_id)
        if target is None or target.template.column_index(column_id) < 0:
            return False
        connection_id = self._canvas.addConnection(origin, ColumnRef(node_id, column_id))
        if connection_id is None:
            return False
        self._feedback.notify(
            NotificationKind.CONNECTED,
            f"Connected {origin.node_id}.{origin.column_id} to {node_id}.{column_id}",
        )
        return True

    # --- Removal ------------------------------------------------------------
    @Slot(str, result=bool)
    def removeNode(self, node_id: str) -> bool:
        """Remove a table, abandoning any gesture that involves it."""
        if self._gesture.node_id == node_id:
            self._end_gesture()
        return self._canvas.removeNode(node_id)
