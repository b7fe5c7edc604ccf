"""CanvasState: the authoritative model of placed tables and connections.

Placed tables are exposed to QML as list-model rows; connections are a
plain list property. Every mutation is a single discrete step so
observers never see a table removed while its connections survive.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from PySide6.QtCore import (
    Property,
    QAbstractListModel,
    QModelIndex,
    Qt,
    Signal,
    Slot,
)

from .errors import DuplicatePlacement
from .settings import CanvasSettings
from .types import ColumnRef, Connection, NodeTemplate, PlacedNode, Point, Size

logger = logging.getLogger(__name__)


class CanvasState(QAbstractListModel):
    """Qt model exposing placed tables and their connections."""

    IdRole = Qt.UserRole + 1
    NameRole = Qt.UserRole + 2
    XRole = Qt.UserRole + 3
    YRole = Qt.UserRole + 4
    WidthRole = Qt.UserRole + 5
    HeightRole = Qt.UserRole + 6
    ColumnsRole = Qt.UserRole + 7

    nodesChanged = Signal()
    connectionsChanged = Signal()
    nodeGeometryChanged = Signal(str)

    def __init__(self, settings: Optional[CanvasSettings] = None, parent=None):
        super().__init__(parent)
        self._settings = settings or CanvasSettings()
        self._nodes: List[PlacedNode] = []
        self._connections: List[Connection] = []

    @property
    def settings(self) -> CanvasSettings:
        return self._settings

    # --- Qt model overrides -------------------------------------------------
    def rowCount(self, parent: QModelIndex | None = QModelIndex()) -> int:  # type: ignore[override]
        return len(self._nodes)

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole):  # type: ignore[override]
        if not index.isValid() or not (0 <= index.row() < len(self._nodes)):
            return None

        node = self._nodes[index.row()]
        if role == self.IdRole:
            return node.id
        if role in (self.NameRole, Qt.DisplayRole):
            return node.name
        if role == self.XRole:
            return node.position.x
        if role == self.YRole:
            return node.position.y
        if role == self.WidthRole:
            return node.size.width
        if role == self.HeightRole:
            return node.size.height
        if role == self.ColumnsRole:
            return [
                {"columnId": column.column_id, "name": column.name, "dataType": column.data_type}
                for column in node.columns
            ]
        return None

    def roleNames(self) -> Dict[int, bytes]:  # type: ignore[override]
        return {
            self.IdRole: b"nodeId",
            self.NameRole: b"name",
            self.XRole: b"x",
            self.YRole: b"y",
            self.WidthRole: b"width",
            self.HeightRole: b"height",
            self.ColumnsRole: b"columns",
        }

    # --- Properties exposed to QML -----------------------------------------
    @Property(list, notify=connectionsChanged)
    def connectionList(self) -> List[Dict[str, str]]:
        return [
            {
                "id": connection.id,
                "sourceNodeId": connection.source_node_id,
                "sourceColumnId": connection.source_column_id,
                "targetNodeId": connection.target_node_id,
                "targetColumnId": connection.target_column_id,
            }
            for connection in self._connections
        ]

    @Property(int, notify=nodesChanged)
    def count(self) -> int:
        return len(self._nodes)

    # --- Queries ------------------------------------------------------------
    def nodes(self) -> List[PlacedNode]:
        return list(self._nodes)

    def connections(self) -> List[Connection]:
        return list(self._connections)

    def getNode(self, node_id: str) -> Optional[PlacedNode]:
        for node in self._nodes:
            if node.id == node_id:
                return node
        return None

    def hasNode(self, node_id: str) -> bool:
        return self.getNode(node_id) is not None

    def _row_of(self, node_id: str) -> int:
        for row, node in enumerate(self._nodes):
            if node.id == node_id:
                return row
        return -1

    @Slot(float, float, result=str)
    def nodeIdAt(self, x: float, y: float) -> str:
        """Return the topmost table under a canvas-space point, or ''."""
        for node in reversed(self._nodes):
            if node.contains(x, y):
                return node.id
        return ""

    # --- Mutations ----------------------------------------------------------
    def placeNode(self, template: NodeTemplate, position: Point) -> PlacedNode:
        """Insert a table for ``template`` at ``position`` (canvas-space).

        Raises:
            DuplicatePlacement: if a table with the same id is already placed.
        """
        if self.hasNode(template.id):
            raise DuplicatePlacement(template.id, template.name)

        node = PlacedNode(
            template=template,
            position=position,
            size=Size(self._settings.default_width, self._settings.default_height),
        )
        row = len(self._nodes)
        self.beginInsertRows(QModelIndex(), row, row)
        self._nodes.append(node)
        self.endInsertRows()
        logger.debug("Placed %s at (%s, %s)", node.id, position.x, position.y)
        self.nodesChanged.emit()
        return node

    def moveNode(self, node_id: str, position: Point) -> None:
        row = self._row_of(node_id)
        if row < 0:
            return
        node = self._nodes[row]
        if node.position == position:
            return
        node.position = position
        index = self.index(row, 0)
        self.dataChanged.emit(index, index, [self.XRole, self.YRole])
        self.nodeGeometryChanged.emit(node_id)

    def clampSize(self, size: Size) -> Size:
        return Size(
            max(self._settings.min_width, size.width),
            max(self._settings.min_height, size.height),
        )

    def resizeNode(self, node_id: str, size: Size) -> None:
        row = self._row_of(node_id)
        if row < 0:
            return
        node = self._nodes[row]
        clamped = self.clampSize(size)
        if node.size == clamped:
            return
        node.size = clamped
        index = self.index(row, 0)
        self.dataChanged.emit(index, index, [self.WidthRole, self.HeightRole])
        self.nodeGeometryChanged.emit(node_id)

    @Slot(str, result=bool)
    def removeNode(self, node_id: str) -> bool:
        """Remove a table together with every connection touching it."""
        row = self._row_of(node_id)
        if row < 0:
            return False

        remaining = [c for c in self._connections if not c.touches(node_id)]
        dropped = len(self._connections) - len(remaining)
        self.beginRemoveRows(QModelIndex(), row, row)
        self._nodes.pop(row)
        self._connections = remaining
        self.endRemoveRows()
        logger.debug("Removed %s and %d connection(s)", node_id, dropped)

        self.nodesChanged.emit()
        if dropped:
            self.connectionsChanged.emit()
        return True

    def addConnection(self, source: ColumnRef, target: ColumnRef) -> Optional[str]:
        """Connect two columns, returning the new connection id.

        Self-loops and duplicates are rejected silently with ``None``.
        """
        if source.node_id == target.node_id:
            return None
        connection = Connection.between(source, target)
        # ids are hyphen-joined, so distinct endpoints can still share one
        if any(existing.id == connection.id for existing in self._connections):
            return None
        self._connections.append(connection)
        logger.debug("Connected %s", connection.id)
        self.connectionsChanged.emit()
        return connection.id

    @Slot(str, result=bool)
    def removeConnection(self, connection_id: str) -> bool:
        for idx, connection in enumerate(self._connections):
            if connection.id == connection_id:
                self._connections.pop(idx)
                logger.debug("Disconnected %s", connection_id)
                self.connectionsChanged.emit()
                return True
        return False

    @Slot()
    def clear(self) -> None:
        if not self._nodes and not self._connections:
            return
        self.beginResetModel()
        self._nodes.clear()
        self._connections.clear()
        self.endResetModel()
        self.nodesChanged.emit()
        self.connectionsChanged.emit()

    @Slot(str, result="QVariant")
    def getNodeSnapshot(self, node_id: str) -> Dict[str, Any]:
        node = self.getNode(node_id)
        if node is None:
            return {}
        return {
            "id": node.id,
            "name": node.name,
            "x": node.position.x,
            "y": node.position.y,
            "width": node.size.width,
            "height": node.size.height,
        }
