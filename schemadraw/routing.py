"""Connection routing: render geometry for every connection.

A connection leaves the right edge of its source table at the row of the
source column and enters the left edge of the target table at the row of
the target column, drawn as a cubic curve.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from PySide6.QtCore import Property, QObject, Signal, Slot

from .canvas import CanvasState
from .constants import COLUMN_HEIGHT, CONTROL_POINT_FAR, CONTROL_POINT_NEAR, HEADER_HEIGHT
from .types import Connection, CurveGeometry, PlacedNode, Point

logger = logging.getLogger(__name__)


def column_anchor_offset(index: int) -> float:
    """Vertical offset of a column's anchor from the top of its table."""
    return HEADER_HEIGHT + COLUMN_HEIGHT * index + COLUMN_HEIGHT / 2


def route_connection(
    connection: Connection,
    nodes_by_id: Mapping[str, PlacedNode],
) -> Optional[CurveGeometry]:
    """Compute the curve for ``connection``, or None if an endpoint is gone."""
    source = nodes_by_id.get(connection.source_node_id)
    target = nodes_by_id.get(connection.target_node_id)
    if source is None or target is None:
        return None
    source_index = source.template.column_index(connection.source_column_id)
    target_index = target.template.column_index(connection.target_column_id)
    if source_index < 0 or target_index < 0:
        return None

    start = Point(
        source.position.x + source.size.width,
        source.position.y + column_anchor_offset(source_index),
    )
    end = Point(target.position.x, target.position.y + column_anchor_offset(target_index))
    dx = end.x - start.x
    return CurveGeometry(
        connection_id=connection.id,
        start=start,
        control1=Point(start.x + dx * CONTROL_POINT_NEAR, start.y),
        control2=Point(start.x + dx * CONTROL_POINT_FAR, end.y),
        end=end,
    )


def route_all(
    connections: List[Connection],
    nodes: List[PlacedNode],
) -> List[CurveGeometry]:
    nodes_by_id = {node.id: node for node in nodes}
    curves = []
    for connection in connections:
        curve = route_connection(connection, nodes_by_id)
        if curve is None:
            logger.debug("Skipping unresolved connection %s", connection.id)
            continue
        curves.append(curve)
    return curves


def _curve_to_dict(curve: CurveGeometry) -> Dict[str, Any]:
    return {
        "id": curve.connection_id,
        "startX": curve.start.x,
        "startY": curve.start.y,
        "control1X": curve.control1.x,
        "control1Y": curve.control1.y,
        "control2X": curve.control2.x,
        "control2Y": curve.control2.y,
        "endX": curve.end.x,
        "endY": curve.end.y,
        "path": curve.svg_path(),
    }


class ConnectionRouter(QObject):
    """Keeps connection curves in sync with the canvas layout."""

    curvesChanged = Signal()

    def __init__(self, canvas: CanvasState, parent=None):
        super().__init__(parent)
        self._canvas = canvas
        self._curves: List[CurveGeometry] = []
        canvas.nodesChanged.connect(self.recompute)
        canvas.connectionsChanged.connect(self.recompute)
        canvas.nodeGeometryChanged.connect(self._on_geometry_changed)
        canvas.modelReset.connect(self.recompute)
        self.recompute()

    def curves(self) -> List[CurveGeometry]:
        return list(self._curves)

    @Property(list, notify=curvesChanged)
    def curveList(self) -> List[Dict[str, Any]]:
        return [_curve_to_dict(curve) for curve in self._curves]

    @Slot()
    def recompute(self) -> None:
        self._curves = route_all(self._canvas.connections(), self._canvas.nodes())
        self.curvesChanged.emit()

    def _on_geometry_changed(self, node_id: str) -> None:
        if any(c.touches(node_id) for c in self._canvas.connections()):
            self.recompute()
