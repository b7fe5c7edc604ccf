"""Data types for SchemaDraw diagrams.

This module contains the core data structures shared by the canvas,
the interaction controller and the connection router.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


@dataclass(frozen=True)
class ColumnSpec:
    """A single column of a table template."""

    column_id: str
    name: str
    data_type: str = ""


@dataclass(frozen=True)
class NodeTemplate:
    """Read-only description of a table available for placement."""

    id: str
    name: str
    columns: Tuple[ColumnSpec, ...] = ()

    def column_index(self, column_id: str) -> int:
        for index, column in enumerate(self.columns):
            if column.column_id == column_id:
                return index
        return -1


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass
class PlacedNode:
    """A template instance positioned and sized on the canvas."""

    template: NodeTemplate
    position: Point
    size: Size

    @property
    def id(self) -> str:
        return self.template.id

    @property
    def name(self) -> str:
        return self.template.name

    @property
    def columns(self) -> Tuple[ColumnSpec, ...]:
        return self.template.columns

    def contains(self, x: float, y: float) -> bool:
        return (
            self.position.x <= x <= self.position.x + self.size.width
            and self.position.y <= y <= self.position.y + self.size.height
        )


@dataclass(frozen=True)
class ColumnRef:
    """A column addressed by the node it belongs to."""

    node_id: str
    column_id: str


@dataclass(frozen=True)
class Connection:
    """A directed relationship between columns of two placed nodes."""

    source_node_id: str
    source_column_id: str
    target_node_id: str
    target_column_id: str

    @classmethod
    def between(cls, source: ColumnRef, target: ColumnRef) -> "Connection":
        return cls(source.node_id, source.column_id, target.node_id, target.column_id)

    @property
    def id(self) -> str:
        return (
            f"{self.source_node_id}-{self.source_column_id}-"
            f"{self.target_node_id}-{self.target_column_id}"
        )

    @property
    def source(self) -> ColumnRef:
        return ColumnRef(self.source_node_id, self.source_column_id)

    @property
    def target(self) -> ColumnRef:
        return ColumnRef(self.target_node_id, self.target_column_id)

    def touches(self, node_id: str) -> bool:
        return self.source_node_id == node_id or self.target_node_id == node_id


class GestureKind(Enum):
    """The pointer interaction currently in flight."""

    NONE = "none"
    PLACING = "placing"
    MOVING = "moving"
    RESIZING = "resizing"
    CONNECTING = "connecting"


@dataclass(frozen=True)
class GestureState:
    """Exactly one in-flight gesture, or none.

    Only the fields belonging to ``kind`` are populated; use the
    constructors below rather than building instances by hand.
    """

    kind: GestureKind = GestureKind.NONE
    node_id: str = ""
    template: Optional[NodeTemplate] = None
    initial_pointer: Optional[Point] = None
    initial_size: Optional[Size] = None
    origin: Optional[ColumnRef] = None

    @classmethod
    def idle(cls) -> "GestureState":
        return cls()

    @classmethod
    def placing(cls, template: Optional[NodeTemplate]) -> "GestureState":
        return cls(GestureKind.PLACING, template=template)

    @classmethod
    def moving(cls, node_id: str) -> "GestureState":
        return cls(GestureKind.MOVING, node_id=node_id)

    @classmethod
    def resizing(cls, node_id: str, pointer: Point, size: Size) -> "GestureState":
        return cls(
            GestureKind.RESIZING,
            node_id=node_id,
            initial_pointer=pointer,
            initial_size=size,
        )

    @classmethod
    def connecting(cls, origin: ColumnRef) -> "GestureState":
        return cls(GestureKind.CONNECTING, node_id=origin.node_id, origin=origin)

    @property
    def is_idle(self) -> bool:
        return self.kind is GestureKind.NONE

    @property
    def is_spatial(self) -> bool:
        return self.kind in (GestureKind.MOVING, GestureKind.RESIZING)


class NotificationKind(Enum):
    """Classes of transient feedback shown to the user."""

    NONE = "none"
    DUPLICATE_PLACEMENT = "duplicate"
    CONNECTED = "connected"
    FAILURE = "failure"


@dataclass(frozen=True)
class Notification:
    kind: NotificationKind = NotificationKind.NONE
    text: str = ""

    @property
    def is_empty(self) -> bool:
        return self.kind is NotificationKind.NONE


@dataclass(frozen=True)
class CurveGeometry:
    """Render geometry for one connection: two anchors and two control points."""

    connection_id: str
    start: Point
    control1: Point
    control2: Point
    end: Point

    def svg_path(self) -> str:
        return (
            f"M {self.start.x:g} {self.start.y:g} "
            f"C {self.control1.x:g} {self.control1.y:g}, "
            f"{self.control2.x:g} {self.control2.y:g}, "
            f"{self.end.x:g} {self.end.y:g}"
        )
