"""Read-only palette of table templates available for placement."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from PySide6.QtCore import Property, QAbstractListModel, QModelIndex, Qt, Signal, Slot

from .constants import SAMPLE_TEMPLATES
from .payload import encode_template
from .types import NodeTemplate


class PaletteModel(QAbstractListModel):
    """Qt model listing templates in their supplied order."""

    IdRole = Qt.UserRole + 1
    NameRole = Qt.UserRole + 2
    ColumnCountRole = Qt.UserRole + 3
    ColumnsRole = Qt.UserRole + 4

    templatesChanged = Signal()

    def __init__(self, templates: Optional[Iterable[NodeTemplate]] = None, parent=None):
        super().__init__(parent)
        source = SAMPLE_TEMPLATES if templates is None else templates
        self._templates: List[NodeTemplate] = list(source)

    def rowCount(self, parent: QModelIndex | None = QModelIndex()) -> int:  # type: ignore[override]
        return len(self._templates)

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole):  # type: ignore[override]
        if not index.isValid() or not (0 <= index.row() < len(self._templates)):
            return None
        template = self._templates[index.row()]
        if role == self.IdRole:
            return template.id
        if role in (self.NameRole, Qt.DisplayRole):
            return template.name
        if role == self.ColumnCountRole:
            return len(template.columns)
        if role == self.ColumnsRole:
            return [
                {"columnId": column.column_id, "name": column.name, "dataType": column.data_type}
                for column in template.columns
            ]
        return None

    def roleNames(self) -> Dict[int, bytes]:  # type: ignore[override]
        return {
            self.IdRole: b"templateId",
            self.NameRole: b"name",
            self.ColumnCountRole: b"columnCount",
            self.ColumnsRole: b"columns",
        }

    @Property(int, notify=templatesChanged)
    def count(self) -> int:
        return len(self._templates)

    def templates(self) -> List[NodeTemplate]:
        return list(self._templates)

    def templateAt(self, row: int) -> Optional[NodeTemplate]:
        if 0 <= row < len(self._templates):
            return self._templates[row]
        return None

    @Slot(int, result=str)
    def payloadAt(self, row: int) -> str:
        """Return the drag payload for the template at ``row``, or ''."""
        template = self.templateAt(row)
        if template is None:
            return ""
        return encode_template(template)
