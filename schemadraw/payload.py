"""Drag payload encoding for palette templates.

A template being dragged from the palette travels as JSON, either as
plain text or inside a QMimeData under ``TEMPLATE_MIME_TYPE``.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from PySide6.QtCore import QByteArray, QMimeData

from .constants import TEMPLATE_MIME_TYPE, TEMPLATE_PAYLOAD_FORMAT, TEMPLATE_PAYLOAD_VERSION
from .errors import MalformedDragPayload
from .types import ColumnSpec, NodeTemplate


def _serialize_template(template: NodeTemplate) -> Dict[str, Any]:
    return {
        "format": TEMPLATE_PAYLOAD_FORMAT,
        "version": TEMPLATE_PAYLOAD_VERSION,
        "id": template.id,
        "name": template.name,
        "columns": [
            {
                "column_id": column.column_id,
                "name": column.name,
                "data_type": column.data_type,
            }
            for column in template.columns
        ],
    }


def encode_template(template: NodeTemplate) -> str:
    """Serialize a template into its transport form."""
    return json.dumps(_serialize_template(template))


def _require_str(data: Dict[str, Any], key: str, where: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise MalformedDragPayload(f"{where} field '{key}' must be a string")
    return value


def _parse_columns(raw_columns: Any) -> List[ColumnSpec]:
    if not isinstance(raw_columns, list):
        raise MalformedDragPayload("Payload field 'columns' must be a list")
    columns: List[ColumnSpec] = []
    seen = set()
    for raw in raw_columns:
        if not isinstance(raw, dict):
            raise MalformedDragPayload("Column entries must be objects")
        column_id = _require_str(raw, "column_id", "Column")
        if not column_id:
            raise MalformedDragPayload("Column id must not be empty")
        if column_id in seen:
            raise MalformedDragPayload(f"Duplicate column id: {column_id}")
        seen.add(column_id)
        data_type = raw.get("data_type", "")
        if not isinstance(data_type, str):
            raise MalformedDragPayload("Column field 'data_type' must be a string")
        columns.append(ColumnSpec(column_id, _require_str(raw, "name", "Column"), data_type))
    return columns


def decode_template(payload_text: Optional[str]) -> NodeTemplate:
    """Parse a transport payload back into a template.

    Raises:
        MalformedDragPayload: if the text is not a valid template payload.
    """
    if not payload_text:
        raise MalformedDragPayload("Empty drag payload")
    try:
        data = json.loads(payload_text)
    except (json.JSONDecodeError, TypeError) as exc:
        raise MalformedDragPayload(f"Drag payload is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise MalformedDragPayload("Drag payload must be a JSON object")
    if data.get("format") != TEMPLATE_PAYLOAD_FORMAT:
        raise MalformedDragPayload("Drag payload has an unknown format")

    template_id = _require_str(data, "id", "Payload")
    if not template_id:
        raise MalformedDragPayload("Template id must not be empty")
    name = _require_str(data, "name", "Payload")
    columns = _parse_columns(data.get("columns", []))
    return NodeTemplate(id=template_id, name=name, columns=tuple(columns))


def template_mime_data(template: NodeTemplate) -> QMimeData:
    payload_text = encode_template(template)
    mime_data = QMimeData()
    mime_data.setData(TEMPLATE_MIME_TYPE, QByteArray(payload_text.encode("utf-8")))
    mime_data.setText(payload_text)
    return mime_data


def template_from_mime_data(mime_data: Optional[QMimeData]) -> NodeTemplate:
    if mime_data is None:
        raise MalformedDragPayload("No drag data")
    payload_text: Optional[str] = None
    if mime_data.hasFormat(TEMPLATE_MIME_TYPE):
        raw = mime_data.data(TEMPLATE_MIME_TYPE)
        try:
            payload_text = bytes(raw).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedDragPayload("Drag payload is not UTF-8") from exc
    elif mime_data.hasText():
        payload_text = mime_data.text()
    return decode_template(payload_text)
