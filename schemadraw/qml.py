"""QML UI definition for SchemaDraw."""

from __future__ import annotations

from pathlib import Path

QML_DIR = Path(__file__).with_name("qml_ui")
SCHEMADRAW_QML_PATH = QML_DIR / "SchemaDrawWindow.qml"


def load_schemadraw_qml() -> str:
    """Return the SchemaDraw QML source as a string."""
    return SCHEMADRAW_QML_PATH.read_text(encoding="utf-8")


__all__ = [
    "QML_DIR",
    "SCHEMADRAW_QML_PATH",
    "load_schemadraw_qml",
]
