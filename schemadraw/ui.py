"""UI creation functions for SchemaDraw."""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from PySide6.QtCore import QUrl
from PySide6.QtQml import QQmlApplicationEngine

from .canvas import CanvasState
from .controller import InteractionController
from .feedback import FeedbackChannel
from .palette import PaletteModel
from .qml import QML_DIR, SCHEMADRAW_QML_PATH
from .routing import ConnectionRouter
from .settings import CanvasSettings


def create_schemadraw_window(
    canvas_state: CanvasState,
    palette_model: Optional[PaletteModel] = None,
    feedback_channel: Optional[FeedbackChannel] = None,
    interaction_controller: Optional[InteractionController] = None,
    connection_router: Optional[ConnectionRouter] = None,
) -> QQmlApplicationEngine:
    """Create and return a QQmlApplicationEngine hosting the SchemaDraw UI."""
    if palette_model is None:
        palette_model = PaletteModel()
    if feedback_channel is None:
        feedback_channel = FeedbackChannel(canvas_state.settings)
    if interaction_controller is None:
        interaction_controller = InteractionController(canvas_state, feedback_channel)
    if connection_router is None:
        connection_router = ConnectionRouter(canvas_state)

    engine = QQmlApplicationEngine()
    context = engine.rootContext()
    context.setContextProperty("canvasState", canvas_state)
    context.setContextProperty("paletteModel", palette_model)
    context.setContextProperty("feedbackChannel", feedback_channel)
    context.setContextProperty("interactionController", interaction_controller)
    context.setContextProperty("connectionRouter", connection_router)
    # Context properties do not keep their Python objects alive.
    engine._palette_model = palette_model
    engine._feedback_channel = feedback_channel
    engine._interaction_controller = interaction_controller
    engine._connection_router = connection_router
    engine.addImportPath(str(QML_DIR))
    engine.load(QUrl.fromLocalFile(str(SCHEMADRAW_QML_PATH)))
    return engine


def main() -> int:
    """Main entry point for SchemaDraw standalone mode."""
    from PySide6.QtWidgets import QApplication

    logging.basicConfig(
        level=os.environ.get("SCHEMADRAW_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    smoke_mode = "--smoke" in sys.argv or os.environ.get("SCHEMADRAW_SMOKE") == "1"

    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)

    canvas_state = CanvasState(CanvasSettings.load())
    engine = create_schemadraw_window(canvas_state)
    if not engine.rootObjects():
        return 1

    if smoke_mode:
        return 0

    return app.exec()
