"""Shared pytest fixtures for Qt application lifecycle and canvas wiring."""

import os
import sys

import pytest

# Tests run without a display server.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtCore import QCoreApplication
from PySide6.QtGui import QGuiApplication

from schemadraw import (
    SAMPLE_TEMPLATES,
    CanvasSettings,
    CanvasState,
    FeedbackChannel,
    InteractionController,
)


@pytest.fixture(scope="session")
def app():
    """Provide a single QGuiApplication for all tests."""
    instance = QGuiApplication.instance()
    if instance is None:
        instance = QGuiApplication(sys.argv)

    yield instance

    QCoreApplication.processEvents()


@pytest.fixture
def fast_settings():
    """Settings with short notification delays so timer tests stay quick."""
    return CanvasSettings(duplicate_delay_ms=60, connected_delay_ms=40, failure_delay_ms=60)


@pytest.fixture
def employees():
    return SAMPLE_TEMPLATES[0]


@pytest.fixture
def departments():
    return SAMPLE_TEMPLATES[1]


@pytest.fixture
def canvas(app, fast_settings):
    return CanvasState(fast_settings)


@pytest.fixture
def feedback(app, fast_settings):
    return FeedbackChannel(fast_settings)


@pytest.fixture
def controller(canvas, feedback):
    return InteractionController(canvas, feedback)
