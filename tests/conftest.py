"""Pytest fixtures for pcbcanvas tests."""

import os

# Must be set before any Qt GUI class is instantiated
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from contextlib import contextmanager
from unittest.mock import MagicMock

import pytest
from PySide6.QtCore import Qt
from PySide6.QtGui import QGuiApplication, QImage, QPainter


@pytest.fixture(scope="session", autouse=True)
def qapp():
    """One QGuiApplication for the whole session."""
    app = QGuiApplication.instance()
    if app is None:
        app = QGuiApplication([])
    yield app


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path, monkeypatch):
    """Keep config and log files inside the test's tmp dir."""
    monkeypatch.setenv("PCBCANVAS_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("PCBCANVAS_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("PCBCANVAS_LOG_TO_STDERR", "0")
    monkeypatch.delenv("PCBCANVAS_LOG_LEVEL", raising=False)


@pytest.fixture
def make_image():
    """Factory for transparent ARGB images."""
    def make(width: int = 100, height: int = 100) -> QImage:
        image = QImage(width, height, QImage.Format.Format_ARGB32_Premultiplied)
        image.fill(Qt.GlobalColor.transparent)
        return image
    return make


@pytest.fixture
def painting():
    """Context manager opening an aliased painter on an image and ending it."""
    @contextmanager
    def open_painter(image: QImage, antialias: bool = False):
        painter = QPainter(image)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, antialias)
        try:
            yield painter
        finally:
            painter.end()
    return open_painter


@pytest.fixture
def mock_painter():
    """Call-recording stand-in for QPainter."""
    return MagicMock(spec=QPainter)
