"""Shared pytest fixtures for tiler tests."""

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtGui import QGuiApplication

from wfc_tiler.core import (
    DEFAULT_CATALOGUE,
    CompatibilityModel,
    TileCatalogue,
    build_compatibility_model,
)


@pytest.fixture(scope="session", autouse=True)
def qt_app():
    """An offscreen GUI application for signals and QPainter on images."""
    app = QGuiApplication.instance() or QGuiApplication([])
    yield app


@pytest.fixture
def catalogue() -> TileCatalogue:
    """The built-in four-tile catalogue."""
    return DEFAULT_CATALOGUE


@pytest.fixture
def model(catalogue: TileCatalogue) -> CompatibilityModel:
    """Compatibility model of the built-in catalogue."""
    return build_compatibility_model(catalogue)
