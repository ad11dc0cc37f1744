"""
Shared pytest fixtures and configuration for pixel art editor tests
"""

import os
import tempfile
from pathlib import Path

# Must be set before any Qt import
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from pixeledit.core.pixeledit_codec import encode_image
from pixeledit.core.pixeledit_messaging import SurfaceChannel
from pixeledit.core.pixeledit_models import PixelGrid
from pixeledit.core.pixeledit_provider import PixelEditorProvider
from pixeledit.core.pixeledit_settings import SettingsManager
from pixeledit.core.pixeledit_storage import FileStorage
from pixeledit.core.pixeledit_surface import PixelSurface

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


@pytest.fixture(autouse=True)
def _qt_app(qapp):
    """Every test runs with a Qt application so timers can fire"""
    return qapp


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def settings(temp_dir):
    """Settings isolated from the user's real settings file"""
    return SettingsManager(settings_dir=temp_dir / "settings")


@pytest.fixture
def storage():
    return FileStorage()


@pytest.fixture
def make_png(temp_dir):
    """Factory writing a grid to a PNG file and returning its path"""

    def _make_png(grid, name="image.png"):
        path = temp_dir / name
        path.write_bytes(encode_image(grid))
        return path

    return _make_png


@pytest.fixture
def small_grid():
    """4x3 transparent grid with a few colored cells"""
    grid = PixelGrid.create(4, 3)
    grid.set(0, 0, RED)
    grid.set(3, 2, BLUE)
    grid.set(1, 1, (10, 20, 30, 128))
    return grid


@pytest.fixture
def png_file(make_png, small_grid):
    return make_png(small_grid)


@pytest.fixture
def provider(settings, storage):
    return PixelEditorProvider(storage=storage, settings=settings)


@pytest.fixture
def attach_surface(provider, settings):
    """Factory attaching a started drawing surface to a document"""

    def _attach(document):
        channel = SurfaceChannel()
        surface = PixelSurface(channel, settings=settings)
        provider.resolve_editor(document, channel)
        surface.start()
        return surface

    return _attach
