"""Core pixel art editor modules"""

# Make key classes available at package level
from .pixeledit_document import CancellationToken, PixelArtDocument
from .pixeledit_models import Edit, PixelGrid, make_edit
from .pixeledit_provider import BackupContext, PixelEditorProvider
from .pixeledit_surface import PixelSurface

__all__ = [
    "BackupContext",
    "CancellationToken",
    "Edit",
    "PixelArtDocument",
    "PixelEditorProvider",
    "PixelGrid",
    "PixelSurface",
    "make_edit",
]
