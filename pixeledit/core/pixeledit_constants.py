#!/usr/bin/env python3
"""
Constants for the pixel art editor
Centralizes all magic numbers and configuration values
"""

# ============================================================================
# COLOR CONSTANTS
# ============================================================================

# Fully transparent color used for empty cells and by the eraser
TRANSPARENT = (0, 0, 0, 0)

# Number of channels per color (RGBA)
COLOR_CHANNELS = 4
MIN_CHANNEL_VALUE = 0
MAX_CHANNEL_VALUE = 255

# Default drawing color
DEFAULT_DRAWING_COLOR = (0, 0, 0, 255)

# Default palette offered by a drawing surface
DEFAULT_PALETTE = [
    (0, 0, 0, 255),
    (127, 127, 127, 255),
    (136, 0, 21, 255),
    (237, 28, 36, 255),
    (255, 127, 39, 255),
    (255, 242, 0, 255),
    (34, 177, 36, 255),
    (0, 162, 232, 255),
    (63, 72, 204, 255),
    (163, 73, 164, 255),
    (255, 255, 255, 255),
    (195, 195, 195, 255),
    (185, 122, 87, 255),
    (255, 174, 201, 255),
    (255, 201, 14, 255),
    (239, 228, 176, 255),
    (181, 230, 29, 255),
    (153, 217, 234, 255),
    (112, 146, 190, 255),
    (200, 191, 231, 255),
]

# ============================================================================
# IMAGE CONSTANTS
# ============================================================================

# Default dimensions of an untitled document
DEFAULT_IMAGE_WIDTH = 16
DEFAULT_IMAGE_HEIGHT = 16

# Upper bound for either grid dimension
MAX_IMAGE_DIMENSION = 4096

# Device pixels per grid cell on a drawing surface
CELL_DISPLAY_SIZE = 10

# PNG transport encoding
PNG_FORMAT = "PNG"
DATA_URI_PREFIX = "data:image/png;base64,"

# ============================================================================
# SHAPE TOOL CONSTANTS
# ============================================================================

DEFAULT_CIRCLE_RADIUS = 4
DEFAULT_ELLIPSE_RADIUS_X = 6
DEFAULT_ELLIPSE_RADIUS_Y = 3

# ============================================================================
# DOCUMENT CONSTANTS
# ============================================================================

UNTITLED_SCHEME = "untitled"
FILE_SCHEME = "file"
NEW_FILE_TEMPLATE = "new-{index}.png"

# Label reported to the host for each applied edit
EDIT_LABEL = "Stroke"

# ============================================================================
# TIMING CONSTANTS
# ============================================================================

REQUEST_TIMEOUT_MS = 5000  # Byte request timeout in milliseconds

# ============================================================================
# FILE MANAGEMENT CONSTANTS
# ============================================================================

MAX_RECENT_FILES = 10
