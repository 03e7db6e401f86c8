"""
Collage Editor - Constants and Configuration

This module contains all constant values used throughout the application:
- Layer geometry defaults and constraints
- Text layer defaults, palette and font choices
- Matting parameters
- Canvas and export rendering constants
- Backend defaults
"""

# ======================================================================
# LAYER GEOMETRY
# ======================================================================

# Image layers are laid out in a fixed square box (logical pixels)
LAYER_BASE_SIZE = 120
LAYER_HALF_SIZE = LAYER_BASE_SIZE / 2

# Uniform scale limits, enforced by gestures and the scale slider
SCALE_MIN = 0.2
SCALE_MAX = 5.0
DEFAULT_SCALE = 1.0

# Rotation in degrees, never clamped
DEFAULT_ROTATION = 0.0

# New layers land at a small random offset so stacked adds stay visible
IMAGE_LAYER_SPAWN_MIN = 80
TEXT_LAYER_SPAWN_MIN = 120
LAYER_SPAWN_JITTER = 40

# Id prefixes per layer kind
IMAGE_LAYER_ID_PREFIX = 'layer_'
TEXT_LAYER_ID_PREFIX = 'text_'

# ======================================================================
# TEXT LAYERS
# ======================================================================

DEFAULT_TEXT = 'Your text'
DEFAULT_FONT_SIZE = 24
DEFAULT_TEXT_COLOR = '#ffffff'
DEFAULT_FONT_FAMILY = (
    '-apple-system, BlinkMacSystemFont, "SF Pro Text", "Segoe UI", '
    'Roboto, Helvetica, Arial, sans-serif'
)

# Padding around text in the live view hit box (vertical, horizontal)
TEXT_PADDING_Y = 4
TEXT_PADDING_X = 8

# Font choices offered by the text tools
TEXT_FONT_CHOICES = [
    ('Sans', DEFAULT_FONT_FAMILY),
    ('Serif', 'Georgia, "Times New Roman", Times, serif'),
    ('Mono', '"Courier New", Courier, monospace'),
    ('Rounded', '"Comic Sans MS", "Trebuchet MS", sans-serif'),
    ('Display', 'Impact, Haettenschweiler, "Arial Narrow Bold", sans-serif'),
]

# Swatches offered by the text color tool
TEXT_COLOR_SWATCHES = [
    '#ffffff', '#000000', '#ff4d6d', '#ffb703',
    '#8ecae6', '#219ebc', '#6a4c93', '#2a9d8f',
]

# ======================================================================
# BACKGROUND MATTING
# ======================================================================

# Euclidean RGB distance below which a pixel counts as background
MATTE_THRESHOLD = 40

# ======================================================================
# CANVAS / EXPORT
# ======================================================================

# Logical viewport size of the collage canvas
CANVAS_WIDTH = 360
CANVAS_HEIGHT = 480

# Painted when there is no background (or it fails to load)
FALLBACK_FILL_COLOR = '#f5e6ff'

# Selection outline in the live view
SELECTION_OUTLINE_COLOR = '#7b2cbf'
SELECTION_OUTLINE_WIDTH = 2

CANVAS_PLACEHOLDER_TEXT = 'Add images, a background or text to start your collage'

PNG_DATA_URL_PREFIX = 'data:image/png;base64,'

# ======================================================================
# BACKEND
# ======================================================================

DEFAULT_API_BASE_URL = 'http://localhost:3000'
API_TIMEOUT_SECONDS = 30

VISIBILITY_PUBLIC = 'public'
VISIBILITY_PRIVATE = 'private'
VISIBILITY_CHOICES = (VISIBILITY_PUBLIC, VISIBILITY_PRIVATE)

# ======================================================================
# CONFIG FILE
# ======================================================================

CONFIG_DIR_NAME = '.collage_editor'
CONFIG_FILE_NAME = 'config.json'
