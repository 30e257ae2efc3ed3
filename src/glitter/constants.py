"""
Glitter - Constants and Configuration

This module contains all constant values used throughout the engine:
- Braille cell geometry and dot masks
- Document schema sentinels
- ANSI color codes for the terminal renderer
- Interaction thresholds for mouse editing
"""

# ======================================================================
# BRAILLE CELL GEOMETRY
# ======================================================================
# One terminal cell renders a 2x4 grid of sub-pixels as a single braille
# glyph. Each sub-pixel owns one bit of the glyph's offset from U+2800.

CELL_WIDTH_PX = 2
CELL_HEIGHT_PX = 4

BRAILLE_BASE = 0x2800

# Indexed as BRAILLE_DOTS[sub_y][sub_x]
BRAILLE_DOTS = (
    (0x01, 0x08),
    (0x02, 0x10),
    (0x04, 0x20),
    (0x40, 0x80),
)

# ======================================================================
# DOCUMENT SCHEMA
# ======================================================================

SCHEMA_VERSION = 1
UNITS = "px"
COMPACT_VERSION = 1

COMPONENT_BOX = "box"
COMPONENT_IMAGE = "image"
COMPONENT_TEXT = "text"
COMPONENT_BUTTON = "button"

# Types the engine can create and rasterize
RENDERABLE_COMPONENT_TYPES = (COMPONENT_BOX, COMPONENT_IMAGE)

# Types the compact schema reserves (recognized, not yet renderable)
RESERVED_COMPONENT_TYPES = (COMPONENT_TEXT, COMPONENT_BUTTON)

COMPONENT_ID_PREFIX = "c"

# ======================================================================
# ANSI
# ======================================================================

ANSI_RESET = "\x1b[0m"
ANSI_ACTIVE = "\x1b[38;5;208m"   # orange
ANSI_OVERLAY = "\x1b[38;5;245m"  # grey

# Dashed overlay outline stride (sub-pixels)
OVERLAY_DASH_STEP = 2

# ======================================================================
# INTERACTION
# ======================================================================

EDGE_THRESHOLD_PX = 2
MIN_DRAG_W_PX = 2
MIN_DRAG_H_PX = 2

# Minimum size for a box created by click-drag
CREATE_BOX_MIN_W_PX = 80
CREATE_BOX_MIN_H_PX = 40
CANCEL_KEY = "Escape"

# ======================================================================
# DEFAULTS
# ======================================================================

DEFAULT_FILENAME = "scene.json"
DEFAULT_MAX_HISTORY = 50
DEFAULT_MAX_RECENT_FILES = 10
