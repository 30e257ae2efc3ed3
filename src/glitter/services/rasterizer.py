"""
Glitter - Rasterizer / Compositor Service

Pixel primitives and frame encoding for the braille renderer.

Buffers are 2D uint8 numpy arrays shaped (height_cells, width_cells). Each
byte packs the 2x4 sub-pixel grid of one terminal cell using BRAILLE_DOTS,
so a byte value is directly the glyph's offset from U+2800.

Nothing in this module raises on bad coordinates: pixels outside a buffer
are clipped. Strict bounds checks belong to the Scene mutations, not here.
"""

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional

import numpy as np

from glitter.constants import (
    BRAILLE_BASE, BRAILLE_DOTS,
    CELL_WIDTH_PX, CELL_HEIGHT_PX,
    COMPONENT_BOX, COMPONENT_IMAGE,
    ANSI_RESET, ANSI_ACTIVE, ANSI_OVERLAY,
    OVERLAY_DASH_STEP,
)

if TYPE_CHECKING:
    from glitter.models.scene_doc import Rect, ComponentDoc


@dataclass
class OverlayRect:
    """Transient drag-preview outline, never stored in any layer

    Args:
        rect: Preview rectangle in pixels
        color: ANSI color escape, None for the renderer default
    """
    rect: 'Rect'
    color: Optional[str] = None


# ========================================
# Buffers
# ========================================

def new_buffer(width_cells: int, height_cells: int) -> np.ndarray:
    """Allocate a cleared cell buffer"""
    return np.zeros((height_cells, width_cells), dtype=np.uint8)


def composite(buffers: Iterable[np.ndarray], shape) -> np.ndarray:
    """OR-merge buffers into a new buffer of the given shape"""
    final = np.zeros(shape, dtype=np.uint8)
    for buffer in buffers:
        np.bitwise_or(final, buffer, out=final)
    return final


# ========================================
# Pixel primitives
# ========================================

def set_pixel(buffer: np.ndarray, x, y) -> None:
    """OR one sub-pixel into its cell, silently dropping off-buffer pixels"""
    if not _finite(x, y):
        return
    x = math.floor(x)
    y = math.floor(y)
    height_cells, width_cells = buffer.shape

    cell_x = x // CELL_WIDTH_PX
    cell_y = y // CELL_HEIGHT_PX
    if cell_x < 0 or cell_y < 0 or cell_x >= width_cells or cell_y >= height_cells:
        return

    buffer[cell_y, cell_x] |= BRAILLE_DOTS[y % CELL_HEIGHT_PX][x % CELL_WIDTH_PX]


def draw_box(buffer: np.ndarray, x, y, w, h) -> None:
    """Draw the four edges of a rectangle (outline, not filled)"""
    if not _finite(x, y, w, h):
        return
    x, y, w, h = (math.floor(v) for v in (x, y, w, h))
    for i in range(x, x + w):
        set_pixel(buffer, i, y)
        set_pixel(buffer, i, y + h - 1)
    for j in range(y, y + h):
        set_pixel(buffer, x, j)
        set_pixel(buffer, x + w - 1, j)


def draw_line(buffer: np.ndarray, x0, y0, x1, y1) -> None:
    """Bresenham line between two pixels, endpoints included"""
    if not _finite(x0, y0, x1, y1):
        return
    x0, y0, x1, y1 = (math.floor(v) for v in (x0, y0, x1, y1))
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    while True:
        set_pixel(buffer, x0, y0)
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


def draw_dashed_rect(buffer: np.ndarray, rect: 'Rect', step: int = OVERLAY_DASH_STEP) -> None:
    """Draw a broken outline, stepping `step` sub-pixels along each edge

    The rectangle is clamped to the buffer first so a preview dragged past
    the canvas edge still shows its visible sides.
    """
    if not _finite(rect.x, rect.y, rect.w, rect.h):
        return
    height_cells, width_cells = buffer.shape
    max_x = width_cells * CELL_WIDTH_PX - 1
    max_y = height_cells * CELL_HEIGHT_PX - 1
    x_start = _clamp(math.floor(rect.x), 0, max_x)
    y_start = _clamp(math.floor(rect.y), 0, max_y)
    x_end = _clamp(math.floor(rect.x + rect.w - 1), 0, max_x)
    y_end = _clamp(math.floor(rect.y + rect.h - 1), 0, max_y)

    for x in range(x_start, x_end + 1, step):
        set_pixel(buffer, x, y_start)
        set_pixel(buffer, x, y_end)
    for y in range(y_start, y_end + 1, step):
        set_pixel(buffer, x_start, y)
        set_pixel(buffer, x_end, y)


def rasterize_component(buffer: np.ndarray, comp: 'ComponentDoc') -> None:
    """Draw a component into a buffer according to its type

    box   -> outline
    image -> outline with both diagonals (wireframe placeholder)
    other -> nothing; reserved types are not renderable yet
    """
    x, y, w, h = comp.rect
    if comp.type == COMPONENT_BOX:
        draw_box(buffer, x, y, w, h)
    elif comp.type == COMPONENT_IMAGE:
        draw_box(buffer, x, y, w, h)
        draw_line(buffer, x, y, x + w - 1, y + h - 1)
        draw_line(buffer, x + w - 1, y, x, y + h - 1)


# ========================================
# Frame encoding
# ========================================

_NEUTRAL = 0
_ACTIVE = 1
_OVERLAY = 2


def encode_frame(final: np.ndarray,
                 active_mask: Optional[np.ndarray] = None,
                 overlay: Optional[np.ndarray] = None,
                 active_color: str = ANSI_ACTIVE,
                 overlay_color: str = ANSI_OVERLAY) -> str:
    """Encode a composite buffer as braille text with ANSI color runs

    Single left-to-right, top-to-bottom scan. Each cell is classified as
    overlay (overlay bits present), active (active-layer bits present) or
    neutral; escapes are emitted only when the classification changes. Leaving
    overlay always resets first, and any open color is reset before each
    row's newline.

    Args:
        final: Composite cell buffer
        active_mask: Boolean buffer, True where the active layer drew
        overlay: Transient overlay buffer, OR'd into the glyph only
        active_color: Escape for active cells
        overlay_color: Escape for overlay cells

    Returns:
        Newline-terminated rows, one glyph per cell
    """
    rows = final.tolist()
    active_rows = active_mask.tolist() if active_mask is not None else None
    overlay_rows = overlay.tolist() if overlay is not None else None

    out = []
    for y, row in enumerate(rows):
        state = _NEUTRAL
        for x, value in enumerate(row):
            overlay_value = overlay_rows[y][x] if overlay_rows is not None else 0
            if overlay_value:
                cell_state = _OVERLAY
            elif active_rows is not None and active_rows[y][x]:
                cell_state = _ACTIVE
            else:
                cell_state = _NEUTRAL

            if cell_state != state:
                # Leaving overlay always resets before the next color
                if state == _OVERLAY or cell_state == _NEUTRAL:
                    out.append(ANSI_RESET)
                if cell_state == _OVERLAY:
                    out.append(overlay_color)
                elif cell_state == _ACTIVE:
                    out.append(active_color)
                state = cell_state

            out.append(chr(BRAILLE_BASE + (value | overlay_value)))
        if state != _NEUTRAL:
            out.append(ANSI_RESET)
        out.append("\n")

    return "".join(out)


def _clamp(n: int, low: int, high: int) -> int:
    return max(low, min(high, n))


def _finite(*values) -> bool:
    try:
        return all(math.isfinite(v) for v in values)
    except TypeError:
        return False
