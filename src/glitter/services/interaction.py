"""
Glitter - Mouse Interaction Service

Geometry for interactive editing on top of decoded mouse events:
- cell -> pixel conversion
- edge hit-testing against box components (topmost first, locked skipped)
- edge-drag resizing clamped to the canvas
- pending actions (click-drag box creation) that can be cancelled by
  dropping the value, without touching the committed document

Raw terminal bytes are decoded elsewhere; this module only sees MouseEvent.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from glitter.constants import (
    CELL_WIDTH_PX, CELL_HEIGHT_PX,
    COMPONENT_BOX,
    CREATE_BOX_MIN_W_PX, CREATE_BOX_MIN_H_PX,
    CANCEL_KEY,
)
from glitter.models.scene_doc import Rect

EDGE_NORTH = "n"
EDGE_SOUTH = "s"
EDGE_EAST = "e"
EDGE_WEST = "w"


@dataclass
class MouseEvent:
    """Decoded mouse event, cell coordinates are 1-based terminal positions"""
    kind: str  # 'down', 'up', 'move'
    x_cell: int
    y_cell: int
    button: int = 0
    shift: bool = False
    alt: bool = False
    ctrl: bool = False


@dataclass
class EdgeHit:
    """Result of an edge hit-test"""
    component_id: str
    edge: str
    rect: Rect


@dataclass
class ResizeLimits:
    """Minimum rect size and canvas size in pixels"""
    min_w: int
    min_h: int
    max_w: int
    max_h: int


def cell_to_pixel(x_cell: int, y_cell: int) -> Tuple[int, int]:
    """Top-left pixel of a 1-based terminal cell"""
    return (x_cell - 1) * CELL_WIDTH_PX, (y_cell - 1) * CELL_HEIGHT_PX


# ========================================
# Hit testing
# ========================================

def hit_test_box_edge(rect: Rect, px: int, py: int, threshold: int) -> Optional[str]:
    """Find the rect edge nearest to a pixel, within threshold

    Returns:
        'n', 's', 'e', 'w' or None. On equal distance the first edge checked
        wins, in the order w, e, n, s.
    """
    left = rect.x
    right = rect.x + rect.w - 1
    top = rect.y
    bottom = rect.y + rect.h - 1

    if px < left - threshold or px > right + threshold:
        return None
    if py < top - threshold or py > bottom + threshold:
        return None

    best = None  # (edge, distance)
    candidates = (
        (EDGE_WEST, abs(px - left)),
        (EDGE_EAST, abs(px - right)),
        (EDGE_NORTH, abs(py - top)),
        (EDGE_SOUTH, abs(py - bottom)),
    )
    for edge, distance in candidates:
        if distance <= threshold and (best is None or distance < best[1]):
            best = (edge, distance)

    return best[0] if best else None


def hit_test_topmost_box_edge(scene, px: int, py: int, threshold: int) -> Optional[EdgeHit]:
    """Hit-test box edges from the topmost component down

    Non-box and locked components are skipped.
    """
    for comp in reversed(scene.components):
        if comp.type != COMPONENT_BOX or comp.locked:
            continue
        edge = hit_test_box_edge(comp.rect, px, py, threshold)
        if edge:
            return EdgeHit(component_id=comp.id, edge=edge, rect=comp.rect.copy())
    return None


# ========================================
# Resizing
# ========================================

def resize_rect(rect: Rect, edge: str, dx: int, dy: int, limits: ResizeLimits) -> Rect:
    """Move one edge of a rect by (dx, dy), keeping the opposite edge fixed

    The result is clamped to the minimum size, then to the canvas, so the
    canvas wins when there is less room than the minimum.
    """
    x, y, w, h = rect
    max_x = limits.max_w - 1
    max_y = limits.max_h - 1

    if edge == EDGE_EAST:
        w = min(max(rect.w + dx, limits.min_w), max_x - x + 1)
    elif edge == EDGE_SOUTH:
        h = min(max(rect.h + dy, limits.min_h), max_y - y + 1)
    elif edge == EDGE_WEST:
        right = rect.x + rect.w - 1
        x = _clamp(rect.x + dx, 0, right - (limits.min_w - 1))
        w = right - x + 1
    elif edge == EDGE_NORTH:
        bottom = rect.y + rect.h - 1
        y = _clamp(rect.y + dy, 0, bottom - (limits.min_h - 1))
        h = bottom - y + 1

    return Rect(x, y, w, h)


@dataclass
class DragState:
    """An in-progress edge resize"""
    component_id: str
    edge: str
    start_px: Tuple[int, int]
    start_rect: Rect

    def rect_at(self, px: int, py: int, limits: ResizeLimits) -> Rect:
        """Resized rect for the current mouse pixel"""
        dx = px - self.start_px[0]
        dy = py - self.start_px[1]
        return resize_rect(self.start_rect, self.edge, dx, dy, limits)


# ========================================
# Pending actions
# ========================================

@dataclass
class PendingAction:
    """Cancelable multi-step interaction not yet committed to the document

    kind 'createBoxDrag': press to set the start corner, drag to preview,
    release to commit. Any event may discard it; cancelling never rolls
    back committed state because nothing was committed.
    """
    layer_id: str
    kind: str = "createBoxDrag"
    started_at: Optional[Tuple[int, int]] = None
    preview_rect: Optional[Rect] = None
    within_frame: bool = True
    min_w: int = CREATE_BOX_MIN_W_PX
    min_h: int = CREATE_BOX_MIN_H_PX
    cancel_key: str = CANCEL_KEY

    def start(self, px: int, py: int) -> None:
        self.started_at = (px, py)
        self.preview_rect = Rect(px, py, 1, 1)

    def preview_from(self, px: int, py: int, width_px: int, height_px: int) -> Optional[Rect]:
        """Update the preview rect spanning the start point and (px, py)

        Returns:
            The new preview, or None if the action has not started
        """
        if self.started_at is None:
            return None
        sx, sy = self.started_at
        if self.within_frame:
            sx, px = (_clamp(v, 0, width_px - 1) for v in (sx, px))
            sy, py = (_clamp(v, 0, height_px - 1) for v in (sy, py))
        self.preview_rect = Rect(min(sx, px), min(sy, py), abs(px - sx) + 1, abs(py - sy) + 1)
        return self.preview_rect

    def final_rect(self, width_px: int, height_px: int) -> Optional[Rect]:
        """Preview grown to the minimum size and shifted back inside the canvas"""
        if self.preview_rect is None:
            return None
        x, y, w, h = self.preview_rect
        w = min(max(w, self.min_w), width_px)
        h = min(max(h, self.min_h), height_px)
        x = _clamp(x, 0, width_px - w)
        y = _clamp(y, 0, height_px - h)
        return Rect(x, y, w, h)

    def is_cancel(self, key: str) -> bool:
        return key == self.cancel_key


def _clamp(n: int, low: int, high: int) -> int:
    return max(low, min(high, n))
