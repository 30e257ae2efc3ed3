"""
Tests for mouse interaction geometry.

Covers:
- Cell -> pixel conversion
- Edge hit-testing (nearest edge, tie order, threshold)
- Topmost box selection skipping locked and non-box components
- resize_rect clamping on every edge
- PendingAction preview and final rect
"""
import pytest

from glitter.models import Rect
from glitter.services.interaction import (
    MouseEvent, ResizeLimits, DragState, PendingAction,
    cell_to_pixel, hit_test_box_edge, hit_test_topmost_box_edge, resize_rect,
)


LIMITS = ResizeLimits(min_w=2, min_h=2, max_w=160, max_h=96)
RECT = Rect(10, 10, 20, 20)  # right edge x=29, bottom edge y=29


# ══════════════════════════════════════════════════════════════════════════
# Coordinates
# ══════════════════════════════════════════════════════════════════════════

class TestCellToPixel:

    @pytest.mark.parametrize("cell, pixel", [
        ((1, 1), (0, 0)),
        ((2, 1), (2, 0)),
        ((3, 2), (4, 4)),
        ((80, 24), (158, 92)),
    ])
    def test_conversion(self, cell, pixel):
        assert cell_to_pixel(*cell) == pixel

    def test_mouse_event_defaults(self):
        event = MouseEvent("down", 3, 4)
        assert (event.button, event.shift, event.alt, event.ctrl) == (0, False, False, False)


# ══════════════════════════════════════════════════════════════════════════
# Hit testing
# ══════════════════════════════════════════════════════════════════════════

class TestHitTestBoxEdge:

    @pytest.mark.parametrize("px, py, edge", [
        (10, 15, "w"),
        (29, 15, "e"),
        (15, 10, "n"),
        (15, 29, "s"),
        (8, 15, "w"),
        (31, 15, "e"),
        (15, 31, "s"),
    ])
    def test_edges(self, px, py, edge):
        assert hit_test_box_edge(RECT, px, py, 2) == edge

    @pytest.mark.parametrize("px, py", [
        (7, 15),     # beyond threshold, outside
        (15, 15),    # interior, far from edges
        (50, 50),
    ])
    def test_misses(self, px, py):
        assert hit_test_box_edge(RECT, px, py, 2) is None

    def test_nearest_edge_wins(self):
        # 1 px from west, 0 px from north
        assert hit_test_box_edge(RECT, 11, 10, 2) == "n"

    def test_corner_tie_keeps_first(self):
        assert hit_test_box_edge(RECT, 10, 10, 2) == "w"
        assert hit_test_box_edge(RECT, 29, 29, 2) == "e"

    def test_zero_threshold(self):
        assert hit_test_box_edge(RECT, 10, 15, 0) == "w"
        assert hit_test_box_edge(RECT, 9, 15, 0) is None


class TestTopmostHit:

    def test_topmost_wins(self, scene):
        scene.add_box(RECT)
        top = scene.add_box(RECT)
        hit = hit_test_topmost_box_edge(scene, 10, 15, 2)
        assert hit.component_id == top.id
        assert hit.edge == "w"
        assert hit.rect == RECT

    def test_locked_skipped(self, scene):
        bottom = scene.add_box(RECT)
        scene.add_box(RECT, meta={'locked': True})
        assert hit_test_topmost_box_edge(scene, 10, 15, 2).component_id == bottom.id

    def test_images_skipped(self, scene):
        scene.add_image(RECT)
        assert hit_test_topmost_box_edge(scene, 10, 15, 2) is None

    def test_hit_rect_is_a_copy(self, scene):
        box = scene.add_box(RECT)
        hit = hit_test_topmost_box_edge(scene, 10, 15, 2)
        hit.rect.x = 0
        assert scene.get_component_by_id(box.id).rect == RECT


# ══════════════════════════════════════════════════════════════════════════
# Resizing
# ══════════════════════════════════════════════════════════════════════════

class TestResizeRect:

    @pytest.mark.parametrize("edge, dx, dy, expected", [
        ("e", 5, 0, Rect(10, 10, 25, 20)),
        ("e", -100, 0, Rect(10, 10, 2, 20)),
        ("e", 1000, 0, Rect(10, 10, 150, 20)),
        ("s", 0, 100, Rect(10, 10, 20, 86)),
        ("s", 0, -100, Rect(10, 10, 20, 2)),
        ("w", -5, 0, Rect(5, 10, 25, 20)),
        ("w", 100, 0, Rect(28, 10, 2, 20)),
        ("w", -100, 0, Rect(0, 10, 30, 20)),
        ("n", 0, -20, Rect(10, 0, 20, 30)),
        ("n", 0, 100, Rect(10, 28, 20, 2)),
    ])
    def test_edges(self, edge, dx, dy, expected):
        assert resize_rect(RECT, edge, dx, dy, LIMITS) == expected

    @pytest.mark.parametrize("rect, edge, expected", [
        (Rect(157, 10, 3, 20), "e", Rect(157, 10, 3, 20)),
        (Rect(10, 93, 20, 3), "s", Rect(10, 93, 20, 3)),
    ])
    def test_canvas_wins_over_minimum(self, rect, edge, expected):
        limits = ResizeLimits(min_w=4, min_h=4, max_w=160, max_h=96)
        assert resize_rect(rect, edge, -50, -50, limits) == expected

    def test_input_untouched(self):
        rect = Rect(10, 10, 20, 20)
        resize_rect(rect, "e", 5, 0, LIMITS)
        assert rect == Rect(10, 10, 20, 20)

    def test_drag_state_follows_mouse(self):
        drag = DragState(component_id="c1", edge="s", start_px=(15, 29), start_rect=RECT)
        assert drag.rect_at(15, 39, LIMITS) == Rect(10, 10, 20, 30)
        assert drag.rect_at(15, 19, LIMITS) == Rect(10, 10, 20, 10)


# ══════════════════════════════════════════════════════════════════════════
# Pending actions
# ══════════════════════════════════════════════════════════════════════════

class TestPendingAction:

    def test_defaults(self):
        action = PendingAction(layer_id="components")
        assert action.kind == "createBoxDrag"
        assert (action.min_w, action.min_h) == (80, 40)
        assert action.within_frame
        assert action.is_cancel("Escape")
        assert not action.is_cancel("q")

    def test_preview_before_start(self):
        action = PendingAction(layer_id="L")
        assert action.preview_from(4, 4, 160, 96) is None
        assert action.final_rect(160, 96) is None

    def test_preview_normalized(self):
        action = PendingAction(layer_id="L")
        action.start(10, 10)
        assert action.preview_from(4, 6, 160, 96) == Rect(4, 6, 7, 5)
        assert action.preview_rect == Rect(4, 6, 7, 5)

    def test_preview_clamped_within_frame(self):
        action = PendingAction(layer_id="L")
        action.start(10, 10)
        assert action.preview_from(500, 500, 160, 96) == Rect(10, 10, 150, 86)

    def test_preview_unclamped(self):
        action = PendingAction(layer_id="L", within_frame=False)
        action.start(10, 10)
        assert action.preview_from(500, 10, 160, 96) == Rect(10, 10, 491, 1)

    def test_final_rect_shifted_inside(self):
        action = PendingAction(layer_id="L")
        action.start(150, 90)
        action.preview_from(155, 92, 160, 96)
        assert action.final_rect(160, 96) == Rect(80, 56, 80, 40)

    def test_final_rect_capped_by_canvas(self):
        action = PendingAction(layer_id="L")
        action.start(0, 0)
        assert action.final_rect(40, 24) == Rect(0, 0, 40, 24)
