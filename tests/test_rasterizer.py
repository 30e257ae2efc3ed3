"""
Tests for the rasterizer / compositor primitives.

Covers:
- Dot-mask packing of sub-pixels into cells
- Silent clipping of off-buffer and non-finite coordinates
- Box outlines, lines and the dashed overlay outline
- OR-compositing
- ANSI color state machine in encode_frame
"""
import numpy as np
import pytest

from glitter.constants import ANSI_ACTIVE, ANSI_OVERLAY, ANSI_RESET
from glitter.models.scene_doc import Rect, ComponentDoc
from glitter.services import rasterizer
from glitter.services.rasterizer import (
    new_buffer, set_pixel, draw_box, draw_line, draw_dashed_rect,
    composite, rasterize_component, encode_frame,
)


@pytest.fixture
def buf():
    """10x4 cell buffer (20x16 px)"""
    return new_buffer(10, 4)


# ══════════════════════════════════════════════════════════════════════════
# Pixel addressing
# ══════════════════════════════════════════════════════════════════════════

class TestSetPixel:

    @pytest.mark.parametrize("x, y, mask", [
        (0, 0, 0x01), (0, 1, 0x02), (0, 2, 0x04), (0, 3, 0x40),
        (1, 0, 0x08), (1, 1, 0x10), (1, 2, 0x20), (1, 3, 0x80),
    ])
    def test_dot_masks(self, buf, x, y, mask):
        set_pixel(buf, x, y)
        assert buf[0, 0] == mask

    def test_cell_addressing(self, buf):
        set_pixel(buf, 3, 5)  # cell (1, 1), sub (1, 1)
        assert buf[1, 1] == 0x10
        assert buf.sum() == 0x10

    def test_pixels_or_together(self, buf):
        for x in range(2):
            for y in range(4):
                set_pixel(buf, x, y)
        assert buf[0, 0] == 0xFF

    def test_setting_twice_is_stable(self, buf):
        set_pixel(buf, 0, 0)
        set_pixel(buf, 0, 0)
        assert buf[0, 0] == 0x01

    def test_fractional_coordinates_floor(self, buf):
        set_pixel(buf, 1.7, 0.2)
        assert buf[0, 0] == 0x08

    @pytest.mark.parametrize("x, y", [
        (-1, 0), (0, -1), (20, 0), (0, 16), (1000, 1000),
    ])
    def test_out_of_range_is_clipped(self, buf, x, y):
        set_pixel(buf, x, y)
        assert not buf.any()

    @pytest.mark.parametrize("x, y", [
        (float('nan'), 0), (0, float('inf')), (None, 0),
    ])
    def test_non_finite_is_ignored(self, buf, x, y):
        set_pixel(buf, x, y)
        assert not buf.any()


# ══════════════════════════════════════════════════════════════════════════
# Shapes
# ══════════════════════════════════════════════════════════════════════════

class TestShapes:

    def test_box_filling_one_cell(self, buf):
        draw_box(buf, 0, 0, 2, 4)
        assert buf[0, 0] == 0xFF
        assert buf.sum() == 0xFF

    def test_box_is_outline_only(self, buf):
        draw_box(buf, 0, 0, 4, 8)
        # Top-left cell: top edge (x 0..1) and left edge (y 0..3), no interior
        assert buf[0, 0] == 0x01 | 0x08 | 0x02 | 0x04 | 0x40

    def test_box_clipped_at_canvas_edge(self, buf):
        draw_box(buf, 15, 10, 50, 50)
        assert buf.any()

    def test_box_with_nan_is_ignored(self, buf):
        draw_box(buf, 0, 0, float('nan'), 4)
        assert not buf.any()

    def test_diagonal_line(self, buf):
        draw_line(buf, 0, 0, 3, 3)
        assert buf[0, 0] == 0x01 | 0x10
        assert buf[0, 1] == 0x04 | 0x80

    def test_line_single_point(self, buf):
        draw_line(buf, 2, 2, 2, 2)
        assert buf[0, 1] == 0x04

    def test_dashed_rect_steps_by_two(self, buf):
        draw_dashed_rect(buf, Rect(0, 0, 8, 4))
        assert buf[0, 0] == 0x01 | 0x04 | 0x40
        assert buf[0, 1] == 0x01 | 0x40
        assert buf[0, 3] == 0x01 | 0x40 | 0x08 | 0x20

    def test_dashed_rect_differs_from_solid(self):
        dashed = new_buffer(10, 4)
        solid = new_buffer(10, 4)
        draw_dashed_rect(dashed, Rect(0, 0, 8, 4))
        draw_box(solid, 0, 0, 8, 4)
        assert not np.array_equal(dashed, solid)

    def test_dashed_rect_clamped_to_buffer(self, buf):
        draw_dashed_rect(buf, Rect(-10, -10, 100, 100))
        assert buf[0, 0] != 0
        assert buf[3, 9] != 0


class TestRasterizeComponent:

    def test_box_component(self, buf):
        comp = ComponentDoc("c1", "box", "L", Rect(0, 0, 2, 4))
        rasterize_component(buf, comp)
        assert buf[0, 0] == 0xFF

    def test_image_component_has_diagonals(self):
        box = new_buffer(10, 4)
        image = new_buffer(10, 4)
        rasterize_component(box, ComponentDoc("c1", "box", "L", Rect(0, 0, 12, 12)))
        rasterize_component(image, ComponentDoc("c2", "image", "L", Rect(0, 0, 12, 12)))
        # Diagonal passes through pixel (5, 5), cell (2, 1), inside the outline
        assert box[1, 2] == 0
        assert image[1, 2] != 0
        assert np.array_equal(image & box, box)

    def test_unrenderable_type_draws_nothing(self, buf):
        rasterize_component(buf, ComponentDoc("t1", "text", "L", Rect(0, 0, 8, 8)))
        assert not buf.any()


# ══════════════════════════════════════════════════════════════════════════
# Compositing
# ══════════════════════════════════════════════════════════════════════════

class TestComposite:

    def test_or_merge(self):
        a = new_buffer(2, 1)
        b = new_buffer(2, 1)
        set_pixel(a, 0, 0)
        set_pixel(b, 1, 0)
        set_pixel(b, 2, 0)
        final = composite([a, b], (1, 2))
        assert final.tolist() == [[0x09, 0x01]]

    def test_order_independent(self):
        a = new_buffer(10, 4)
        b = new_buffer(10, 4)
        draw_box(a, 0, 0, 10, 10)
        draw_box(b, 4, 4, 10, 10)
        assert np.array_equal(composite([a, b], a.shape), composite([b, a], a.shape))

    def test_inputs_untouched(self):
        a = new_buffer(2, 1)
        set_pixel(a, 0, 0)
        final = composite([a], a.shape)
        final[0, 0] = 0xFF
        assert a[0, 0] == 0x01

    def test_empty_list(self):
        assert not composite([], (2, 3)).any()


# ══════════════════════════════════════════════════════════════════════════
# Frame encoding
# ══════════════════════════════════════════════════════════════════════════

class TestEncodeFrame:

    def test_blank_frame(self):
        assert encode_frame(new_buffer(3, 2)) == "⠀⠀⠀\n⠀⠀⠀\n"

    def test_glyph_offsets(self):
        final = np.array([[0x01, 0xFF]], dtype=np.uint8)
        assert encode_frame(final) == "⠁⣿\n"

    def test_active_run_opens_and_closes_once(self):
        final = np.array([[0x01, 0x01, 0x00]], dtype=np.uint8)
        mask = np.array([[True, True, False]])
        out = encode_frame(final, active_mask=mask)
        assert out == f"{ANSI_ACTIVE}⠁⠁{ANSI_RESET}⠀\n"
        assert out.count(ANSI_ACTIVE) == 1

    def test_open_color_reset_before_newline(self):
        final = np.array([[0x00, 0x01], [0x01, 0x00]], dtype=np.uint8)
        mask = final != 0
        out = encode_frame(final, active_mask=mask)
        assert out == (
            f"⠀{ANSI_ACTIVE}⠁{ANSI_RESET}\n"
            f"{ANSI_ACTIVE}⠁{ANSI_RESET}⠀\n"
        )

    def test_overlay_wins_over_active(self):
        final = np.array([[0x01, 0x01, 0x00]], dtype=np.uint8)
        mask = np.array([[True, True, False]])
        overlay = np.array([[0x00, 0x02, 0x00]], dtype=np.uint8)
        out = encode_frame(final, active_mask=mask, overlay=overlay)
        assert out == f"{ANSI_ACTIVE}⠁{ANSI_OVERLAY}⠃{ANSI_RESET}⠀\n"

    def test_overlay_on_empty_cell(self):
        final = new_buffer(2, 1)
        overlay = np.array([[0x00, 0x40]], dtype=np.uint8)
        out = encode_frame(final, overlay=overlay)
        assert out == f"⠀{ANSI_OVERLAY}⡀{ANSI_RESET}\n"

    def test_reset_between_overlay_and_active(self):
        final = np.array([[0x00, 0x01, 0x01]], dtype=np.uint8)
        mask = np.array([[False, True, True]])
        overlay = np.array([[0x02, 0x00, 0x00]], dtype=np.uint8)
        out = encode_frame(final, active_mask=mask, overlay=overlay, overlay_color="\x1b[41m")
        assert out == f"\x1b[41m⠂{ANSI_RESET}{ANSI_ACTIVE}⠁⠁{ANSI_RESET}\n"

    def test_overlay_background_does_not_leak_into_scene(self):
        from glitter.models import Scene, Rect
        from glitter.services.rasterizer import OverlayRect

        scene = Scene(4, 1)
        scene.add_layer("L")
        scene.add_box(Rect(2, 0, 6, 4))
        out = scene.render(OverlayRect(Rect(0, 0, 2, 4), color="\x1b[41m"))
        assert out.startswith("\x1b[41m")
        assert f"{ANSI_RESET}{ANSI_ACTIVE}" in out

    def test_custom_colors(self):
        final = np.array([[0x01]], dtype=np.uint8)
        out = encode_frame(final, active_mask=final != 0, active_color="<A>")
        assert out == f"<A>⠁{ANSI_RESET}\n"

    def test_neutral_frame_has_no_escapes(self):
        final = np.full((2, 2), 0xFF, dtype=np.uint8)
        assert "\x1b" not in rasterizer.encode_frame(final)
