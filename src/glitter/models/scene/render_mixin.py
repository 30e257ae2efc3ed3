"""
Scene Render Mixin

Rasterizes the document into the runtime layer buffers and encodes the
composite as a colorized braille frame.

render() is a pure function of (document, visibility, active layer,
overlay): buffers are cleared first and the overlay lives only for the
duration of one call. It never raises on off-canvas geometry.
"""

from typing import Optional

import numpy as np

from glitter.constants import ANSI_ACTIVE, ANSI_OVERLAY
from glitter.services import rasterizer
from glitter.services.rasterizer import OverlayRect


class SceneRenderMixin:
    """Mixin providing drawing primitives and frame rendering for Scene

    This mixin assumes the parent class has:
        - self._doc: SceneDoc
        - self._layers: List[RuntimeLayer]
        - self.active_layer_id: Optional[str]
        - self.get_layer()
    """

    def set_pixel(self, x: int, y: int) -> None:
        """Set one sub-pixel on the current layer (clipped, never raises)"""
        layer = self.get_layer(self.active_layer_id) if self.active_layer_id else None
        if layer is None:
            return
        rasterizer.set_pixel(layer.buffer, x, y)

    def draw_box(self, x: int, y: int, w: int, h: int) -> None:
        """Draw a rectangle outline on the current layer"""
        layer = self.get_layer(self.active_layer_id) if self.active_layer_id else None
        if layer is None:
            return
        rasterizer.draw_box(layer.buffer, x, y, w, h)

    def composite(self) -> np.ndarray:
        """Rasterize every component and OR the visible layers together

        Returns:
            Cell buffer shaped (height_cells, width_cells)
        """
        for layer in self._layers:
            layer.clear()

        prev_active = self.active_layer_id
        try:
            for comp in self._doc.components:
                layer = self.get_layer(comp.layer_id)
                if layer is None or not layer.visible:
                    continue
                self.active_layer_id = layer.id
                rasterizer.rasterize_component(layer.buffer, comp)
        finally:
            self.active_layer_id = prev_active

        visible_buffers = []
        for layer_doc in self._doc.layers:
            if not layer_doc.visible:
                continue
            layer = self.get_layer(layer_doc.id)
            if layer is not None:
                visible_buffers.append(layer.buffer)

        return rasterizer.composite(visible_buffers, (self.height_cells, self.width_cells))

    def render(self, overlay: Optional[OverlayRect] = None,
               active_color: str = ANSI_ACTIVE,
               overlay_color: str = ANSI_OVERLAY) -> str:
        """Render the scene as a braille frame with ANSI highlighting

        Args:
            overlay: Optional drag preview drawn as a dashed outline
            active_color: Escape for cells drawn by the active layer
            overlay_color: Escape for overlay cells when the overlay has no color

        Returns:
            One newline-terminated row per cell row
        """
        final = self.composite()
        shape = final.shape

        overlay_buffer = None
        if overlay is not None and overlay.rect is not None:
            overlay_buffer = np.zeros(shape, dtype=np.uint8)
            rasterizer.draw_dashed_rect(overlay_buffer, overlay.rect)
            if overlay.color:
                overlay_color = overlay.color

        active_mask = np.zeros(shape, dtype=bool)
        active = self.get_layer(self.active_layer_id) if self.active_layer_id else None
        if active is not None and active.visible:
            active_mask = active.buffer != 0

        return rasterizer.encode_frame(
            final,
            active_mask=active_mask,
            overlay=overlay_buffer,
            active_color=active_color,
            overlay_color=overlay_color,
        )
