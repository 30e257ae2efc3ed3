"""
Glitter - Editor Session

Owns the single Scene handle of a running editor together with its undo
history, config and in-flight mouse interaction. Front ends (terminal UI,
agents, tests) drive the editor only through this object.

Every mutating call goes through apply(): the document is snapshotted
first, the mutation runs, and a rejected mutation drops its snapshot
again so history only ever holds states that were actually left behind.

Usage:
    session = EditorSession(Scene(80, 24))
    session.apply("Add layer", lambda s: s.add_layer("frame"))
    session.undo()
    print(session.render(), end="")
"""

import logging
from typing import Any, Callable, List, Optional

from glitter.constants import COMPONENT_BOX
from glitter.models.scene import Scene
from glitter.models.scene_doc import Rect
from glitter.models.errors import UnsupportedNodeWarning
from glitter.services.rasterizer import OverlayRect
from glitter.services.file_operations import save_scene_to_file, load_scene_from_file
from glitter.services.interaction import (
    DragState, MouseEvent, PendingAction, ResizeLimits,
    cell_to_pixel, hit_test_topmost_box_edge,
)
from glitter.utils.config import EditorConfig
from glitter.utils.history_manager import HistoryManager
from glitter.utils.logger import logger_raise

logger = logging.getLogger(__name__)


class EditorSession:
    """Scene handle, undo history and interaction state for one editor"""

    def __init__(self, scene: Optional[Scene] = None, config: Optional[EditorConfig] = None):
        self.config = config if config is not None else EditorConfig()
        self.scene = scene if scene is not None else Scene(80, 24)
        self.history_manager = HistoryManager(max_history=self.config.max_history)
        self.current_file: Optional[str] = None
        self.drag: Optional[DragState] = None
        self.pending: Optional[PendingAction] = None

    # ========================================
    # History
    # ========================================

    def _capture_current_state(self):
        """Snapshot the document plus the active layer pointer"""
        return {
            'doc': self.scene.to_doc().to_dict(),
            'active_layer_id': self.scene.active_layer_id,
        }

    def _restore_state(self, state):
        scene = Scene.from_doc(state['doc'])
        active = state.get('active_layer_id')
        if active and scene.get_layer(active) is not None:
            scene.active_layer_id = active
        self.scene = scene

    def apply(self, description: str, fn: Callable[[Scene], Any]) -> Any:
        """Run a mutation against the scene with undo support

        Args:
            description: Label for the history entry
            fn: Called with the scene; its return value is passed through

        Raises:
            Whatever fn raises; the snapshot taken for it is discarded
        """
        self.history_manager.save_state(self._capture_current_state(), description)
        try:
            return fn(self.scene)
        except Exception:
            self.history_manager.discard_last()
            raise

    def undo(self) -> bool:
        """Restore the scene to the state before the last mutation

        Returns:
            False if there was nothing to undo
        """
        state = self.history_manager.undo()
        if state is None:
            return False

        self._restore_state(state)

        # Interaction state refers to the replaced scene
        self.drag = None
        self.pending = None
        return True

    def can_undo(self) -> bool:
        return self.history_manager.can_undo()

    # ========================================
    # File operations
    # ========================================

    def save(self, path: Optional[str] = None) -> str:
        """Save the scene as compact JSON, defaulting to the current or configured file"""
        path = path or self.current_file or self.config.default_filename
        try:
            save_scene_to_file(self.scene, path)
        except OSError as e:
            logger_raise(e, f"Failed to save {path}", "Save Error")
        self.current_file = path
        self.config.add_recent_file(path)
        return path

    def load(self, path: Optional[str] = None) -> List[UnsupportedNodeWarning]:
        """Replace the scene with a file's contents

        History is cleared; a failed load leaves the current scene in place.

        Returns:
            Warnings for nodes that were skipped
        """
        path = path or self.current_file or self.config.default_filename
        try:
            scene, warnings = load_scene_from_file(path)
        except (OSError, ValueError) as e:
            logger_raise(e, f"Failed to load {path}", "Load Error")

        self.scene = scene
        self.history_manager.clear()
        self.drag = None
        self.pending = None
        self.current_file = path
        self.config.add_recent_file(path)
        return warnings

    # ========================================
    # Rendering
    # ========================================

    def render(self, overlay: Optional[OverlayRect] = None) -> str:
        """Render the current frame

        Without an explicit overlay, the pending action's preview is drawn.
        """
        if overlay is None and self.pending is not None and self.pending.preview_rect is not None:
            overlay = OverlayRect(self.pending.preview_rect)
        return self.scene.render(
            overlay=overlay,
            active_color=self.config.active_color,
            overlay_color=self.config.overlay_color,
        )

    # ========================================
    # Edge-drag resize
    # ========================================

    def _resize_limits(self) -> ResizeLimits:
        return ResizeLimits(
            min_w=self.config.min_drag_w_px,
            min_h=self.config.min_drag_h_px,
            max_w=self.scene.width_px,
            max_h=self.scene.height_px,
        )

    def begin_resize(self, x_cell: int, y_cell: int) -> bool:
        """Start resizing the topmost unlocked box whose edge is under the cell

        Returns:
            True if an edge was hit
        """
        px, py = cell_to_pixel(x_cell, y_cell)
        hit = hit_test_topmost_box_edge(self.scene, px, py, self.config.edge_threshold_px)
        if hit is None:
            return False
        # One history entry for the whole drag
        self.history_manager.save_state(self._capture_current_state(), "Resize box")
        self.drag = DragState(
            component_id=hit.component_id,
            edge=hit.edge,
            start_px=(px, py),
            start_rect=hit.rect,
        )
        logger.debug(f"Begin resize of {hit.component_id} on edge {hit.edge}")
        return True

    def drag_to(self, x_cell: int, y_cell: int) -> Optional[Rect]:
        """Resize the dragged box to follow the mouse"""
        if self.drag is None:
            return None
        px, py = cell_to_pixel(x_cell, y_cell)
        rect = self.drag.rect_at(px, py, self._resize_limits())
        self.scene.update_component_rect(self.drag.component_id, rect, kind=COMPONENT_BOX)
        return rect

    def end_drag(self) -> None:
        """Finish a resize; a drag that changed nothing leaves no history entry"""
        if self.drag is None:
            return
        comp = self.scene.get_component_by_id(self.drag.component_id)
        if comp is not None and comp.rect == self.drag.start_rect:
            self.history_manager.discard_last()
        self.drag = None

    # ========================================
    # Pending box creation
    # ========================================

    def begin_box_drag(self, layer_id: Optional[str] = None) -> PendingAction:
        """Arm a click-drag box creation on a layer (default: active layer)"""
        layer_id = layer_id if layer_id is not None else self.scene.active_layer.id
        self.pending = PendingAction(layer_id=layer_id)
        return self.pending

    def update_pending(self, x_cell: int, y_cell: int) -> Optional[Rect]:
        """Feed a mouse position to the pending action

        The first position sets the anchor corner; later ones move the preview.
        """
        if self.pending is None:
            return None
        px, py = cell_to_pixel(x_cell, y_cell)
        if self.pending.started_at is None:
            self.pending.start(px, py)
            return self.pending.preview_rect
        return self.pending.preview_from(px, py, self.scene.width_px, self.scene.height_px)

    def commit_pending(self):
        """Turn the pending preview into a box component

        Returns:
            The created component, or None if nothing was pending
        """
        pending = self.pending
        self.pending = None
        if pending is None:
            return None
        rect = pending.final_rect(self.scene.width_px, self.scene.height_px)
        if rect is None:
            return None
        return self.apply("Create box", lambda s: s.add_box(rect, layer_id=pending.layer_id))

    def cancel_pending(self) -> None:
        """Drop the pending action; nothing was committed so nothing rolls back"""
        self.pending = None

    def handle_key(self, key: str) -> bool:
        """Cancel the pending action on its cancel key

        Returns:
            True if the key was consumed
        """
        if self.pending is not None and self.pending.is_cancel(key):
            self.cancel_pending()
            return True
        return False

    # ========================================
    # Mouse routing
    # ========================================

    def handle_mouse(self, event: MouseEvent) -> bool:
        """Route a decoded mouse event to box creation or edge-drag resize

        Presses other than the primary button, and cells outside the
        canvas rows, are ignored.

        Returns:
            True if the event was consumed
        """
        if event.x_cell < 1 or event.y_cell < 1 or event.y_cell > self.scene.height_cells:
            return False

        if event.kind == "down":
            if event.button != 0:
                return False
            if self.pending is not None:
                self.pending.start(*cell_to_pixel(event.x_cell, event.y_cell))
                return True
            return self.begin_resize(event.x_cell, event.y_cell)

        if event.kind == "move":
            if self.pending is not None and self.pending.started_at is not None:
                self.update_pending(event.x_cell, event.y_cell)
                return True
            if self.drag is not None:
                self.drag_to(event.x_cell, event.y_cell)
                return True
            return False

        if event.kind == "up":
            if self.pending is not None and self.pending.started_at is not None:
                self.update_pending(event.x_cell, event.y_cell)
                self.commit_pending()
                return True
            if self.drag is not None:
                self.end_drag()
                return True

        return False
