"""
Glitter - Scene Engine

THE MODEL at runtime. Owns the authoritative document plus one derived
pixel buffer per declared layer, and the active-layer pointer.

This class handles:
- Layer management (add, select, cycle, visibility)
- Component management (add box/image, update rect/meta, move, remove)
- Rendering (rasterize, composite, colorized braille frame)
- Snapshot API (to_doc/from_doc, the basis of undo and save/load)

The Scene holds no global state. A host application owns one Scene handle
and replaces it wholesale on load or undo.

Usage:
    scene = Scene(80, 24)
    scene.add_layer("frame")
    box = scene.add_box(Rect(8, 8, 143, 79))
    frame = scene.render()

    # Undo support
    doc = scene.to_doc()
    scene = Scene.from_doc(doc)
"""

import logging
from typing import Any, Dict, List, Optional, Union

from glitter.services.rasterizer import new_buffer
from ..scene_doc import SceneDoc, validate_document
from .runtime_layer import RuntimeLayer
from .layer_mixin import SceneLayerMixin
from .component_mixin import SceneComponentMixin
from .render_mixin import SceneRenderMixin


class Scene(SceneLayerMixin, SceneComponentMixin, SceneRenderMixin):
    """Scene engine with full mutation and render API

    Every public mutation validates before it writes, so after any call
    returns (or raises) the document still satisfies its invariants.

    Properties:
        width_cells, height_cells: Canvas size in terminal cells
        width_px, height_px: Canvas size in pixels (cells * 2, cells * 4)
        active_layer_id: Id of the active layer, or None
        layers: Runtime layers in document order
        components: Components in z-order
    """

    def __init__(self, width_cells: int, height_cells: int):
        """Create an empty scene

        Args:
            width_cells: Canvas width in terminal cells
            height_cells: Canvas height in terminal cells
        """
        self._logger = logging.getLogger('Scene')

        if width_cells < 1 or height_cells < 1:
            raise ValueError(f"Canvas must be at least 1x1 cells, got {width_cells}x{height_cells}")

        self._doc = SceneDoc(width_cells=width_cells, height_cells=height_cells)
        self._layers: List[RuntimeLayer] = []
        self.active_layer_id: Optional[str] = None

        self._logger.debug(f"Created scene {width_cells}x{height_cells} cells")

    # ========================================
    # Properties
    # ========================================

    @property
    def width_cells(self) -> int:
        return self._doc.width_cells

    @property
    def height_cells(self) -> int:
        return self._doc.height_cells

    @property
    def width_px(self) -> int:
        return self._doc.width_px

    @property
    def height_px(self) -> int:
        return self._doc.height_px

    @property
    def next_id(self) -> int:
        """Counter used to mint the next c<N> component id"""
        return self._doc.next_id

    @property
    def meta(self) -> Optional[Dict[str, Any]]:
        """Document-level annotation map"""
        return self._doc.meta

    @meta.setter
    def meta(self, value: Optional[Dict[str, Any]]):
        if value is not None and not isinstance(value, dict):
            raise TypeError("meta must be a dict")
        self._doc.meta = dict(value) if value is not None else None

    # ========================================
    # Snapshot API
    # ========================================

    def to_doc(self) -> SceneDoc:
        """Deep copy of the current document"""
        return self._doc.copy()

    @classmethod
    def from_doc(cls, doc: Union[SceneDoc, Dict[str, Any]]) -> 'Scene':
        """Rebuild a scene from a document

        The document is validated and deep-copied; runtime buffers are built
        from scratch. The last declared layer becomes active (None when the
        document has no layers).

        Args:
            doc: SceneDoc or its dict form

        Returns:
            New Scene

        Raises:
            SchemaError: If the document violates any invariant
        """
        if not isinstance(doc, SceneDoc):
            doc = SceneDoc.from_dict(doc)
        validate_document(doc)

        scene = cls(doc.width_cells, doc.height_cells)
        scene._doc = doc.copy()
        scene._layers = [
            RuntimeLayer(
                id=layer_doc.id,
                name=layer_doc.name,
                visible=layer_doc.visible,
                buffer=new_buffer(scene.width_cells, scene.height_cells),
            )
            for layer_doc in scene._doc.layers
        ]
        scene.active_layer_id = scene._layers[-1].id if scene._layers else None

        scene._logger.debug(
            f"Loaded scene: {len(scene._layers)} layers, {len(scene._doc.components)} components"
        )
        return scene

    def __repr__(self) -> str:
        return (
            f"Scene({self.width_cells}x{self.height_cells} cells, "
            f"layers={len(self._layers)}, components={len(self._doc.components)}, "
            f"active={self.active_layer_id!r})"
        )
