"""
Scene Layer Management Mixin

This mixin provides layer operations for the Scene engine.

Methods:
    - add_layer
    - set_active_layer
    - cycle_active_layer
    - set_layer_visible
    - get_layer
    - active_layer (property)
"""

from typing import List, Optional

from glitter.services.rasterizer import new_buffer
from ..scene_doc import LayerDoc
from ..errors import DuplicateIdError, NotFoundError, NoActiveLayerError
from .runtime_layer import RuntimeLayer


class SceneLayerMixin:
    """Mixin providing layer management operations for Scene

    This mixin assumes the parent class has:
        - self._doc: SceneDoc
        - self._layers: List[RuntimeLayer]
        - self.active_layer_id: Optional[str]
        - self._logger: logging.Logger instance
    """

    @property
    def layers(self) -> List[RuntimeLayer]:
        """Runtime layers in document order (read-only view)"""
        return list(self._layers)

    @property
    def active_layer(self) -> RuntimeLayer:
        """Get the active runtime layer

        Raises:
            NoActiveLayerError: If no layer is active
        """
        layer = self.get_layer(self.active_layer_id) if self.active_layer_id else None
        if layer is None:
            raise NoActiveLayerError("No active layer")
        return layer

    def get_layer(self, name: str) -> Optional[RuntimeLayer]:
        """Find a runtime layer by id, or None"""
        for layer in self._layers:
            if layer.id == name:
                return layer
        return None

    def add_layer(self, name: str) -> RuntimeLayer:
        """Append a new visible layer and make it active

        Args:
            name: Layer name, which is also its id

        Returns:
            The created runtime layer

        Raises:
            DuplicateIdError: If a layer with this name already exists
        """
        if not isinstance(name, str) or not name:
            raise ValueError(f"Invalid layer name: {name!r}")
        if any(layer.id == name for layer in self._doc.layers):
            raise DuplicateIdError(f'Layer "{name}" already exists')

        layer_doc = LayerDoc(id=name, name=name, visible=True)
        layer = RuntimeLayer(
            id=layer_doc.id,
            name=layer_doc.name,
            visible=layer_doc.visible,
            buffer=new_buffer(self.width_cells, self.height_cells),
        )

        self._doc.layers.append(layer_doc)
        self._layers.append(layer)
        self.active_layer_id = layer.id

        self._logger.debug(f"Added layer: {name}")
        return layer

    def set_active_layer(self, name: str) -> None:
        """Make an existing layer active

        Raises:
            NotFoundError: If the layer does not exist
        """
        layer = self.get_layer(name)
        if layer is None:
            raise NotFoundError(f'Layer "{name}" not found')
        self.active_layer_id = layer.id
        self._logger.debug(f"Active layer: {name}")

    def cycle_active_layer(self, direction: int) -> None:
        """Step the active layer forward (1) or backward (-1), wrapping

        No-op when the document has no layers. An unknown current layer
        counts as index 0.
        """
        layers = self._doc.layers
        if not layers:
            return
        current_index = next(
            (i for i, layer in enumerate(layers) if layer.id == self.active_layer_id),
            0,
        )
        next_index = (current_index + direction) % len(layers)
        self.active_layer_id = layers[next_index].id
        self._logger.debug(f"Cycled active layer to: {self.active_layer_id}")

    def set_layer_visible(self, name: str, visible: bool) -> None:
        """Toggle layer visibility in the document and the runtime layer

        Raises:
            NotFoundError: If the layer does not exist
        """
        layer = self.get_layer(name)
        if layer is None:
            raise NotFoundError(f'Layer "{name}" not found')
        for layer_doc in self._doc.layers:
            if layer_doc.id == name:
                layer_doc.visible = bool(visible)
        layer.visible = bool(visible)
        self._logger.debug(f"Set layer {name} visible: {visible}")
