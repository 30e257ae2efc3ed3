"""
Scene Component Management Mixin

Component CRUD for the Scene engine. Every mutation validates first and
commits second, so a rejected call leaves the document untouched.

Methods:
    - add_box / add_image
    - get_component_by_id
    - update_component_rect / update_box_rect
    - update_component_meta
    - move_component
    - remove_component
"""

import copy
from typing import Any, Dict, List, Mapping, Optional, Union

from glitter.constants import (
    COMPONENT_BOX, COMPONENT_IMAGE,
    COMPONENT_ID_PREFIX,
)
from ..scene_doc import Rect, ComponentDoc, validate_rect_in_bounds
from ..errors import (
    SceneError, NotFoundError, NoActiveLayerError, DuplicateIdError,
)

RectLike = Union[Rect, Mapping[str, Any]]


def _coerce_rect(rect: RectLike) -> Rect:
    """Copy a Rect or {x, y, w, h} mapping into a fresh Rect"""
    if isinstance(rect, Rect):
        return rect.copy()
    return Rect.from_dict(rect)


class SceneComponentMixin:
    """Mixin providing component operations for Scene

    This mixin assumes the parent class has:
        - self._doc: SceneDoc
        - self.active_layer_id: Optional[str]
        - self.width_px / self.height_px
        - self._logger: logging.Logger instance
    """

    @property
    def components(self) -> List[ComponentDoc]:
        """Components in z-order, bottom first (live objects, list is a copy)"""
        return list(self._doc.components)

    def get_component_by_id(self, component_id: str) -> Optional[ComponentDoc]:
        """Find a component by id, or None"""
        for comp in self._doc.components:
            if comp.id == component_id:
                return comp
        return None

    # ========================================
    # Creation
    # ========================================

    def add_box(self, rect: RectLike, layer_id: Optional[str] = None,
                id: Optional[str] = None, meta: Optional[Dict[str, Any]] = None) -> ComponentDoc:
        """Add a box component

        No pixels are drawn here; drawing happens at render time.

        Args:
            rect: Rectangle in pixels, must lie fully inside the canvas
            layer_id: Target layer, defaults to the active layer
            id: Explicit component id, defaults to the next free c<N>
            meta: Optional annotation map (copied)

        Returns:
            The created component

        Raises:
            NoActiveLayerError: If no layer_id is given and none is active
            NotFoundError: If layer_id does not exist
            GeometryError: If the rectangle is malformed
            OutOfBoundsError: If the rectangle leaves the canvas
            DuplicateIdError: If the explicit id is already used
        """
        return self._add_component(COMPONENT_BOX, rect, layer_id, id, meta)

    def add_image(self, rect: RectLike, layer_id: Optional[str] = None,
                  id: Optional[str] = None, meta: Optional[Dict[str, Any]] = None) -> ComponentDoc:
        """Add an image placeholder component (same rules as add_box)"""
        return self._add_component(COMPONENT_IMAGE, rect, layer_id, id, meta)

    def _add_component(self, kind: str, rect: RectLike, layer_id: Optional[str],
                       component_id: Optional[str], meta: Optional[Dict[str, Any]]) -> ComponentDoc:
        layer_id = self._resolve_layer_id(layer_id)

        rect = _coerce_rect(rect)
        validate_rect_in_bounds(rect, self.width_px, self.height_px, name=kind)

        if meta is not None and not isinstance(meta, dict):
            raise TypeError("meta must be a dict")

        if component_id is None:
            component_id, next_id = self._mint_component_id()
        else:
            if not isinstance(component_id, str) or not component_id:
                raise SceneError(f"Invalid component id: {component_id!r}")
            if self.get_component_by_id(component_id) is not None:
                raise DuplicateIdError(f'Component "{component_id}" already exists')
            next_id = self._doc.next_id

        comp = ComponentDoc(
            id=component_id,
            type=kind,
            layer_id=layer_id,
            rect=rect,
            meta=copy.deepcopy(meta) if meta is not None else None,
        )

        self._doc.components.append(comp)
        self._doc.next_id = next_id

        self._logger.debug(f"Added {kind} {component_id} on layer {layer_id}: {rect}")
        return comp

    def _resolve_layer_id(self, layer_id: Optional[str]) -> str:
        layer_id = layer_id if layer_id is not None else self.active_layer_id
        if not layer_id:
            raise NoActiveLayerError("No active layer")
        if not any(layer.id == layer_id for layer in self._doc.layers):
            raise NotFoundError(f'Layer "{layer_id}" not found')
        return layer_id

    def _mint_component_id(self):
        """Next free c<N> id and the counter value to commit after using it

        Ids loaded from disk may already occupy c<nextId>; those are skipped
        rather than reported as collisions.
        """
        used = {comp.id for comp in self._doc.components}
        n = self._doc.next_id
        while f"{COMPONENT_ID_PREFIX}{n}" in used:
            n += 1
        return f"{COMPONENT_ID_PREFIX}{n}", n + 1

    # ========================================
    # Mutation
    # ========================================

    def _require_component(self, component_id: str, kind: Optional[str] = None) -> ComponentDoc:
        comp = self.get_component_by_id(component_id)
        if comp is None:
            raise NotFoundError(f'Component "{component_id}" not found')
        if kind is not None and comp.type != kind:
            raise SceneError(f'Component "{component_id}" is not a {kind}')
        return comp

    def update_component_rect(self, component_id: str, rect: RectLike,
                              kind: Optional[str] = None) -> None:
        """Replace a component's rectangle by value

        Args:
            component_id: Component to update
            rect: New rectangle, must lie fully inside the canvas
            kind: If given, the component must be of this type

        Raises:
            NotFoundError: If the id is unknown
            SceneError: If the component is not of the requested kind
            GeometryError / OutOfBoundsError: If the rectangle is rejected
        """
        comp = self._require_component(component_id, kind)
        rect = _coerce_rect(rect)
        validate_rect_in_bounds(rect, self.width_px, self.height_px, name=f'component "{component_id}" rect')
        comp.rect = rect
        self._logger.debug(f"Updated rect of {component_id}: {rect}")

    def update_box_rect(self, component_id: str, rect: RectLike) -> None:
        """update_component_rect restricted to box components"""
        self.update_component_rect(component_id, rect, kind=COMPONENT_BOX)

    def move_component(self, component_id: str, dx: int, dy: int) -> None:
        """Translate a component, rejecting moves that leave the canvas"""
        comp = self._require_component(component_id)
        x, y, w, h = comp.rect
        self.update_component_rect(component_id, Rect(x + dx, y + dy, w, h))

    def update_component_meta(self, component_id: str, meta: Optional[Dict[str, Any]]) -> None:
        """Replace a component's meta map wholesale (None clears it)

        Raises:
            NotFoundError: If the id is unknown
        """
        comp = self._require_component(component_id)
        if meta is not None and not isinstance(meta, dict):
            raise TypeError("meta must be a dict")
        comp.meta = copy.deepcopy(meta) if meta is not None else None
        self._logger.debug(f"Updated meta of {component_id}: {meta}")

    def remove_component(self, component_id: str) -> None:
        """Delete a component; unknown ids are ignored so replays stay idempotent"""
        for index, comp in enumerate(self._doc.components):
            if comp.id == component_id:
                del self._doc.components[index]
                self._logger.debug(f"Removed component: {component_id}")
                return
