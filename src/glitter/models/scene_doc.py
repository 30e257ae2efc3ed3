"""
Glitter - Scene Document Model

The persisted shape of a design: rectangles, components, layers and the
document aggregate. Pure data plus validation, no behavior.

The dict codec on each dataclass (to_dict/from_dict) is the single
definition of "document state". It is used for deep copies in the Scene
engine, for undo snapshots, and as the source for the compact file format.

Usage:
    doc = SceneDoc.from_dict(json.loads(text))
    validate_document(doc)
    data = doc.to_dict()
"""

import copy
import math
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Dict, List, Optional

from glitter.constants import (
    SCHEMA_VERSION, UNITS,
    CELL_WIDTH_PX, CELL_HEIGHT_PX,
    RENDERABLE_COMPONENT_TYPES,
)
from .errors import SchemaError, GeometryError, OutOfBoundsError


# ========================================
# Data
# ========================================

@dataclass
class Rect:
    """Axis-aligned rectangle in pixel coordinates, origin top-left"""
    x: int
    y: int
    w: int
    h: int

    def __iter__(self):
        """Allow tuple unpacking: x, y, w, h = rect"""
        return iter((self.x, self.y, self.w, self.h))

    @property
    def right(self) -> int:
        """Exclusive right edge (x + w)"""
        return self.x + self.w

    @property
    def bottom(self) -> int:
        """Exclusive bottom edge (y + h)"""
        return self.y + self.h

    def copy(self) -> 'Rect':
        return Rect(self.x, self.y, self.w, self.h)

    def to_dict(self) -> Dict[str, int]:
        return {'x': self.x, 'y': self.y, 'w': self.w, 'h': self.h}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Rect':
        try:
            return cls(data['x'], data['y'], data['w'], data['h'])
        except (KeyError, TypeError) as e:
            raise SchemaError(f"Invalid rect: {data!r}") from e


@dataclass
class LayerDoc:
    """Persisted layer record

    The id doubles as the human-facing name so saved files diff cleanly.
    """
    id: str
    name: str
    visible: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'name': self.name, 'visible': self.visible}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LayerDoc':
        try:
            return cls(data['id'], data['name'], bool(data.get('visible', True)))
        except (KeyError, TypeError) as e:
            raise SchemaError(f"Invalid layer: {data!r}") from e


@dataclass
class ComponentDoc:
    """Persisted component, discriminated by `type`

    Variants:
        box   - rectangle outline
        image - rectangle placeholder for an image

    meta is a free-form annotation map. meta['locked'] suppresses
    interactive editing.
    """
    id: str
    type: str
    layer_id: str
    rect: Rect
    meta: Optional[Dict[str, Any]] = None

    @property
    def locked(self) -> bool:
        return bool(self.meta and self.meta.get('locked'))

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'type': self.type,
            'layerId': self.layer_id,
            'rect': self.rect.to_dict(),
        }
        if self.meta is not None:
            data['meta'] = copy.deepcopy(self.meta)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ComponentDoc':
        try:
            meta = data.get('meta')
            return cls(
                id=data['id'],
                type=data['type'],
                layer_id=data['layerId'],
                rect=Rect.from_dict(data['rect']),
                meta=copy.deepcopy(meta) if meta is not None else None,
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise SchemaError(f"Invalid component: {data!r}") from e


@dataclass
class SceneDoc:
    """The persisted aggregate and single source of truth for a design"""
    width_cells: int
    height_cells: int
    layers: List[LayerDoc] = field(default_factory=list)
    components: List[ComponentDoc] = field(default_factory=list)
    next_id: int = 1
    meta: Optional[Dict[str, Any]] = None
    schema_version: int = SCHEMA_VERSION
    units: str = UNITS

    @property
    def width_px(self) -> int:
        return self.width_cells * CELL_WIDTH_PX

    @property
    def height_px(self) -> int:
        return self.height_cells * CELL_HEIGHT_PX

    def copy(self) -> 'SceneDoc':
        """Deep copy through the dict codec"""
        return SceneDoc.from_dict(self.to_dict())

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'schemaVersion': self.schema_version,
            'units': self.units,
            'size': {
                'widthCells': self.width_cells,
                'heightCells': self.height_cells,
            },
            'layers': [layer.to_dict() for layer in self.layers],
            'components': [comp.to_dict() for comp in self.components],
            'state': {'nextId': self.next_id},
        }
        if self.meta is not None:
            data['meta'] = copy.deepcopy(self.meta)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SceneDoc':
        """Build a document from its dict form

        Only the shape is checked here; call validate_document() for the
        invariants.

        Raises:
            SchemaError: If a required key is missing or has the wrong shape
        """
        if not isinstance(data, dict):
            raise SchemaError(f"Invalid document: expected object, got {type(data).__name__}")
        try:
            size = data['size']
            meta = data.get('meta')
            return cls(
                width_cells=size['widthCells'],
                height_cells=size['heightCells'],
                layers=[LayerDoc.from_dict(layer) for layer in data['layers']],
                components=[ComponentDoc.from_dict(comp) for comp in data['components']],
                next_id=data['state']['nextId'],
                meta=copy.deepcopy(meta) if meta is not None else None,
                schema_version=data.get('schemaVersion'),
                units=data.get('units'),
            )
        except (KeyError, TypeError) as e:
            raise SchemaError(f"Invalid document: missing or malformed {e}") from e


# ========================================
# Validation
# ========================================

def _is_finite_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def validate_rect(rect: Rect, name: str = "rect") -> None:
    """Check a rectangle is well-formed

    Args:
        rect: Rectangle to check
        name: Label used in the error message

    Raises:
        GeometryError: If any field is non-finite or w/h < 1
    """
    if not all(_is_finite_number(v) for v in (rect.x, rect.y, rect.w, rect.h)):
        raise GeometryError(f"Invalid {name}: non-finite number")
    if rect.w < 1 or rect.h < 1:
        raise GeometryError(f"Invalid {name}: w/h must be >= 1")


def validate_rect_in_bounds(rect: Rect, width_px: int, height_px: int, name: str = "rect") -> None:
    """Check a rectangle is well-formed and fully inside the canvas

    Raises:
        GeometryError: If the rectangle is malformed
        OutOfBoundsError: If the rectangle leaves the canvas
    """
    validate_rect(rect, name)
    if rect.x < 0 or rect.y < 0 or rect.right > width_px or rect.bottom > height_px:
        raise OutOfBoundsError(
            f"cannot place {name} outside of the canvas. "
            f"Canvas height: {height_px}, canvas width: {width_px}",
            width_px=width_px,
            height_px=height_px,
        )


def validate_document(doc: SceneDoc) -> None:
    """Check every document invariant, rejecting the whole document on the first failure

    Raises:
        SchemaError: On unsupported version/units, bad size, layer id/name
            mismatch, duplicate layer or component ids, unsupported component
            type, orphaned layer reference, malformed rect, or invalid nextId
    """
    if doc.schema_version != SCHEMA_VERSION:
        raise SchemaError(f"Unsupported schemaVersion: {doc.schema_version}")

    if doc.units != UNITS:
        raise SchemaError(f"Unsupported units: {doc.units}")

    for value, label in ((doc.width_cells, 'widthCells'), (doc.height_cells, 'heightCells')):
        if not isinstance(value, int) or isinstance(value, bool) or value < 1:
            raise SchemaError(f"Invalid size.{label}: {value!r}")

    layer_ids = set()
    for layer in doc.layers:
        if not isinstance(layer.id, str) or not layer.id:
            raise SchemaError(f"Invalid layer id: {layer.id!r}")
        if layer.id != layer.name:
            raise SchemaError(
                f'Layer id must equal name (got id="{layer.id}", name="{layer.name}")'
            )
        if layer.id in layer_ids:
            raise SchemaError(f'Duplicate layer name/id: "{layer.id}"')
        layer_ids.add(layer.id)

    component_ids = set()
    for comp in doc.components:
        if comp.id in component_ids:
            raise SchemaError(f'Duplicate component id: "{comp.id}"')
        component_ids.add(comp.id)

        if comp.type not in RENDERABLE_COMPONENT_TYPES:
            raise SchemaError(f'Unsupported component type: "{comp.type}"')

        if comp.layer_id not in layer_ids:
            raise SchemaError(
                f'Component "{comp.id}" references missing layer "{comp.layer_id}"'
            )

        try:
            validate_rect(comp.rect, f'component "{comp.id}" rect')
        except GeometryError as e:
            raise SchemaError(str(e)) from e

        if comp.meta is not None and not isinstance(comp.meta, dict):
            raise SchemaError(f'Component "{comp.id}" meta must be an object')

    next_id = doc.next_id
    if not isinstance(next_id, int) or isinstance(next_id, bool) or next_id < 1:
        raise SchemaError(f"Invalid state.nextId: {next_id!r}")

    if doc.meta is not None and not isinstance(doc.meta, dict):
        raise SchemaError("Invalid meta: expected object")
