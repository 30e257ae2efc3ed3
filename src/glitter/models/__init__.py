"""
Glitter - Data Models

The MODEL layer: persisted document types, the runtime Scene engine and
the error taxonomy.

Public API:
    from glitter.models import Scene, SceneDoc, Rect, LayerDoc, ComponentDoc
"""

from .errors import (
    SceneError, SchemaError, GeometryError, OutOfBoundsError,
    NotFoundError, NoActiveLayerError, DuplicateIdError,
    UnsupportedNodeWarning,
)
from .scene_doc import (
    Rect, LayerDoc, ComponentDoc, SceneDoc,
    validate_document, validate_rect, validate_rect_in_bounds,
)
from .scene import Scene, RuntimeLayer

__all__ = [
    'Scene', 'RuntimeLayer',
    'Rect', 'LayerDoc', 'ComponentDoc', 'SceneDoc',
    'validate_document', 'validate_rect', 'validate_rect_in_bounds',
    'SceneError', 'SchemaError', 'GeometryError', 'OutOfBoundsError',
    'NotFoundError', 'NoActiveLayerError', 'DuplicateIdError',
    'UnsupportedNodeWarning',
]
