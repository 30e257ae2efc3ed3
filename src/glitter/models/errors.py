"""
Glitter - Error Taxonomy

Hard failures are exceptions; soft failures (features this version cannot
render) are warning records collected alongside a successfully loaded
document.

All exceptions derive from ValueError so callers that only know about
ValueError still catch them.
"""

from dataclasses import dataclass
from typing import Dict


class SceneError(ValueError):
    """Base class for every rejected scene operation"""


class SchemaError(SceneError):
    """Persisted document is structurally invalid"""


class GeometryError(SceneError):
    """Rectangle is malformed (non-finite or w/h < 1)"""


class OutOfBoundsError(GeometryError):
    """Rectangle does not fit inside the canvas

    Attributes:
        width_px: Canvas width in pixels
        height_px: Canvas height in pixels
    """

    def __init__(self, message: str, width_px: int, height_px: int):
        super().__init__(message)
        self.width_px = width_px
        self.height_px = height_px


class NotFoundError(SceneError):
    """Unknown layer or component id"""


class NoActiveLayerError(NotFoundError):
    """No explicit layer given and no active layer set"""


class DuplicateIdError(SceneError):
    """Layer or component id already in use"""


@dataclass(frozen=True)
class UnsupportedNodeWarning:
    """A compact node that was dropped on load because it cannot be rendered"""
    node_type: str
    node_id: str
    type: str = "unsupportedNode"

    def to_dict(self) -> Dict[str, str]:
        return {
            'type': self.type,
            'nodeType': self.node_type,
            'nodeId': self.node_id,
        }

    def __str__(self) -> str:
        return f"Unsupported node '{self.node_id}' of type '{self.node_type}' was skipped"
