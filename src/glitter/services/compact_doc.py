"""
Glitter - Compact Document Codec

Bidirectional mapping between SceneDoc and the terse array-tuple format
used on disk and handed to agents:

    {
      "v": 1,
      "w": 160, "h": 96,                 # canvas size in pixels
      "layers": ["frame", "components"],
      "nodes": [
        ["box", "frameBox", "frame", [4, 8, 152, 80]],
        ["box", "c1", "components", [45, 34, 65, 45], {"locked": true}]
      ],
      "meta": {...}                      # optional
    }

Malformed envelopes are hard failures (SchemaError). Nodes of a type this
version cannot render are dropped with an UnsupportedNodeWarning instead.
"""

import copy
import logging
import math
from numbers import Real
from typing import Any, Dict, List, Tuple

from glitter.constants import (
    COMPACT_VERSION,
    CELL_WIDTH_PX, CELL_HEIGHT_PX,
    COMPONENT_ID_PREFIX,
    RENDERABLE_COMPONENT_TYPES, RESERVED_COMPONENT_TYPES,
)
from glitter.models.scene_doc import Rect, LayerDoc, ComponentDoc, SceneDoc
from glitter.models.errors import SchemaError, UnsupportedNodeWarning

logger = logging.getLogger(__name__)


def compact_from_doc(doc: SceneDoc) -> Dict[str, Any]:
    """Convert a document to its compact form

    Components of non-renderable types are skipped. Empty meta maps are
    omitted entirely rather than written as {}.

    Args:
        doc: Source document (not modified)

    Returns:
        JSON-compatible compact dict
    """
    nodes = []
    for comp in doc.components:
        if comp.type not in RENDERABLE_COMPONENT_TYPES:
            continue
        rect = [comp.rect.x, comp.rect.y, comp.rect.w, comp.rect.h]
        node = [comp.type, comp.id, comp.layer_id, rect]
        if comp.meta:
            node.append(copy.deepcopy(comp.meta))
        nodes.append(node)

    compact = {
        'v': COMPACT_VERSION,
        'w': doc.width_px,
        'h': doc.height_px,
        'layers': [layer.id for layer in doc.layers],
        'nodes': nodes,
    }
    if doc.meta:
        compact['meta'] = copy.deepcopy(doc.meta)

    return compact


def doc_from_compact(compact: Dict[str, Any]) -> Tuple[SceneDoc, List[UnsupportedNodeWarning]]:
    """Rebuild a document from its compact form

    All layers come back visible. nextId is the smallest N such that c<N>
    is not a loaded component id.

    Args:
        compact: Parsed compact JSON

    Returns:
        Tuple of (document, warnings for dropped nodes)

    Raises:
        SchemaError: If the envelope or any node tuple is malformed
    """
    validate_compact(compact)

    layers = [LayerDoc(id=layer_id, name=layer_id, visible=True) for layer_id in compact['layers']]

    warnings = []
    components = []
    for node in compact['nodes']:
        node_type, node_id, layer_id, rect = node[:4]
        meta = node[4] if len(node) == 5 else None

        if node_type not in RENDERABLE_COMPONENT_TYPES:
            warning = UnsupportedNodeWarning(node_type=str(node_type), node_id=node_id)
            if node_type not in RESERVED_COMPONENT_TYPES:
                logger.warning(f"Unknown node type '{node_type}' for node '{node_id}', skipped")
            else:
                logger.warning(f"Node type '{node_type}' is not renderable yet, skipped '{node_id}'")
            warnings.append(warning)
            continue

        components.append(ComponentDoc(
            id=node_id,
            type=node_type,
            layer_id=layer_id,
            rect=Rect(*rect),
            meta=copy.deepcopy(meta) if meta else None,
        ))

    meta = compact.get('meta')
    doc = SceneDoc(
        width_cells=int(compact['w']) // CELL_WIDTH_PX,
        height_cells=int(compact['h']) // CELL_HEIGHT_PX,
        layers=layers,
        components=components,
        next_id=_next_component_id({comp.id for comp in components}),
        meta=copy.deepcopy(meta) if meta else None,
    )

    logger.debug(
        f"Decoded compact doc: {len(layers)} layers, {len(components)} components, "
        f"{len(warnings)} warnings"
    )
    return doc, warnings


def validate_compact(compact: Any) -> None:
    """Check the compact envelope and every node tuple

    Raises:
        SchemaError: On the first malformed field
    """
    if not isinstance(compact, dict):
        raise SchemaError("Invalid compact document: expected object")

    version = compact.get('v')
    if version != COMPACT_VERSION or isinstance(version, bool):
        raise SchemaError(f"Unsupported compact schema version: {version}")

    w = compact.get('w')
    h = compact.get('h')
    if not _is_finite_number(w) or not _is_finite_number(h):
        raise SchemaError("Invalid size: w/h must be finite numbers")
    if w < CELL_WIDTH_PX or h < CELL_HEIGHT_PX:
        raise SchemaError("Invalid size: w/h too small")
    if w % CELL_WIDTH_PX != 0 or h % CELL_HEIGHT_PX != 0:
        raise SchemaError(
            f"Invalid size: w must be divisible by {CELL_WIDTH_PX} and h by {CELL_HEIGHT_PX}"
        )

    layers = compact.get('layers')
    if not isinstance(layers, list):
        raise SchemaError("Invalid layers: expected array")
    layer_ids = set()
    for layer_id in layers:
        if not isinstance(layer_id, str) or not layer_id:
            raise SchemaError(f"Invalid layer id: {layer_id!r}")
        if layer_id in layer_ids:
            raise SchemaError(f'Duplicate layer id: "{layer_id}"')
        layer_ids.add(layer_id)

    nodes = compact.get('nodes')
    if not isinstance(nodes, list):
        raise SchemaError("Invalid nodes: expected array")
    node_ids = set()
    for node in nodes:
        if not isinstance(node, list) or len(node) not in (4, 5):
            raise SchemaError("Invalid node: expected tuple of length 4 or 5")
        node_type, node_id, layer_id, rect = node[:4]
        if not isinstance(node_type, str):
            raise SchemaError(f"Invalid node type: {node_type!r}")
        if not isinstance(node_id, str) or not node_id:
            raise SchemaError(f"Invalid node id: {node_id!r}")
        if node_id in node_ids:
            raise SchemaError(f'Duplicate node id: "{node_id}"')
        node_ids.add(node_id)
        if not isinstance(layer_id, str) or layer_id not in layer_ids:
            raise SchemaError(f'Unknown layer id: "{layer_id}"')
        _validate_rect_array(rect)
        if len(node) == 5 and not isinstance(node[4], dict):
            raise SchemaError("Invalid node meta: expected object")

    meta = compact.get('meta')
    if meta is not None and not isinstance(meta, dict):
        raise SchemaError("Invalid meta: expected object")


def _validate_rect_array(rect: Any) -> None:
    if not isinstance(rect, list) or len(rect) != 4:
        raise SchemaError("Invalid rect: expected [x,y,w,h]")
    if not all(_is_finite_number(value) for value in rect):
        raise SchemaError("Invalid rect: non-finite number")
    if rect[2] < 1 or rect[3] < 1:
        raise SchemaError("Invalid rect: w/h must be >= 1")


def _is_finite_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def _next_component_id(ids) -> int:
    next_id = 1
    while f"{COMPONENT_ID_PREFIX}{next_id}" in ids:
        next_id += 1
    return next_id
