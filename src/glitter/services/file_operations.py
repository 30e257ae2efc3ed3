"""
Glitter - File Operations Service

Loads and saves scenes as compact JSON documents (UTF-8).
Separates file I/O from the Scene model; load and save are synchronous.
"""

import json
import logging
from typing import List, Tuple

from glitter.models.scene import Scene
from glitter.models.errors import SchemaError, UnsupportedNodeWarning
from .compact_doc import compact_from_doc, doc_from_compact

logger = logging.getLogger(__name__)


def dumps_compact(scene: Scene) -> str:
    """Serialize a scene to compact JSON text (newline-terminated)"""
    return json.dumps(compact_from_doc(scene.to_doc()), indent=2, ensure_ascii=False) + "\n"


def loads_compact(text: str) -> Tuple[Scene, List[UnsupportedNodeWarning]]:
    """Parse compact JSON text into a new scene

    Returns:
        Tuple of (scene, warnings)

    Raises:
        SchemaError: If the text is not valid JSON or not a valid compact document
    """
    try:
        compact = json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaError(f"Invalid JSON: {e}") from e

    doc, warnings = doc_from_compact(compact)
    return Scene.from_doc(doc), warnings


def save_scene_to_file(scene: Scene, filename: str) -> None:
    """Save a scene as a compact JSON file

    Args:
        scene: Scene to save
        filename: Path to write

    Raises:
        OSError: If the file cannot be written
    """
    text = dumps_compact(scene)
    with open(filename, 'w', encoding='utf-8') as f:
        f.write(text)

    logger.info(f"Scene saved to {filename}")


def load_scene_from_file(filename: str) -> Tuple[Scene, List[UnsupportedNodeWarning]]:
    """Load a compact JSON file into a new scene

    Args:
        filename: Path to the compact document

    Returns:
        Tuple of (scene, warnings for nodes that were skipped)

    Raises:
        OSError: If the file cannot be read
        SchemaError: If the document is malformed
    """
    with open(filename, 'r', encoding='utf-8') as f:
        text = f.read()

    scene, warnings = loads_compact(text)
    for warning in warnings:
        logger.warning(str(warning))

    logger.info(f"Scene loaded from {filename}")
    return scene, warnings
