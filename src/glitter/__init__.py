"""
Glitter - Terminal Pixel-Art Scene Engine

Owns the drawing state behind the terminal editor (layers, rectangular
components), rasterizes it into braille glyphs and persists it as a
compact JSON document.

Public API:
    from glitter.models import Scene, SceneDoc, Rect
    from glitter.services.compact_doc import compact_from_doc, doc_from_compact
    from glitter.session import EditorSession
"""

__version__ = "0.1.0"
