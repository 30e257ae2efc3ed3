"""
Shared fixtures for glitter tests.

Provides reusable scenes, sample compact documents, and helpers for
reading rendered frames.
"""
import sys
import os
import copy
import re
import pytest

# Ensure src is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))


# ── Sample compact documents ────────────────────────────────────────────

SAMPLE_COMPACT = {
    "v": 1,
    "w": 160,
    "h": 96,
    "layers": ["frame", "components"],
    "nodes": [
        ["box", "frameBox", "frame", [4, 8, 152, 80], {"locked": True}],
        ["box", "c1", "components", [20, 20, 40, 24]],
        ["image", "c2", "components", [70, 20, 30, 30], {"src": "logo.png"}],
    ],
    "meta": {"title": "Sample"},
}

SAMPLE_WITH_TEXT = {
    "v": 1,
    "w": 40,
    "h": 24,
    "layers": ["L"],
    "nodes": [
        ["box", "c1", "L", [0, 0, 10, 8]],
        ["text", "t1", "L", [2, 2, 6, 4], {"text": "hi"}],
    ],
}

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def strip_ansi(frame):
    """Remove color escapes from a rendered frame"""
    return _ANSI_RE.sub("", frame)


def glyph_rows(frame):
    """Frame text -> list of rows of braille offsets (value - 0x2800)"""
    return [[ord(ch) - 0x2800 for ch in row] for row in strip_ansi(frame).splitlines()]


@pytest.fixture
def sample_compact():
    """Two-layer compact doc with a locked frame box, a box and an image"""
    return copy.deepcopy(SAMPLE_COMPACT)


@pytest.fixture
def compact_with_text():
    """Compact doc carrying a reserved 'text' node"""
    return copy.deepcopy(SAMPLE_WITH_TEXT)


@pytest.fixture
def empty_scene():
    """80x24 cell scene (160x96 px) with no layers"""
    from glitter.models import Scene
    return Scene(80, 24)


@pytest.fixture
def scene(empty_scene):
    """80x24 cell scene with the editor's startup layers: frame, components (active)"""
    empty_scene.add_layer("frame")
    empty_scene.add_layer("components")
    return empty_scene


@pytest.fixture
def small_scene():
    """10x4 cell scene (20x16 px) with one active layer 'L'"""
    from glitter.models import Scene
    s = Scene(10, 4)
    s.add_layer("L")
    return s
