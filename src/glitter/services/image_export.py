"""
Glitter - Image Export Service

Writes the composite of a scene to a PNG, one image pixel per sub-pixel
(optionally scaled up), white dots on black. Colors and the transient
overlay are terminal-only and are not exported.
"""

import logging

import numpy as np
from PIL import Image

from glitter.constants import BRAILLE_DOTS, CELL_WIDTH_PX, CELL_HEIGHT_PX

logger = logging.getLogger(__name__)


def unpack_cells(cells: np.ndarray) -> np.ndarray:
    """Expand a packed cell buffer into a boolean pixel grid

    Args:
        cells: uint8 buffer shaped (height_cells, width_cells)

    Returns:
        bool array shaped (height_cells * 4, width_cells * 2)
    """
    height_cells, width_cells = cells.shape
    pixels = np.zeros((height_cells * CELL_HEIGHT_PX, width_cells * CELL_WIDTH_PX), dtype=bool)
    for sub_y, row in enumerate(BRAILLE_DOTS):
        for sub_x, mask in enumerate(row):
            pixels[sub_y::CELL_HEIGHT_PX, sub_x::CELL_WIDTH_PX] = (cells & mask) != 0
    return pixels


def scene_to_image(scene, scale: int = 1) -> Image.Image:
    """Render the scene's visible layers to a grayscale PIL image"""
    if scale < 1:
        raise ValueError(f"scale must be >= 1, got {scale}")
    pixels = unpack_cells(scene.composite())
    image = Image.fromarray(pixels.astype(np.uint8) * 255)
    if scale > 1:
        image = image.resize((image.width * scale, image.height * scale), Image.Resampling.NEAREST)
    return image


def export_png(scene, filename: str, scale: int = 1) -> None:
    """Save the scene's composite as a PNG file"""
    image = scene_to_image(scene, scale)
    image.save(filename, format='PNG')
    logger.info(f"Exported {image.width}x{image.height} PNG to {filename}")
