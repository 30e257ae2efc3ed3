"""Runtime layer record: a declared layer plus its disposable pixel buffer"""

from dataclasses import dataclass

import numpy as np

from glitter.constants import CELL_WIDTH_PX, CELL_HEIGHT_PX


@dataclass(eq=False)
class RuntimeLayer:
    """Derived per-layer state owned by a Scene

    The buffer is shaped (height_cells, width_cells) and is rebuilt on every
    render; it is never persisted.
    """
    id: str
    name: str
    visible: bool
    buffer: np.ndarray

    @property
    def width_cells(self) -> int:
        return self.buffer.shape[1]

    @property
    def height_cells(self) -> int:
        return self.buffer.shape[0]

    @property
    def width_px(self) -> int:
        return self.width_cells * CELL_WIDTH_PX

    @property
    def height_px(self) -> int:
        return self.height_cells * CELL_HEIGHT_PX

    def clear(self) -> None:
        self.buffer.fill(0)
