"""
Growable memory tape.

Cells are unsigned bytes held in a numpy array. The tape starts at
DEFAULT_CELLS cells and doubles whenever the pointer runs off the right end,
up to max_cells. Moving left of cell 0 is a no-op.
"""

from typing import List

import numpy as np

from .errors import MemoryLimitExceeded

DEFAULT_CELLS = 30000
MAX_CELLS = 1000000


class Tape:
    """Byte cells plus the data pointer."""

    def __init__(self, initial_cells: int = DEFAULT_CELLS, max_cells: int = MAX_CELLS):
        if initial_cells <= 0:
            raise ValueError("initial_cells must be positive")
        if max_cells < initial_cells:
            raise ValueError("max_cells must be at least initial_cells")
        self.initial_cells = initial_cells
        self.max_cells = max_cells
        self.cells = np.zeros(initial_cells, dtype=np.uint8)
        self.pointer = 0

    def __len__(self) -> int:
        return len(self.cells)

    def __getitem__(self, index: int) -> int:
        return int(self.cells[index])

    def reset(self) -> None:
        """Drop any growth and zero everything."""
        self.cells = np.zeros(self.initial_cells, dtype=np.uint8)
        self.pointer = 0

    def move_right(self) -> None:
        if self.pointer + 1 >= len(self.cells):
            if len(self.cells) >= self.max_cells:
                raise MemoryLimitExceeded(f"Memory limit exceeded ({self.max_cells} cells)")
            self._grow()
        self.pointer += 1

    def move_left(self) -> None:
        if self.pointer > 0:
            self.pointer -= 1

    def increment(self) -> None:
        self.cells[self.pointer] = (int(self.cells[self.pointer]) + 1) & 0xFF

    def decrement(self) -> None:
        self.cells[self.pointer] = (int(self.cells[self.pointer]) - 1) & 0xFF

    def read(self) -> int:
        return int(self.cells[self.pointer])

    def write(self, value: int) -> None:
        self.cells[self.pointer] = value & 0xFF

    def window(self, start: int, count: int) -> List[int]:
        """Cell values in [start, start + count), clipped to the tape."""
        end = min(start + count, len(self.cells))
        return [int(v) for v in self.cells[start:end]]

    def _grow(self) -> None:
        new_size = min(len(self.cells) * 2, self.max_cells)
        grown = np.zeros(new_size, dtype=np.uint8)
        grown[:len(self.cells)] = self.cells
        self.cells = grown
