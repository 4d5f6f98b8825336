"""
Grid World
==========

Synthetic luminance world for the offline simulation.

The grid is an (H, W) uint8 image indexed [y, x]. Each cell starts black
with probability 1/3 and white otherwise.
"""

import numpy as np


class GridWorld:
    """
    Mutable grayscale grid.

    Attributes:
        width: Cells along x
        height: Cells along y
    """

    def __init__(self, grid: np.ndarray) -> None:
        grid = np.asarray(grid, dtype=np.uint8)
        if grid.ndim != 2:
            raise ValueError(f"grid must be 2-D, got shape {grid.shape}")
        self._grid = grid.copy()

    @classmethod
    def random(cls, width: int, height: int, rng: np.random.Generator) -> "GridWorld":
        """Black with probability 1/3, white otherwise."""
        black = rng.integers(0, 3, size=(height, width)) == 0
        return cls(np.where(black, 0, 255).astype(np.uint8))

    @property
    def width(self) -> int:
        return self._grid.shape[1]

    @property
    def height(self) -> int:
        return self._grid.shape[0]

    @property
    def grid(self) -> np.ndarray:
        """Read-only view of the current grid."""
        view = self._grid.view()
        view.setflags(write=False)
        return view

    def toggle(self, x: int, y: int) -> None:
        """Flip a cell: dark (< 128) becomes white, light becomes black."""
        self._grid[y, x] = 255 if self._grid[y, x] < 128 else 0

    def adjust(self, x: int, y: int, delta: int) -> None:
        """Add `delta` to a cell, clipped to [0, 255]."""
        self._grid[y, x] = int(np.clip(int(self._grid[y, x]) + delta, 0, 255))

    def snapshot(self) -> np.ndarray:
        return self._grid.copy()
