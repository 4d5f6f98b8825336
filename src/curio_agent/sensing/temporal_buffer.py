"""
Temporal Buffer
===============

Fixed-depth FIFO of complex luminance planes feeding the 3-D FFT.

Layout:
    planes[d, x, y] holds pixel (x, y) of the frame ingested d steps ago,
    scaled to [0, 1] with zero imaginary part. Plane 0 is always the newest
    frame; the oldest plane is discarded on every push.

The buffer is allocated lazily on the first push and sized to that frame.
Every later frame must have the same dimensions.
"""

import logging
from typing import Optional, Tuple

import numpy as np


logger = logging.getLogger(__name__)


class TemporalBuffer:
    """
    Ring of `depth` complex W×H planes in strict recency order.

    Attributes:
        depth: Number of planes (FFT depth along time)
        frames_seen: Total frames pushed since construction/reset

    Example:
        buffer = TemporalBuffer(depth=8)
        buffer.push(gray)            # (H, W) uint8
        field = buffer.spectrum()    # (8, W, H) complex
    """

    def __init__(self, depth: int = 8) -> None:
        if depth < 1:
            raise ValueError("depth must be >= 1")
        self.depth = depth
        self._planes: Optional[np.ndarray] = None
        self._frames_seen: int = 0

    @property
    def planes(self) -> Optional[np.ndarray]:
        """The (depth, W, H) complex buffer, or None before the first push."""
        return self._planes

    @property
    def frame_shape(self) -> Optional[Tuple[int, int]]:
        """(height, width) of accepted frames, or None before the first push."""
        if self._planes is None:
            return None
        return self._planes.shape[2], self._planes.shape[1]

    @property
    def frames_seen(self) -> int:
        return self._frames_seen

    def push(self, luminance: np.ndarray) -> None:
        """
        Shift every plane one step older and store `luminance` as plane 0.

        Args:
            luminance: (H, W) array on the 0-255 scale
        """
        gray = np.asarray(luminance, dtype=np.float64)
        if gray.ndim != 2:
            raise ValueError(f"expected a 2-D luminance frame, got shape {gray.shape}")

        height, width = gray.shape
        if self._planes is None:
            self._planes = np.zeros((self.depth, width, height), dtype=np.complex128)
            logger.debug(f"TemporalBuffer allocated: depth={self.depth}, {width}x{height}")
        elif self._planes.shape[1:] != (width, height):
            raise ValueError(
                f"frame size changed: buffer holds {self._planes.shape[1]}x"
                f"{self._planes.shape[2]}, got {width}x{height}"
            )

        # plane d <- plane d-1 (numpy copies overlapping slices safely)
        self._planes[1:] = self._planes[:-1]
        self._planes[0] = gray.T / 255.0
        self._frames_seen += 1

    def spectrum(self) -> np.ndarray:
        """Full N-dimensional FFT over (time, x, y). Recomputed on every call."""
        if self._planes is None:
            raise RuntimeError("spectrum() called before any frame was pushed")
        return np.fft.fftn(self._planes)

    def reset(self) -> None:
        """Drop the buffer; the next push re-allocates it."""
        self._planes = None
        self._frames_seen = 0
