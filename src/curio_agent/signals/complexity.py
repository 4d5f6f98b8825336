"""
Complexity Estimator
====================

Approximates the Kolmogorov complexity of a byte sequence by the size of
its losslessly compressed form.

    ratio = 255 * len(compress(data)) / len(data)

Every call runs a fresh compressor over the whole input, so the ratio is a
pure function of the input bytes. Highly incompressible input can expand
slightly under compression, in which case the ratio lands a little above
255; callers must tolerate that.
"""

import logging
import zlib
from typing import Union


logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]

# Scale used throughout the system for byte-valued complexity ratios
DEFAULT_SCALE = 255.0


def estimate_complexity(
    data: BytesLike,
    scale: float = DEFAULT_SCALE,
    level: int = 9,
) -> float:
    """
    Estimate the complexity of `data` as a scaled compression ratio.

    Args:
        data: Any byte sequence (all-zero and all-distinct inputs are valid)
        scale: Multiplier for the ratio (255 gives a byte-valued score)
        level: zlib compression level

    Returns:
        scale * compressed_length / raw_length, or 0.0 for empty input
    """
    raw_length = len(data)
    if raw_length == 0:
        return 0.0
    compressed = zlib.compress(bytes(data), level)
    return scale * len(compressed) / raw_length


class ComplexityEstimator:
    """
    Bound complexity estimator.

    Holds the scale and compression level so callers can pass one object
    around instead of repeating keyword arguments.

    Example:
        estimator = ComplexityEstimator()
        estimator(bytes(1024))        # near-minimal
        estimator(os.urandom(1024))   # near 255
    """

    def __init__(self, scale: float = DEFAULT_SCALE, level: int = 9) -> None:
        if not 0 <= level <= 9:
            raise ValueError("level must be in [0, 9]")
        self.scale = scale
        self.level = level

    def __call__(self, data: BytesLike) -> float:
        return estimate_complexity(data, scale=self.scale, level=self.level)

    def __repr__(self) -> str:
        return f"ComplexityEstimator(scale={self.scale}, level={self.level})"
