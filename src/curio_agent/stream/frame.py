"""
Frame Data Model
================

Internal frame representation between the camera and the sensor.

Design Rules:
    - Single channel (luminance) only
    - Immutable once captured: the pixel array is marked read-only
    - Camera sources are the only producers
"""

import time
from dataclasses import dataclass, field

import numpy as np


@dataclass(frozen=True, slots=True)
class Frame:
    """
    Captured luminance frame.

    Attributes:
        frame_id: Monotonically increasing frame counter from the source
        luminance: (H, W) uint8 array, read-only
        timestamp: UNIX time of capture
    """

    frame_id: int
    luminance: np.ndarray
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        pixels = np.array(self.luminance, dtype=np.uint8, copy=True)
        if pixels.ndim != 2:
            raise ValueError(f"Frame must be single-channel, got shape {pixels.shape}")
        pixels.setflags(write=False)
        object.__setattr__(self, "luminance", pixels)

    @property
    def height(self) -> int:
        return self.luminance.shape[0]

    @property
    def width(self) -> int:
        return self.luminance.shape[1]

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the pixels."""
        return (
            f"Frame(frame_id={self.frame_id}, "
            f"size={self.width}x{self.height}, "
            f"timestamp={self.timestamp:.3f})"
        )
