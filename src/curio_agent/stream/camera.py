"""
Camera Sources
==============

Producers of luminance frames.

This is the ONLY place in the codebase that talks to a camera device or
converts color to grayscale.

Backends:
    - OpenCVCamera: cv2.VideoCapture device, BGR -> GRAY, resized
    - SyntheticCamera: seeded random frames, for running without hardware

Both expose a blocking `read()` (run it in a worker thread from async
code) and a lazy `frames()` iterator.
"""

import logging
import time
from typing import Iterator, Optional, Protocol, Union

import cv2
import numpy as np

from curio_agent.stream.frame import Frame


logger = logging.getLogger(__name__)


class CameraError(Exception):
    """Raised when a camera cannot be opened or stops delivering frames."""
    pass


class CameraSource(Protocol):
    """Protocol for camera backends."""

    def open(self) -> None:
        ...

    def read(self) -> Frame:
        """Block until the next frame is available."""
        ...

    def close(self) -> None:
        ...


class OpenCVCamera:
    """
    V4L / OpenCV camera.

    Attributes:
        device: Device path (e.g. /dev/video0) or integer index
        width: Output frame width
        height: Output frame height
    """

    def __init__(
        self,
        device: Union[str, int] = "/dev/video0",
        width: int = 32,
        height: int = 24,
    ) -> None:
        self.device = int(device) if isinstance(device, str) and device.isdigit() else device
        self.width = width
        self.height = height
        self._capture: Optional[cv2.VideoCapture] = None
        self._frame_id: int = 0

    def open(self) -> None:
        """Open the device. Fails fast if it is unavailable."""
        capture = cv2.VideoCapture(self.device)
        if not capture.isOpened():
            capture.release()
            raise CameraError(f"Cannot open camera device: {self.device}")
        self._capture = capture
        logger.info(f"OpenCVCamera opened: device={self.device}, output={self.width}x{self.height}")

    def read(self) -> Frame:
        """Capture, convert to grayscale and resize one frame."""
        if self._capture is None:
            raise CameraError("Camera is not open")

        ok, bgr = self._capture.read()
        if not ok or bgr is None:
            raise CameraError(f"Camera {self.device} stopped delivering frames")

        gray = cv2.cvtColor(bgr, cv2.COLOR_BGR2GRAY)
        if gray.shape != (self.height, self.width):
            gray = cv2.resize(gray, (self.width, self.height), interpolation=cv2.INTER_AREA)

        frame = Frame(frame_id=self._frame_id, luminance=gray)
        self._frame_id += 1
        return frame

    def frames(self) -> Iterator[Frame]:
        """Lazy, unbounded frame sequence."""
        while True:
            yield self.read()

    def close(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None
            logger.info("OpenCVCamera closed")


class SyntheticCamera:
    """
    Deterministic random-frame camera for hardware-free runs and tests.

    Generates uniformly random luminance frames from a seeded generator,
    paced at `fps` (0 = as fast as possible).
    """

    def __init__(
        self,
        width: int = 32,
        height: int = 24,
        seed: int = 0,
        fps: float = 0.0,
    ) -> None:
        self.width = width
        self.height = height
        self.fps = fps
        self._rng = np.random.default_rng(seed)
        self._frame_id: int = 0

    def open(self) -> None:
        logger.info(f"SyntheticCamera opened: {self.width}x{self.height}, fps={self.fps}")

    def read(self) -> Frame:
        if self.fps > 0:
            time.sleep(1.0 / self.fps)
        pixels = self._rng.integers(0, 256, (self.height, self.width), dtype=np.uint8)
        frame = Frame(frame_id=self._frame_id, luminance=pixels)
        self._frame_id += 1
        return frame

    def frames(self) -> Iterator[Frame]:
        while True:
            yield self.read()

    def close(self) -> None:
        pass
