"""
Stream Module
=============

Frame ingestion components.

This module provides:
    - Frame: Immutable luminance frame
    - FrameBuffer: Async-safe bounded queue (drops oldest on overflow)
    - OpenCVCamera / SyntheticCamera: Frame producers

Example:
    from curio_agent.stream import FrameBuffer, OpenCVCamera

    camera = OpenCVCamera("/dev/video0", width=32, height=24)
    camera.open()
    buffer = FrameBuffer(maxsize=1)

    frame = await asyncio.to_thread(camera.read)
    await buffer.put(frame)
"""

from curio_agent.stream.frame import Frame
from curio_agent.stream.buffer import FrameBuffer
from curio_agent.stream.camera import CameraError, CameraSource, OpenCVCamera, SyntheticCamera


__all__ = [
    "CameraError",
    "CameraSource",
    "Frame",
    "FrameBuffer",
    "OpenCVCamera",
    "SyntheticCamera",
]
