"""
Frame Buffer
============

Bounded hand-off between the camera activity and the sense-and-decide
activity.

Overflow Policy:
    The buffer never blocks the producer. When it is full the oldest frame
    is discarded, so with maxsize=1 the consumer always works on the newest
    frame and never on a stale backlog.
"""

import asyncio
import logging
from collections import deque
from typing import Deque, Optional

from curio_agent.stream.frame import Frame


logger = logging.getLogger(__name__)


class FrameBuffer:
    """
    Drop-oldest frame slot(s) for one producer and one consumer.

    Attributes:
        maxsize: Frames held at most
        dropped_count: Frames discarded on overflow

    Example:
        frames = FrameBuffer(maxsize=1)
        await frames.put(camera_frame)           # producer
        frame = await frames.get(timeout=0.5)    # consumer, None on timeout
    """

    def __init__(self, maxsize: int = 1) -> None:
        if maxsize < 1:
            raise ValueError("maxsize must be >= 1")
        self._frames: Deque[Frame] = deque(maxlen=maxsize)
        self._ready = asyncio.Event()
        self._dropped_count: int = 0
        self._total_put: int = 0

    @property
    def maxsize(self) -> int:
        return self._frames.maxlen

    @property
    def size(self) -> int:
        return len(self._frames)

    @property
    def dropped_count(self) -> int:
        return self._dropped_count

    @property
    def total_put(self) -> int:
        return self._total_put

    def put_nowait(self, frame: Frame) -> bool:
        """
        Store `frame`, evicting the oldest one when full.

        Returns:
            False if another frame had to be dropped.
        """
        self._total_put += 1
        evicting = len(self._frames) == self._frames.maxlen
        if evicting:
            self._dropped_count += 1
            logger.debug(
                f"Dropped frame {self._frames[0].frame_id}, "
                f"{self._dropped_count} dropped so far"
            )
        self._frames.append(frame)
        self._ready.set()
        return not evicting

    async def put(self, frame: Frame) -> bool:
        return self.put_nowait(frame)

    async def get(self, timeout: Optional[float] = None) -> Optional[Frame]:
        """
        Wait for the oldest held frame.

        Args:
            timeout: Seconds to wait; None waits forever.

        Returns:
            The frame, or None if the timeout expired first.
        """
        while not self._frames:
            try:
                await asyncio.wait_for(self._ready.wait(), timeout=timeout)
            except asyncio.TimeoutError:
                return None
        return self.get_nowait()

    def get_nowait(self) -> Optional[Frame]:
        if not self._frames:
            return None
        frame = self._frames.popleft()
        if not self._frames:
            self._ready.clear()
        return frame

    def clear(self) -> int:
        """Discard every held frame and return how many there were."""
        cleared = len(self._frames)
        self._frames.clear()
        self._ready.clear()
        return cleared

    def metrics(self) -> dict:
        return {
            "size": self.size,
            "maxsize": self.maxsize,
            "dropped_count": self._dropped_count,
            "total_put": self._total_put,
        }
