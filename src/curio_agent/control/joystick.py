"""
Joystick Sources
================

Operator input backends producing InputEvents.

Backends:
    - PygameJoystickSource: SDL joystick events via pygame
    - NullJoystickSource: no operator (headless autonomous runs)

Sources are polled, never awaited: `poll()` drains whatever events are
pending and returns immediately.
"""

import logging
import os
from typing import Dict, List, Optional, Protocol

from curio_agent.control.events import (
    AxisEvent,
    ButtonEvent,
    DeviceEvent,
    InputEvent,
    QuitEvent,
)


logger = logging.getLogger(__name__)


class JoystickSource(Protocol):
    """Protocol for operator input backends."""

    def open(self) -> None:
        ...

    def poll(self) -> List[InputEvent]:
        """Return all pending events without blocking."""
        ...

    def close(self) -> None:
        ...


class NullJoystickSource:
    """Input source that never produces events."""

    def open(self) -> None:
        logger.info("No joystick configured, operator input disabled")

    def poll(self) -> List[InputEvent]:
        return []

    def close(self) -> None:
        pass


class PygameJoystickSource:
    """
    pygame-backed joystick input.

    Attached devices are tracked by this instance; nothing is kept at
    module level.
    """

    def __init__(self) -> None:
        self._joysticks: Dict[int, object] = {}
        self._pygame = None

    def open(self) -> None:
        # Headless robots have no display; SDL still needs a video driver
        # for its event queue.
        os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
        import pygame

        pygame.display.init()
        pygame.joystick.init()
        self._pygame = pygame
        logger.info(f"PygameJoystickSource opened: {pygame.joystick.get_count()} joystick(s) present")

    def poll(self) -> List[InputEvent]:
        if self._pygame is None:
            return []
        events: List[InputEvent] = []
        for raw in self._pygame.event.get():
            event = self._translate(raw)
            if event is not None:
                events.append(event)
        return events

    def _translate(self, raw) -> Optional[InputEvent]:
        pygame = self._pygame
        if raw.type == pygame.JOYAXISMOTION:
            value = int(max(-32768, min(32767, round(raw.value * 32767))))
            return AxisEvent(axis=raw.axis, value=value)
        if raw.type == pygame.JOYBUTTONDOWN:
            return ButtonEvent(button=raw.button, pressed=True)
        if raw.type == pygame.JOYBUTTONUP:
            return ButtonEvent(button=raw.button, pressed=False)
        if raw.type == pygame.JOYDEVICEADDED:
            joystick = pygame.joystick.Joystick(raw.device_index)
            self._joysticks[joystick.get_instance_id()] = joystick
            return DeviceEvent(device_id=joystick.get_instance_id(), attached=True)
        if raw.type == pygame.JOYDEVICEREMOVED:
            joystick = self._joysticks.pop(raw.instance_id, None)
            if joystick is not None:
                joystick.quit()
            return DeviceEvent(device_id=raw.instance_id, attached=False)
        if raw.type == pygame.QUIT:
            return QuitEvent()

        logger.debug(f"Ignoring pygame event: {pygame.event.event_name(raw.type)}")
        return None

    def close(self) -> None:
        if self._pygame is None:
            return
        for joystick in self._joysticks.values():
            joystick.quit()
        self._joysticks.clear()
        self._pygame.quit()
        self._pygame = None
        logger.info("PygameJoystickSource closed")
