"""
Control Module
==============

Mode arbitration and actuation for the rover.

This module provides:
    - ControlContext: The shared mutable controller state
    - ControlArbiter: Joystick reduction, mode toggling, action mapping
    - Joystick sources (pygame / none) and transports (serial / log)
    - ControlLoop: The asyncio activities tying everything together
"""

from curio_agent.control.arbiter import ArbiterSettings, ControlArbiter
from curio_agent.control.events import (
    AxisEvent,
    ButtonEvent,
    DeviceEvent,
    InputEvent,
    QuitEvent,
)
from curio_agent.control.joystick import (
    JoystickSource,
    NullJoystickSource,
    PygameJoystickSource,
)
from curio_agent.control.loop import ControlLoop
from curio_agent.control.state import ControlContext
from curio_agent.control.transport import (
    LogTransport,
    SerialTransport,
    Transport,
    TransportError,
    encode_command,
)

__all__ = [
    "ArbiterSettings",
    "AxisEvent",
    "ButtonEvent",
    "ControlArbiter",
    "ControlContext",
    "ControlLoop",
    "DeviceEvent",
    "InputEvent",
    "JoystickSource",
    "LogTransport",
    "NullJoystickSource",
    "PygameJoystickSource",
    "QuitEvent",
    "SerialTransport",
    "Transport",
    "TransportError",
    "encode_command",
]
