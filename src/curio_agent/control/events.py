"""
Input Events
============

Backend-neutral operator input events produced by joystick sources.
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class AxisEvent:
    """Axis movement; value is a signed 16-bit reading."""

    axis: int
    value: int


@dataclass(frozen=True, slots=True)
class ButtonEvent:
    """Button press (pressed=True) or release."""

    button: int
    pressed: bool


@dataclass(frozen=True, slots=True)
class DeviceEvent:
    """Joystick attached (attached=True) or detached."""

    device_id: int
    attached: bool


@dataclass(frozen=True, slots=True)
class QuitEvent:
    """The input backend asked the process to quit."""


InputEvent = Union[AxisEvent, ButtonEvent, DeviceEvent, QuitEvent]
