"""
Action and Mode Enumerations
============================

Closed enumerations for the controller.

Action indices are what the policies emit: a policy built with
`action_count(enable_light=False)` samples from LEFT..NONE, and one built
with the accessory enabled may also emit LIGHT.
"""

from enum import Enum, IntEnum


class Action(IntEnum):
    """
    Discrete actions a policy can select.

    Attributes:
        LEFT: Spin left (left wheel back, right wheel forward)
        RIGHT: Spin right (left wheel forward, right wheel back)
        FORWARD: Both wheels forward
        BACKWARD: Both wheels back
        NONE: Stop
        LIGHT: Toggle the light accessory (no locomotion)
    """

    LEFT = 0
    RIGHT = 1
    FORWARD = 2
    BACKWARD = 3
    NONE = 4
    LIGHT = 5


class Mode(str, Enum):
    """Who is driving: the operator (MANUAL) or the policy (AUTO)."""

    MANUAL = "MANUAL"
    AUTO = "AUTO"


class StickState(str, Enum):
    """Three-state reduction of one joystick side."""

    NEUTRAL = "NEUTRAL"
    UP = "UP"
    DOWN = "DOWN"


def action_count(enable_light: bool = False) -> int:
    """Number of actions a policy should sample from."""
    return len(Action) if enable_light else int(Action.NONE) + 1
