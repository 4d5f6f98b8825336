"""
Mode Arbitration
================

Pure logic deciding who drives the rover and what the wheels should do.

Key Features:
    - Button edge (press, not hold) toggles MANUAL <-> AUTO
    - Entering MANUAL resets the manual targets to neutral
    - Stick reduction with a symmetric dead-zone
    - Speed button cycles the wheel speed
    - Action -> differential wheel targets

Stick Reduction (per side):
    UP:      |perpendicular| < dead_zone AND driving < -drive_threshold
    DOWN:    |perpendicular| < dead_zone AND driving > drive_threshold
    NEUTRAL: otherwise

Action Mapping:
    FORWARD  -> (UP, UP)        BACKWARD -> (DOWN, DOWN)
    LEFT     -> (DOWN, UP)      RIGHT    -> (UP, DOWN)
    NONE     -> (NEUTRAL, NEUTRAL)
    LIGHT    -> (NEUTRAL, NEUTRAL), accessory handled by the control loop
"""

import logging
from dataclasses import dataclass
from typing import Dict, Tuple

from curio_agent.control.events import AxisEvent, ButtonEvent, DeviceEvent, QuitEvent
from curio_agent.control.state import ControlContext
from curio_agent.models.actions import Action, Mode, StickState
from curio_agent.models.commands import DriveCommand


logger = logging.getLogger(__name__)

# Axis ids (perpendicular, driving) per side
LEFT_AXES = (0, 1)
RIGHT_AXES = (3, 4)

_ACTION_STICKS: Dict[Action, Tuple[StickState, StickState]] = {
    Action.FORWARD: (StickState.UP, StickState.UP),
    Action.BACKWARD: (StickState.DOWN, StickState.DOWN),
    Action.LEFT: (StickState.DOWN, StickState.UP),
    Action.RIGHT: (StickState.UP, StickState.DOWN),
    Action.NONE: (StickState.NEUTRAL, StickState.NEUTRAL),
    Action.LIGHT: (StickState.NEUTRAL, StickState.NEUTRAL),
}


@dataclass
class ArbiterSettings:
    """
    Joystick and speed settings.

    Loaded from the control section of the configuration.
    """

    dead_zone: int = 20000
    drive_threshold: int = 32000
    toggle_button: int = 0
    speed_button: int = 1
    speed_step: float = 0.1
    speed_min: float = 0.1
    speed_max: float = 0.3


class ControlArbiter:
    """
    Applies operator input to the ControlContext and builds drive commands.

    Holds the latest raw axis values; everything else lives in the context.
    """

    def __init__(self, settings: ArbiterSettings) -> None:
        self.settings = settings
        self._axes: Dict[int, int] = {}
        logger.info(
            f"ControlArbiter initialized: dead_zone={settings.dead_zone}, "
            f"drive_threshold={settings.drive_threshold}"
        )

    def reduce_stick(self, perpendicular: int, driving: int) -> StickState:
        """Reduce one stick's axis pair to UP / DOWN / NEUTRAL."""
        s = self.settings
        if not -s.dead_zone < perpendicular < s.dead_zone:
            return StickState.NEUTRAL
        if driving < -s.drive_threshold:
            return StickState.UP
        if driving > s.drive_threshold:
            return StickState.DOWN
        return StickState.NEUTRAL

    def handle_event(self, event: object, ctx: ControlContext) -> None:
        """
        Apply one input event to the context.

        Unknown event types are logged and ignored.
        """
        if isinstance(event, AxisEvent):
            self._handle_axis(event, ctx)
        elif isinstance(event, ButtonEvent):
            self._handle_button(event, ctx)
        elif isinstance(event, DeviceEvent):
            state = "connected" if event.attached else "disconnected"
            logger.info(f"Joystick {event.device_id} {state}")
        elif isinstance(event, QuitEvent):
            ctx.request_shutdown()
        else:
            logger.debug(f"Ignoring unknown input event: {event!r}")

    def _handle_axis(self, event: AxisEvent, ctx: ControlContext) -> None:
        self._axes[event.axis] = event.value
        if ctx.mode != Mode.MANUAL:
            return

        if event.axis in LEFT_AXES:
            ctx.left = self.reduce_stick(
                self._axes.get(LEFT_AXES[0], 0), self._axes.get(LEFT_AXES[1], 0)
            )
        elif event.axis in RIGHT_AXES:
            ctx.right = self.reduce_stick(
                self._axes.get(RIGHT_AXES[0], 0), self._axes.get(RIGHT_AXES[1], 0)
            )

    def _handle_button(self, event: ButtonEvent, ctx: ControlContext) -> None:
        if not event.pressed:
            return

        if event.button == self.settings.toggle_button:
            if ctx.mode == Mode.MANUAL:
                ctx.mode = Mode.AUTO
            else:
                ctx.mode = Mode.MANUAL
                ctx.reset_sticks()
            logger.info(f"Mode -> {ctx.mode.value}")
        elif event.button == self.settings.speed_button:
            s = self.settings
            speed = round(ctx.speed + s.speed_step, 6)
            if speed > s.speed_max + 1e-9:
                speed = s.speed_min
            ctx.speed = speed
            logger.info(f"Speed -> {ctx.speed:.2f}")

    @staticmethod
    def sticks_for_action(action: int) -> Tuple[StickState, StickState]:
        """Differential stick targets for an action index."""
        try:
            return _ACTION_STICKS[Action(action)]
        except ValueError:
            logger.warning(f"Unknown action index {action}, stopping")
            return StickState.NEUTRAL, StickState.NEUTRAL

    def command_for(self, ctx: ControlContext) -> DriveCommand:
        """Wheel targets for the current mode."""
        if ctx.mode == Mode.AUTO:
            left, right = self.sticks_for_action(ctx.action)
        else:
            left, right = ctx.left, ctx.right
        return DriveCommand(
            left=_stick_speed(left, ctx.speed),
            right=_stick_speed(right, ctx.speed),
        )


def _stick_speed(stick: StickState, speed: float) -> float:
    if stick == StickState.UP:
        return speed
    if stick == StickState.DOWN:
        return -speed
    return 0.0
