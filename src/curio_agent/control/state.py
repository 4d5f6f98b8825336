"""
Control Context
===============

The only mutable state shared between the control loop's activities.

Ownership:
    - input activity writes: mode, left, right, speed, running (quit)
    - sense-and-decide activity writes: action, light_on
    - actuation activity only reads

`action` is one int attribute assigned from the event-loop thread: a read
sees either the previous or the newest index, never a partial value.
Staleness by one frame is acceptable.
"""

import logging
from dataclasses import dataclass

from curio_agent.models.actions import Action, Mode, StickState


logger = logging.getLogger(__name__)


@dataclass
class ControlContext:
    """
    Shared controller state, owned by the ControlLoop.

    Attributes:
        mode: Who is driving
        left: Manual target for the left side
        right: Manual target for the right side
        action: Latest autonomous action index
        speed: Wheel speed magnitude for UP/DOWN
        light_on: Desired light accessory state
        running: Cleared to stop every activity
    """

    mode: Mode = Mode.MANUAL
    left: StickState = StickState.NEUTRAL
    right: StickState = StickState.NEUTRAL
    action: int = int(Action.NONE)
    speed: float = 0.2
    light_on: bool = False
    running: bool = True

    def request_shutdown(self) -> None:
        """Ask every activity to exit at the top of its next iteration."""
        if self.running:
            logger.info("Shutdown requested")
        self.running = False

    def reset_sticks(self) -> None:
        """Return the manual targets to neutral."""
        self.left = StickState.NEUTRAL
        self.right = StickState.NEUTRAL
