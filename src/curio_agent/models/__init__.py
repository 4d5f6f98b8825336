"""
Data Models
===========

Enumerations and command models shared by the policy, the control loop
and the transports.
"""

from curio_agent.models.actions import Action, Mode, StickState, action_count
from curio_agent.models.commands import (
    DriveCommand,
    HandshakeCommand,
    LightCommand,
    TransportCommand,
)

__all__ = [
    "Action",
    "Mode",
    "StickState",
    "action_count",
    "DriveCommand",
    "HandshakeCommand",
    "LightCommand",
    "TransportCommand",
]
