"""
Transport Commands
==================

Typed commands handed to a transport. Each command knows its own
line-delimited JSON message; the transport only serializes and delivers.

Message Formats:
    handshake: {"T": 900, "main": 2, "module": 0}
    drive:     {"T": 1, "L": <left>, "R": <right>}
    light:     {"T": 132, "IO4": <0|255>, "IO5": <0|255>}
"""

from typing import Any, Dict, Union

from pydantic import BaseModel, Field


class HandshakeCommand(BaseModel):
    """Initial message selecting the chassis and module type."""

    main: int = Field(default=2, description="Chassis type")
    module: int = Field(default=0, description="Attached module type")

    def to_message(self) -> Dict[str, Any]:
        return {"T": 900, "main": self.main, "module": self.module}


class DriveCommand(BaseModel):
    """
    Differential wheel-speed targets.

    Attributes:
        left: Normalized left wheel speed in [-1, 1]
        right: Normalized right wheel speed in [-1, 1]
    """

    left: float = Field(default=0.0, ge=-1.0, le=1.0, description="Left wheel speed")
    right: float = Field(default=0.0, ge=-1.0, le=1.0, description="Right wheel speed")

    model_config = {"frozen": True}

    def to_message(self) -> Dict[str, Any]:
        return {"T": 1, "L": self.left, "R": self.right}


class LightCommand(BaseModel):
    """Light accessory state."""

    on: bool = Field(default=False, description="Whether the light is on")

    model_config = {"frozen": True}

    def to_message(self) -> Dict[str, Any]:
        level = 255 if self.on else 0
        return {"T": 132, "IO4": level, "IO5": level}


TransportCommand = Union[HandshakeCommand, DriveCommand, LightCommand]
