"""
Test Configuration
==================

Pytest fixtures and test doubles for the curiosity controller.
"""

from typing import List

import numpy as np
import pytest

from curio_agent.control.transport import TransportError, encode_command


class RecordingTransport:
    """Transport double that keeps every command it was handed."""

    def __init__(self, fail_after: int = -1) -> None:
        self.commands = []
        self.opened = 0
        self.closed = 0
        self.fail_after = fail_after

    def open(self) -> None:
        self.opened += 1

    def send(self, command) -> None:
        if self.fail_after >= 0 and len(self.commands) >= self.fail_after:
            raise TransportError("link lost")
        encode_command(command)
        self.commands.append(command)

    def close(self) -> None:
        self.closed += 1


class ScriptedJoystick:
    """Joystick double that replays one batch of events per poll."""

    def __init__(self, batches: List[list]) -> None:
        self.batches = list(batches)
        self.opened = False
        self.closed = False

    def open(self) -> None:
        self.opened = True

    def poll(self) -> list:
        if self.batches:
            return self.batches.pop(0)
        return []

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def rng():
    """Provide a seeded random generator."""
    return np.random.default_rng(1234)


@pytest.fixture
def random_frame(rng):
    """Provide a 24x32 uniformly random luminance frame."""
    return rng.integers(0, 256, (24, 32), dtype=np.uint8)


@pytest.fixture
def constant_frame():
    """Provide a 24x32 mid-gray luminance frame."""
    return np.full((24, 32), 128, dtype=np.uint8)


@pytest.fixture
def recording_transport():
    return RecordingTransport()
