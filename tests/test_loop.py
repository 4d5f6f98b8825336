"""
Control Loop Tests
==================

End-to-end tests for the asyncio control loop using a synthetic camera
and test doubles for the joystick and the transport.
"""

import asyncio
import time

import numpy as np
import pytest
import serial

from conftest import RecordingTransport, ScriptedJoystick
from curio_agent.control import (
    ArbiterSettings,
    AxisEvent,
    ButtonEvent,
    ControlArbiter,
    ControlContext,
    ControlLoop,
    NullJoystickSource,
    QuitEvent,
    SerialTransport,
    TransportError,
)
from curio_agent.models import Action, DriveCommand, LightCommand, Mode
from curio_agent.policy import MarkovMind
from curio_agent.sensing import SpectralNoveltySensor
from curio_agent.stream import CameraError, Frame, SyntheticCamera


class ScriptedPolicy:
    """Policy double returning a fixed sequence, then NONE forever."""

    action_count = 6

    def __init__(self, actions):
        self.actions = list(actions)
        self.seen = []

    def step(self, novelty):
        self.seen.append(novelty)
        if self.actions:
            return self.actions.pop(0)
        return int(Action.NONE)

    def reset(self):
        self.seen.clear()


class BrokenCamera:
    def open(self):
        raise CameraError("no device")

    def read(self):
        raise AssertionError("read after failed open")

    def close(self):
        pass


class SlowCamera:
    """Camera whose reads block long enough to span a shutdown request."""

    def __init__(self, delay=0.1):
        self.delay = delay
        self.reading = False
        self.closed = False
        self.closed_during_read = False
        self.frame_id = 0

    def open(self):
        pass

    def read(self):
        self.reading = True
        time.sleep(self.delay)
        self.frame_id += 1
        self.reading = False
        return Frame(frame_id=self.frame_id, luminance=np.zeros((12, 16), dtype=np.uint8))

    def close(self):
        self.closed_during_read = self.reading
        self.closed = True


class FailingSerial:
    """serial.Serial double that accepts only the handshake and cannot close."""

    def __init__(self, port, baudrate=9600, write_timeout=None):
        self.writes = 0

    def write(self, data):
        self.writes += 1
        if self.writes > 1:
            raise serial.SerialTimeoutException("write timeout")
        return len(data)

    def close(self):
        raise serial.SerialException("device vanished")


def make_loop(transport, joystick=None, policy=None, ctx=None, camera=None):
    return ControlLoop(
        camera=camera or SyntheticCamera(width=16, height=12, seed=3, fps=200.0),
        sensor=SpectralNoveltySensor(mode="entropy", depth=4),
        policy=policy or MarkovMind(5, np.random.default_rng(1)),
        joystick=joystick or NullJoystickSource(),
        transport=transport,
        arbiter=ControlArbiter(ArbiterSettings()),
        ctx=ctx,
        period_seconds=0.02,
        poll_interval_seconds=0.005,
        novelty_gain=4.0,
    )


def run_for(loop: ControlLoop, seconds: float) -> None:
    async def scenario():
        task = asyncio.create_task(loop.run())
        await asyncio.sleep(seconds)
        loop.ctx.request_shutdown()
        await task

    asyncio.run(scenario())


class TestControlLoop:
    """Tests for the running control loop."""

    def test_autonomous_run(self):
        transport = RecordingTransport()
        joystick = ScriptedJoystick([[ButtonEvent(button=0, pressed=True)]])
        loop = make_loop(transport, joystick=joystick)

        run_for(loop, 0.3)

        assert loop.ctx.mode == Mode.AUTO
        assert transport.opened == 1
        assert transport.closed == 1
        assert joystick.opened and joystick.closed

        drives = [c for c in transport.commands if isinstance(c, DriveCommand)]
        assert len(drives) >= 3
        for command in drives:
            assert command.left in (-0.2, 0.0, 0.2)
            assert command.right in (-0.2, 0.0, 0.2)

        metrics = loop.get_metrics()
        assert metrics["decisions"] > 0
        assert metrics["commands_sent"] == len(transport.commands)
        assert metrics["mode"] == "AUTO"

    def test_manual_run_follows_sticks(self):
        transport = RecordingTransport()
        joystick = ScriptedJoystick([[AxisEvent(axis=0, value=0), AxisEvent(axis=1, value=-32767)]])
        policy = ScriptedPolicy([int(Action.BACKWARD)] * 1000)
        loop = make_loop(transport, joystick=joystick, policy=policy)

        run_for(loop, 0.2)

        drives = [c for c in transport.commands if isinstance(c, DriveCommand)]
        assert drives
        assert drives[-1] == DriveCommand(left=0.2, right=0.0)
        assert all(c.right == 0.0 for c in drives)
        # Decisions are still made while the operator drives
        assert policy.seen

    def test_novelty_gain_applied(self):
        policy = ScriptedPolicy([])
        loop = make_loop(RecordingTransport(), policy=policy)
        frame = Frame(frame_id=0, luminance=np.full((12, 16), 200, dtype=np.uint8))
        novelty, action = loop.decide(frame)
        assert action == Action.NONE
        assert policy.seen == [novelty]
        # One constant frame spreads evenly over the 4 temporal bins: 2 bits
        assert novelty == pytest.approx(4.0 * 2.0)

    def test_light_sent_only_on_change(self):
        transport = RecordingTransport()
        policy = ScriptedPolicy([int(Action.LIGHT)])
        loop = make_loop(transport, policy=policy, ctx=ControlContext(mode=Mode.AUTO))

        run_for(loop, 0.3)

        lights = [c for c in transport.commands if isinstance(c, LightCommand)]
        assert lights == [LightCommand(on=True)]
        assert loop.ctx.light_on

    def test_light_ignored_in_manual(self):
        loop = make_loop(RecordingTransport())
        loop.publish(int(Action.LIGHT))
        assert not loop.ctx.light_on
        assert loop.ctx.action == Action.LIGHT

    def test_quit_event_stops_loop(self):
        transport = RecordingTransport()
        joystick = ScriptedJoystick([[], [QuitEvent()]])
        loop = make_loop(transport, joystick=joystick)

        asyncio.run(asyncio.wait_for(loop.run(), timeout=5.0))

        assert not loop.ctx.running
        assert transport.closed == 1

    def test_transport_failure_is_fatal(self):
        transport = RecordingTransport(fail_after=2)
        loop = make_loop(transport)

        with pytest.raises(TransportError):
            asyncio.run(asyncio.wait_for(loop.run(), timeout=5.0))

        assert not loop.ctx.running
        assert transport.closed == 1

    def test_camera_open_failure(self):
        transport = RecordingTransport()
        loop = make_loop(transport, camera=BrokenCamera())

        with pytest.raises(CameraError):
            asyncio.run(loop.run())

        assert transport.closed == 1
        loop.close()
        assert transport.closed == 1

    def test_camera_released_after_pending_read(self):
        camera = SlowCamera(delay=0.1)
        transport = RecordingTransport()
        loop = make_loop(transport, camera=camera)

        run_for(loop, 0.05)

        assert camera.closed
        assert not camera.closed_during_read
        assert transport.closed == 1

    def test_close_failure_keeps_write_error(self, monkeypatch, caplog):
        monkeypatch.setattr(serial, "Serial", FailingSerial)
        loop = make_loop(SerialTransport("/dev/ttyTEST"))

        with pytest.raises(TransportError, match="Serial write failed"):
            asyncio.run(asyncio.wait_for(loop.run(), timeout=5.0))

        assert "Serial close failed" in caplog.text
