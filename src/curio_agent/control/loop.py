"""
Control Loop
============

Runs the rover: camera, operator input, sense-and-decide and actuation as
cooperative asyncio activities over one shared ControlContext.

Activities:
    1. camera:    blocking reads in a worker thread -> FrameBuffer (drop-oldest)
    2. input:     drains joystick events every poll interval; never waits on
                  sensing
    3. decide:    newest frame -> sensor -> policy (worker thread), publishes
                  the action index
    4. actuation: every period, sends the current drive command
                  unconditionally (fixed cadence), plus a light command when
                  the light state changed

Shutdown:
    Every activity checks ctx.running at the top of its loop. An exception
    in any activity requests shutdown and propagates out of run(). The
    transport is closed exactly once, and the camera is released only after
    any read still running in a worker thread has returned.
"""

import asyncio
import logging
import time
from typing import Optional, Tuple

from curio_agent.control.arbiter import ControlArbiter
from curio_agent.control.joystick import JoystickSource
from curio_agent.control.state import ControlContext
from curio_agent.control.transport import Transport
from curio_agent.models.actions import Action, Mode
from curio_agent.models.commands import LightCommand
from curio_agent.policy.base import Policy
from curio_agent.sensing.sensor import SpectralNoveltySensor
from curio_agent.stream.buffer import FrameBuffer
from curio_agent.stream.camera import CameraSource
from curio_agent.stream.frame import Frame


logger = logging.getLogger(__name__)


class ControlLoop:
    """
    Owner of every collaborator and of the shared ControlContext.

    Example:
        loop = ControlLoop(camera, sensor, policy, joystick, transport, arbiter)
        await loop.run()      # returns after ctx.request_shutdown()
    """

    def __init__(
        self,
        camera: CameraSource,
        sensor: SpectralNoveltySensor,
        policy: Policy,
        joystick: JoystickSource,
        transport: Transport,
        arbiter: ControlArbiter,
        ctx: Optional[ControlContext] = None,
        frame_buffer: Optional[FrameBuffer] = None,
        period_seconds: float = 0.3,
        poll_interval_seconds: float = 0.016,
        novelty_gain: float = 1.0,
        log_every_n_frames: int = 30,
    ) -> None:
        self.camera = camera
        self.sensor = sensor
        self.policy = policy
        self.joystick = joystick
        self.transport = transport
        self.arbiter = arbiter
        self.ctx = ctx or ControlContext()
        self.frames = frame_buffer or FrameBuffer(maxsize=1)
        self.period_seconds = period_seconds
        self.poll_interval_seconds = poll_interval_seconds
        self.novelty_gain = novelty_gain
        self.log_every_n_frames = log_every_n_frames

        self._decisions: int = 0
        self._commands_sent: int = 0
        self._last_novelty: Optional[float] = None
        self._pending_read: Optional[asyncio.Future] = None
        self._closed = False

        logger.info(
            f"ControlLoop initialized: period={period_seconds}s, "
            f"poll={poll_interval_seconds}s, gain={novelty_gain}"
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def run(self) -> None:
        """
        Open collaborators, run all activities until shutdown, then close.

        Raises:
            TransportError, CameraError: fatal collaborator failures
        """
        try:
            self.camera.open()
            self.joystick.open()
            self.transport.open()
        except Exception:
            self.close()
            raise
        started = time.time()

        tasks = [
            asyncio.create_task(self._guard(self._camera_activity(), "camera"), name="camera"),
            asyncio.create_task(self._guard(self._input_activity(), "input"), name="input"),
            asyncio.create_task(self._guard(self._decide_activity(), "decide"), name="decide"),
            asyncio.create_task(self._guard(self._actuation_activity(), "actuation"), name="actuation"),
        ]
        try:
            await asyncio.gather(*tasks)
        finally:
            self.ctx.request_shutdown()
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            # A cancelled activity leaves its worker thread running; the
            # camera must not be released while that thread is inside read().
            if self._pending_read is not None:
                await asyncio.gather(self._pending_read, return_exceptions=True)
            self.close()
            logger.info(
                f"ControlLoop stopped after {time.time() - started:.1f}s: "
                f"{self._decisions} decisions, {self._commands_sent} commands"
            )

    def close(self) -> None:
        """Release collaborators. Idempotent; the transport is closed once."""
        if self._closed:
            return
        self._closed = True
        self.joystick.close()
        self.camera.close()
        self.transport.close()

    async def _guard(self, activity, name: str) -> None:
        try:
            await activity
        except Exception as e:
            logger.error(f"{name} activity failed: {e}")
            self.ctx.request_shutdown()
            raise

    # =========================================================================
    # Activities
    # =========================================================================

    async def _camera_activity(self) -> None:
        while self.ctx.running:
            self._pending_read = asyncio.ensure_future(asyncio.to_thread(self.camera.read))
            frame = await asyncio.shield(self._pending_read)
            await self.frames.put(frame)

    async def _input_activity(self) -> None:
        while self.ctx.running:
            for event in self.joystick.poll():
                self.arbiter.handle_event(event, self.ctx)
            await asyncio.sleep(self.poll_interval_seconds)

    async def _decide_activity(self) -> None:
        while self.ctx.running:
            frame = await self.frames.get(timeout=0.5)
            if frame is None:
                continue
            novelty, action = await asyncio.to_thread(self.decide, frame)
            self.publish(action)

            if self._decisions % self.log_every_n_frames == 0:
                logger.info(
                    f"Decision [{self._decisions}]: novelty={novelty:.3f}, "
                    f"action={_action_name(action)}, mode={self.ctx.mode.value}"
                )

    async def _actuation_activity(self) -> None:
        light_sent = self.ctx.light_on
        while self.ctx.running:
            await asyncio.sleep(self.period_seconds)
            if not self.ctx.running:
                break

            self.transport.send(self.arbiter.command_for(self.ctx))
            self._commands_sent += 1

            if self.ctx.light_on != light_sent:
                light_sent = self.ctx.light_on
                self.transport.send(LightCommand(on=light_sent))
                self._commands_sent += 1

    # =========================================================================
    # Sense and decide
    # =========================================================================

    def decide(self, frame: Frame) -> Tuple[float, int]:
        """Run sensor and policy on one frame. CPU-bound; safe in a worker thread."""
        novelty = self.sensor.sense(frame.luminance) * self.novelty_gain
        action = self.policy.step(novelty)
        self._last_novelty = novelty
        return novelty, action

    def publish(self, action: int) -> None:
        """
        Make `action` the current autonomous action.

        Decisions are always published; in MANUAL mode the actuation
        activity simply ignores them. A LIGHT decision in AUTO mode flips
        the light.
        """
        if action == Action.LIGHT and self.ctx.mode == Mode.AUTO:
            self.ctx.light_on = not self.ctx.light_on
        self.ctx.action = action
        self._decisions += 1

    def get_metrics(self) -> dict:
        """Get loop metrics for observability."""
        return {
            "mode": self.ctx.mode.value,
            "action": _action_name(self.ctx.action),
            "speed": self.ctx.speed,
            "light_on": self.ctx.light_on,
            "decisions": self._decisions,
            "commands_sent": self._commands_sent,
            "last_novelty": self._last_novelty,
            **{f"buffer_{k}": v for k, v in self.frames.metrics().items()},
        }


def _action_name(action: int) -> str:
    try:
        return Action(action).name
    except ValueError:
        return str(action)
