"""
Curio Agent Main Application
============================

Entry point for the curiosity controller.

Modes:
    default  - Drive the rover: camera -> sensor -> policy -> transport,
               with joystick override
    --sim    - Run the offline grid-world simulation and write a GIF

Usage:
    curio-agent --config config.yaml
    curio-agent --sim --seed 7 --iterations 1024 --output sim.gif

Exit Status:
    0 on clean shutdown, 1 on a fatal camera or transport failure.
"""

import argparse
import asyncio
import logging
import signal
import sys
from typing import List, Optional

import numpy as np

from curio_agent.config import Settings, load_config, settings as default_settings, setup_logging
from curio_agent.control import (
    ArbiterSettings,
    ControlArbiter,
    ControlContext,
    ControlLoop,
    JoystickSource,
    LogTransport,
    NullJoystickSource,
    PygameJoystickSource,
    SerialTransport,
    Transport,
    TransportError,
)
from curio_agent.models.actions import action_count
from curio_agent.policy import Policy, create_policy
from curio_agent.sensing import SpectralNoveltySensor
from curio_agent.simulation import render_gif, run_simulation
from curio_agent.stream import CameraError, CameraSource, FrameBuffer, OpenCVCamera, SyntheticCamera


logger = logging.getLogger(__name__)


# =============================================================================
# Component Factories
# =============================================================================

def create_camera(settings: Settings) -> CameraSource:
    """Create the camera backend selected in config."""
    cam = settings.camera
    if cam.backend == "opencv":
        logger.info(f"Using OpenCVCamera: {cam.device}")
        return OpenCVCamera(cam.device, width=cam.width, height=cam.height)
    if cam.backend == "synthetic":
        logger.info("Using SyntheticCamera")
        return SyntheticCamera(
            width=cam.width,
            height=cam.height,
            seed=settings.policy.seed,
            fps=30.0,
        )
    raise ValueError(f"Unknown camera backend: {cam.backend}")


def create_joystick(settings: Settings) -> JoystickSource:
    """Create the joystick backend selected in config."""
    backend = settings.control.joystick_backend
    if backend == "pygame":
        return PygameJoystickSource()
    if backend == "none":
        return NullJoystickSource()
    raise ValueError(f"Unknown joystick backend: {backend}")


def create_transport(settings: Settings) -> Transport:
    """Create the actuator transport selected in config."""
    tr = settings.transport
    if tr.backend == "serial":
        logger.info(f"Using SerialTransport: {tr.port} @ {tr.baudrate}")
        return SerialTransport(tr.port, baudrate=tr.baudrate, write_timeout=tr.write_timeout)
    if tr.backend == "log":
        logger.info("Using LogTransport (dry run)")
        return LogTransport()
    raise ValueError(f"Unknown transport backend: {tr.backend}")


def create_agent_policy(settings: Settings) -> Policy:
    """Create the action-value policy selected in config."""
    pol = settings.policy
    return create_policy(
        pol.kind,
        action_count=action_count(pol.enable_light),
        rng=np.random.default_rng(pol.seed),
        context_width=pol.context_width,
        history_size=pol.history_size,
        kmind_temperature=pol.kmind_temperature,
        restore_between_candidates=pol.restore_between_candidates,
    )


def build_control_loop(settings: Settings) -> ControlLoop:
    """Wire every collaborator from config into a ControlLoop."""
    ctl = settings.control
    sensor_rng = (
        np.random.default_rng(settings.policy.seed + 1)
        if settings.sensor.noise_sigma > 0
        else None
    )
    sensor = SpectralNoveltySensor(
        mode=settings.sensor.mode,
        depth=settings.sensor.fft_depth,
        noise_sigma=settings.sensor.noise_sigma,
        rng=sensor_rng,
        log_every_n_frames=settings.logging.log_every_n_frames,
    )
    arbiter = ControlArbiter(
        ArbiterSettings(
            dead_zone=ctl.dead_zone,
            drive_threshold=ctl.drive_threshold,
            toggle_button=ctl.toggle_button,
            speed_button=ctl.speed_button,
            speed_step=ctl.speed_step,
            speed_min=ctl.speed_min,
            speed_max=ctl.speed_max,
        )
    )
    return ControlLoop(
        camera=create_camera(settings),
        sensor=sensor,
        policy=create_agent_policy(settings),
        joystick=create_joystick(settings),
        transport=create_transport(settings),
        arbiter=arbiter,
        ctx=ControlContext(speed=ctl.speed),
        frame_buffer=FrameBuffer(maxsize=settings.camera.max_queue_size),
        period_seconds=ctl.period_seconds,
        poll_interval_seconds=ctl.poll_interval_seconds,
        novelty_gain=settings.sensor.novelty_gain,
        log_every_n_frames=settings.logging.log_every_n_frames,
    )


# =============================================================================
# Runners
# =============================================================================

async def run_agent(settings: Settings) -> None:
    """Run the control loop until SIGINT/SIGTERM or a fatal error."""
    loop = build_control_loop(settings)

    event_loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        event_loop.add_signal_handler(sig, loop.ctx.request_shutdown)

    logger.info(f"Starting {settings.agent.name} {settings.agent.version}")
    await loop.run()
    logger.info("Shutdown complete")


def run_sim(settings: Settings) -> None:
    """Run the simulation harness and write the animation."""
    sim = settings.simulation
    result = run_simulation(
        seed=sim.seed,
        width=sim.width,
        height=sim.height,
        iterations=sim.iterations,
        sensor_mode=sim.sensor_mode,
        depth=settings.sensor.fft_depth,
        context_width=settings.policy.context_width,
        intensity_deltas=sim.intensity_deltas,
    )
    render_gif(
        result.frames,
        sim.output_path,
        scale=sim.frame_scale,
        duration_ms=sim.frame_duration_ms,
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Curiosity-driven rover controller")
    parser.add_argument("--config", help="Path to config.yaml")
    parser.add_argument("--sim", action="store_true", help="Run the offline simulation")
    parser.add_argument("--seed", type=int, help="Simulation seed")
    parser.add_argument("--iterations", type=int, help="Simulation iterations")
    parser.add_argument("--output", help="Simulation GIF path")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    settings = (load_config(args.config) if args.config else default_settings).model_copy(deep=True)

    if args.seed is not None:
        settings.simulation.seed = args.seed
    if args.iterations is not None:
        settings.simulation.iterations = args.iterations
    if args.output is not None:
        settings.simulation.output_path = args.output

    setup_logging(settings)

    if args.sim:
        run_sim(settings)
        return 0

    try:
        asyncio.run(run_agent(settings))
    except (TransportError, CameraError) as e:
        logger.error(f"Fatal: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
