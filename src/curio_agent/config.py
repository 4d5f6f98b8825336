"""
Curio Agent Configuration
=========================

This module handles configuration loading for the curiosity controller.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    CURIO_CONFIG             -> path of the YAML file
    CURIO_CAMERA_DEVICE      -> camera.device
    CURIO_CAMERA_BACKEND     -> camera.backend
    CURIO_SENSOR_MODE        -> sensor.mode
    CURIO_POLICY_KIND        -> policy.kind
    CURIO_POLICY_SEED        -> policy.seed
    CURIO_JOYSTICK_BACKEND   -> control.joystick_backend
    CURIO_TRANSPORT_BACKEND  -> transport.backend
    CURIO_SERIAL_PORT        -> transport.port
    CURIO_LOG_LEVEL          -> logging.level

Example:
    from curio_agent.config import settings

    print(settings.sensor.mode)
    print(settings.transport.port)
    print(settings.control.period_seconds)
"""

import os
import logging
from pathlib import Path
from typing import Literal, Optional, Tuple

import yaml
from pydantic import BaseModel, Field, field_validator


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class AgentConfig(BaseModel):
    """Agent identification configuration."""

    name: str = Field(default="curio-agent", description="Agent name")
    version: str = Field(default="v0.1.0", description="Agent version")


class CameraConfig(BaseModel):
    """Camera source configuration."""

    backend: Literal["opencv", "synthetic"] = Field(
        default="opencv",
        description="Camera backend: 'opencv' (V4L device) or 'synthetic'",
    )
    device: str = Field(
        default="/dev/video0",
        description="Device path or index understood by cv2.VideoCapture",
    )
    width: int = Field(default=32, ge=1, description="Luminance frame width after resize")
    height: int = Field(default=24, ge=1, description="Luminance frame height after resize")
    max_queue_size: int = Field(
        default=1,
        ge=1,
        description="Frames held between camera and sensor (drop-oldest)",
    )


class SensorConfig(BaseModel):
    """Spectral novelty sensor configuration."""

    mode: Literal["entropy", "compression", "compression_phase"] = Field(
        default="entropy",
        description="Spectrum reduction: entropy, compression or compression_phase",
    )
    fft_depth: int = Field(default=8, ge=1, description="Frames in the temporal buffer")
    noise_sigma: float = Field(
        default=0.0,
        ge=0,
        description="Gaussian pixel noise (0-255 scale) for robustness runs; 0 disables",
    )
    novelty_gain: float = Field(
        default=4.0,
        gt=0,
        description="Multiplier applied to the novelty score before the policy",
    )


class PolicyConfig(BaseModel):
    """Action-value policy configuration."""

    kind: Literal["markov", "kmind"] = Field(default="markov", description="Policy variant")
    seed: int = Field(default=1, description="Seed for the policy random stream")
    context_width: int = Field(default=3, ge=1, le=3, description="Markov context width k")
    history_size: int = Field(default=1024, ge=2, description="KMind byte history capacity")
    kmind_temperature: float = Field(default=0.4, gt=0, description="KMind softmax temperature")
    restore_between_candidates: bool = Field(
        default=False,
        description="Restore the KMind action buffer between candidate trials",
    )
    enable_light: bool = Field(default=False, description="Expose the LIGHT accessory action")


class ControlConfig(BaseModel):
    """Control loop and joystick arbitration configuration."""

    period_seconds: float = Field(default=0.3, gt=0, description="Actuation period")
    poll_interval_seconds: float = Field(default=0.016, gt=0, description="Joystick poll interval")
    speed: float = Field(default=0.2, gt=0, le=1.0, description="Initial wheel speed")
    speed_step: float = Field(default=0.1, gt=0, description="Speed button increment")
    speed_min: float = Field(default=0.1, gt=0, le=1.0, description="Speed after wrap-around")
    speed_max: float = Field(default=0.3, gt=0, le=1.0, description="Highest selectable speed")
    dead_zone: int = Field(
        default=20000,
        ge=0,
        le=32767,
        description="Perpendicular-axis band treated as centered",
    )
    drive_threshold: int = Field(
        default=32000,
        ge=0,
        le=32767,
        description="Driving-axis deflection required to register up/down",
    )
    toggle_button: int = Field(default=0, ge=0, description="Button toggling manual/auto")
    speed_button: int = Field(default=1, ge=0, description="Button cycling the speed")
    joystick_backend: Literal["pygame", "none"] = Field(
        default="pygame",
        description="Joystick backend: 'pygame' or 'none'",
    )

    @field_validator("speed_max")
    @classmethod
    def _speed_range(cls, value: float, info) -> float:
        speed_min = info.data.get("speed_min")
        if speed_min is not None and value < speed_min:
            raise ValueError("speed_max must be >= speed_min")
        return value


class TransportConfig(BaseModel):
    """Actuator transport configuration."""

    backend: Literal["serial", "log"] = Field(
        default="serial",
        description="Transport backend: 'serial' or 'log' (dry run)",
    )
    port: str = Field(default="/dev/ttyAMA0", description="Serial device")
    baudrate: int = Field(default=115200, gt=0, description="Serial baud rate")
    write_timeout: float = Field(default=1.0, gt=0, description="Serial write timeout (seconds)")


class SimulationConfig(BaseModel):
    """Offline grid-world simulation configuration."""

    width: int = Field(default=16, ge=1, description="Grid width")
    height: int = Field(default=16, ge=1, description="Grid height")
    iterations: int = Field(default=1024, ge=1, description="Iterations (= animation frames)")
    seed: int = Field(default=1, description="Random seed")
    sensor_mode: Literal["entropy", "compression", "compression_phase"] = Field(
        default="compression",
        description="Sensor mode used inside the simulation",
    )
    intensity_deltas: Optional[Tuple[int, ...]] = Field(
        default=None,
        description="Deltas for an intensity mind; None toggles cells instead",
    )
    output_path: str = Field(default="sim.gif", description="Animated GIF output path")
    frame_scale: int = Field(default=1, ge=1, description="Nearest-neighbor upscaling")
    frame_duration_ms: int = Field(default=0, ge=0, description="Per-frame GIF delay")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: Literal["text", "json"] = Field(default="text", description="Log line format")
    log_every_n_frames: int = Field(default=30, ge=1, description="Periodic log cadence")


class Settings(BaseModel):
    """
    Main settings class for the curiosity controller.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    agent: AgentConfig = Field(default_factory=AgentConfig)
    camera: CameraConfig = Field(default_factory=CameraConfig)
    sensor: SensorConfig = Field(default_factory=SensorConfig)
    policy: PolicyConfig = Field(default_factory=PolicyConfig)
    control: ControlConfig = Field(default_factory=ControlConfig)
    transport: TransportConfig = Field(default_factory=TransportConfig)
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def _find_config_file() -> Optional[Path]:
    """First existing config file: $CURIO_CONFIG, ./config.y(a)ml, repo root."""
    candidates = []
    if env_path := os.environ.get("CURIO_CONFIG"):
        candidates.append(Path(env_path))
    candidates += [
        Path.cwd() / "config.yaml",
        Path.cwd() / "config.yml",
        Path(__file__).resolve().parents[2] / "config.yaml",
    ]
    return next((p for p in candidates if p.is_file()), None)


def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Build Settings from defaults, a YAML file and CURIO_* variables.

    Args:
        config_path: Explicit YAML path. When None, the first existing of
            $CURIO_CONFIG, ./config.yaml, ./config.yml and the repository
            config.yaml is used.

    Returns:
        Validated Settings

    Raises:
        pydantic.ValidationError: a value is out of range or unknown
    """
    path = Path(config_path) if config_path else _find_config_file()

    raw: dict = {}
    if path is not None and path.is_file():
        logger.info(f"Reading configuration: {path}")
        raw = yaml.safe_load(path.read_text()) or {}
    else:
        logger.warning(f"Config file {path or 'config.yaml'} not found, using defaults and environment")

    _apply_env_overrides(raw)
    return Settings.model_validate(raw)


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Camera settings
    if env_device := os.environ.get("CURIO_CAMERA_DEVICE"):
        config_data.setdefault("camera", {})["device"] = env_device
    if env_camera := os.environ.get("CURIO_CAMERA_BACKEND"):
        config_data.setdefault("camera", {})["backend"] = env_camera

    # Sensor / policy settings
    if env_mode := os.environ.get("CURIO_SENSOR_MODE"):
        config_data.setdefault("sensor", {})["mode"] = env_mode
    if env_kind := os.environ.get("CURIO_POLICY_KIND"):
        config_data.setdefault("policy", {})["kind"] = env_kind
    if env_seed := os.environ.get("CURIO_POLICY_SEED"):
        config_data.setdefault("policy", {})["seed"] = int(env_seed)

    # Control / transport settings
    if env_joystick := os.environ.get("CURIO_JOYSTICK_BACKEND"):
        config_data.setdefault("control", {})["joystick_backend"] = env_joystick
    if env_transport := os.environ.get("CURIO_TRANSPORT_BACKEND"):
        config_data.setdefault("transport", {})["backend"] = env_transport
    if env_port := os.environ.get("CURIO_SERIAL_PORT"):
        config_data.setdefault("transport", {})["port"] = env_port

    # Logging settings
    if env_log := os.environ.get("CURIO_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log


_LOG_FORMATS = {
    "json": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
    "text": "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
}


def setup_logging(settings: Settings) -> None:
    """Install the root handler for the configured level and format."""
    cfg = settings.logging
    logging.basicConfig(
        level=getattr(logging, cfg.level.upper(), logging.INFO),
        format=_LOG_FORMATS.get(cfg.format, _LOG_FORMATS["text"]),
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    # Pillow logs every GIF chunk at DEBUG
    logging.getLogger("PIL").setLevel(max(logging.INFO, logging.getLogger().level))


# =============================================================================
# Global Settings Instance
# =============================================================================

# Global settings instance - loaded on import
settings = load_config()
