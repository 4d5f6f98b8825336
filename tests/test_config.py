"""
Configuration Tests
===================

Tests for YAML loading, environment overrides and validation.
"""

import pytest
import yaml
from pydantic import ValidationError

from curio_agent.config import ControlConfig, Settings, load_config


class TestDefaults:
    """Tests for default values."""

    def test_defaults(self):
        settings = Settings()
        assert settings.sensor.mode == "entropy"
        assert settings.sensor.fft_depth == 8
        assert settings.sensor.novelty_gain == 4.0
        assert settings.policy.context_width == 3
        assert settings.policy.history_size == 1024
        assert settings.control.period_seconds == 0.3
        assert settings.control.dead_zone == 20000
        assert settings.control.drive_threshold == 32000
        assert settings.transport.port == "/dev/ttyAMA0"
        assert settings.transport.baudrate == 115200
        assert settings.simulation.iterations == 1024


class TestLoadConfig:
    """Tests for load_config."""

    def test_yaml_values(self, tmp_path, monkeypatch):
        monkeypatch.delenv("CURIO_SENSOR_MODE", raising=False)
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({
            "sensor": {"mode": "compression", "noise_sigma": 3.0},
            "policy": {"kind": "kmind", "restore_between_candidates": True},
            "simulation": {"intensity_deltas": [-64, 64]},
        }))

        settings = load_config(str(path))
        assert settings.sensor.mode == "compression"
        assert settings.sensor.noise_sigma == 3.0
        assert settings.policy.kind == "kmind"
        assert settings.policy.restore_between_candidates
        assert settings.simulation.intensity_deltas == (-64, 64)

    def test_env_overrides_yaml(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({"transport": {"port": "/dev/ttyUSB0"}}))
        monkeypatch.setenv("CURIO_SERIAL_PORT", "/dev/ttyS1")
        monkeypatch.setenv("CURIO_POLICY_SEED", "77")
        monkeypatch.setenv("CURIO_TRANSPORT_BACKEND", "log")

        settings = load_config(str(path))
        assert settings.transport.port == "/dev/ttyS1"
        assert settings.transport.backend == "log"
        assert settings.policy.seed == 77

    def test_missing_file_uses_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        settings = load_config(str(tmp_path / "absent.yaml"))
        assert settings.control.speed == 0.2

    def test_invalid_mode_rejected(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({"sensor": {"mode": "wavelet"}}))
        with pytest.raises(ValidationError):
            load_config(str(path))

    def test_context_width_bounds(self):
        with pytest.raises(ValidationError):
            Settings.model_validate({"policy": {"context_width": 4}})

    def test_speed_range_validated(self):
        with pytest.raises(ValidationError):
            ControlConfig(speed_min=0.3, speed_max=0.2)

    def test_repository_config_parses(self):
        from pathlib import Path

        path = Path(__file__).parent.parent / "config.yaml"
        settings = load_config(str(path))
        assert settings.sensor.fft_depth == 8

