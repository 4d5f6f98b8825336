"""
Spectral Novelty Sensor
=======================

Turns a stream of luminance frames into a scalar novelty score.

Pipeline (per frame):
    1. Optionally add Gaussian pixel noise (robustness runs only)
    2. Push the frame into the TemporalBuffer
    3. FFT over (time, x, y)
    4. Reduce the frequency field with the configured strategy

Modes:
    - entropy: Shannon entropy of the magnitude spectrum (bits)
    - compression: complexity of the quantized magnitude spectrum (0-255)
    - compression_phase: as compression, with a phase byte per bin
"""

import logging
from typing import Optional

import numpy as np

from curio_agent.sensing.reducers import (
    SpectrumReducer,
    make_complexity_reducer,
    spectral_entropy,
)
from curio_agent.sensing.temporal_buffer import TemporalBuffer
from curio_agent.signals.complexity import ComplexityEstimator


logger = logging.getLogger(__name__)

SENSOR_MODES = ("entropy", "compression", "compression_phase")


def create_reducer(
    mode: str,
    estimator: Optional[ComplexityEstimator] = None,
) -> SpectrumReducer:
    """Select the spectrum reducer for a sensor mode."""
    if mode == "entropy":
        return spectral_entropy
    if mode == "compression":
        return make_complexity_reducer(estimator or ComplexityEstimator())
    if mode == "compression_phase":
        return make_complexity_reducer(
            estimator or ComplexityEstimator(), include_phase=True
        )
    raise ValueError(f"Unknown sensor mode: {mode}")


class SpectralNoveltySensor:
    """
    Novelty sensor over a short temporal window of frames.

    The temporal buffer is allocated on the first `sense` call and sized to
    that frame; all later frames must have the same dimensions.

    Attributes:
        mode: Reducer name (see SENSOR_MODES)
        depth: FFT depth along time
        noise_sigma: Std-dev of added pixel noise on the 0-255 scale

    Example:
        sensor = SpectralNoveltySensor(mode="entropy")
        for gray in frames:
            novelty = sensor.sense(gray)
    """

    def __init__(
        self,
        mode: str = "entropy",
        depth: int = 8,
        noise_sigma: float = 0.0,
        rng: Optional[np.random.Generator] = None,
        estimator: Optional[ComplexityEstimator] = None,
        log_every_n_frames: int = 30,
    ) -> None:
        """
        Initialize the sensor.

        Args:
            mode: 'entropy', 'compression' or 'compression_phase'
            depth: Number of frames in the temporal buffer
            noise_sigma: Gaussian pixel noise; needs `rng` to take effect
            rng: Random generator for the noise
            estimator: Complexity estimator for compression modes
            log_every_n_frames: Log the score every N frames
        """
        if noise_sigma < 0:
            raise ValueError("noise_sigma must be >= 0")

        self.mode = mode
        self.depth = depth
        self.noise_sigma = noise_sigma
        self.log_every_n_frames = log_every_n_frames

        self._rng = rng
        self._reduce = create_reducer(mode, estimator)
        self._buffer = TemporalBuffer(depth)
        self._last_score: Optional[float] = None

        logger.info(
            f"SpectralNoveltySensor initialized: mode={mode}, depth={depth}, "
            f"noise_sigma={noise_sigma}"
        )

    @property
    def buffer(self) -> TemporalBuffer:
        return self._buffer

    @property
    def noisy(self) -> bool:
        """Whether pixel noise is actually applied."""
        return self.noise_sigma > 0 and self._rng is not None

    def sense(self, luminance: np.ndarray) -> float:
        """
        Ingest one frame and return the novelty of the current window.

        Args:
            luminance: (H, W) grayscale frame on the 0-255 scale

        Returns:
            Non-negative novelty score in the mode's unit
        """
        gray = np.asarray(luminance, dtype=np.float64)
        if self.noisy:
            gray = np.clip(
                gray + self.noise_sigma * self._rng.standard_normal(gray.shape),
                0.0,
                255.0,
            )

        self._buffer.push(gray)
        score = self._reduce(self._buffer.spectrum())
        self._last_score = score

        if self._buffer.frames_seen % self.log_every_n_frames == 0:
            logger.info(
                f"Novelty [frame {self._buffer.frames_seen}]: "
                f"{self.mode}={score:.4f}"
            )

        return score

    def reset(self) -> None:
        """Drop the temporal buffer."""
        self._buffer.reset()
        self._last_score = None
        logger.info("SpectralNoveltySensor reset")

    def get_metrics(self) -> dict:
        """Get sensor metrics for observability."""
        return {
            "mode": self.mode,
            "depth": self.depth,
            "frames_seen": self._buffer.frames_seen,
            "last_score": self._last_score,
            "noise_sigma": self.noise_sigma,
        }
