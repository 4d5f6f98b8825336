"""
Sensing Module
==============

Spectral novelty sensing over a temporal window of luminance frames.

This module provides:
    - TemporalBuffer: Fixed-depth FIFO of complex planes
    - spectral_entropy / make_complexity_reducer: Spectrum-to-score strategies
    - SpectralNoveltySensor: Buffer + FFT + reducer
"""

from curio_agent.sensing.reducers import (
    make_complexity_reducer,
    quantize_spectrum,
    spectral_entropy,
)
from curio_agent.sensing.sensor import SENSOR_MODES, SpectralNoveltySensor, create_reducer
from curio_agent.sensing.temporal_buffer import TemporalBuffer

__all__ = [
    "SENSOR_MODES",
    "SpectralNoveltySensor",
    "TemporalBuffer",
    "create_reducer",
    "make_complexity_reducer",
    "quantize_spectrum",
    "spectral_entropy",
]
