"""
Spectrum Reducers
=================

Strategies that turn a complex frequency field into one novelty score.

Entropy:
    p = |F| / sum(|F|)
    novelty = -sum(p * log2(p)) over p > 0
    Bounded by log2(D * W * H). Unit: bits.

Compression:
    Each bin is quantized to a byte, int(255 * |F| / sum(|F|)), optionally
    followed by its phase byte, int(255 * (arg F + pi) / sum(arg F + pi)).
    Bytes are laid out in (depth, x, y) order and scored with the
    complexity estimator. Unit: 0-255 compression percentage.

The two units are not comparable; a sensor uses exactly one reducer.
"""

from typing import Callable

import numpy as np

from curio_agent.signals.complexity import ComplexityEstimator


SpectrumReducer = Callable[[np.ndarray], float]


def spectral_entropy(spectrum: np.ndarray) -> float:
    """
    Shannon entropy of the normalized magnitude spectrum.

    Zero-probability bins contribute nothing; an all-zero spectrum scores 0.
    """
    magnitude = np.abs(spectrum).ravel()
    total = magnitude.sum()
    if not total > 0:
        return 0.0
    p = magnitude / total
    p = p[p > 0]
    entropy = -np.sum(p * np.log2(p))
    # Rounding can leave a tiny negative value on single-bin inputs
    return max(0.0, float(entropy))


def quantize_spectrum(spectrum: np.ndarray, include_phase: bool = False) -> bytes:
    """
    Encode the spectrum as one byte per bin (two with phase).

    Args:
        spectrum: (D, W, H) complex field
        include_phase: Interleave a phase byte after every magnitude byte

    Returns:
        Byte sequence in (depth, x, y) order
    """
    magnitude = np.abs(spectrum)
    total = magnitude.sum()
    if total > 0:
        magnitude_bytes = (255.0 * magnitude / total).astype(np.uint8)
    else:
        magnitude_bytes = np.zeros(magnitude.shape, dtype=np.uint8)

    if not include_phase:
        return magnitude_bytes.tobytes()

    phase = np.angle(spectrum) + np.pi
    phase_total = phase.sum()
    if phase_total > 0:
        phase_bytes = (255.0 * phase / phase_total).astype(np.uint8)
    else:
        phase_bytes = np.zeros(phase.shape, dtype=np.uint8)

    return np.stack([magnitude_bytes, phase_bytes], axis=-1).tobytes()


def make_complexity_reducer(
    estimator: ComplexityEstimator,
    include_phase: bool = False,
) -> SpectrumReducer:
    """Build a reducer scoring the quantized spectrum with `estimator`."""

    def spectral_complexity(spectrum: np.ndarray) -> float:
        return estimator(quantize_spectrum(spectrum, include_phase=include_phase))

    return spectral_complexity
