"""
Policy Contract and Shared Helpers
==================================

Every policy consumes one novelty score per step and returns an action
index in [0, action_count). Variants are swapped at construction time
through `create_policy`.

Softmax with temperature:
    softmax(v, t)_i = exp(v_i / t - m) / sum_j exp(v_j / t - m)
    m = max(v / t) * (1 - 1e-300)

Subtracting m keeps every exponent <= 0, so inputs that differ by orders of
magnitude never overflow.
"""

from typing import Protocol, Sequence

import numpy as np


# Scaling factor for the softmax stabilizer
SOFTMAX_SCALE = 1.0 - 1e-300


class Policy(Protocol):
    """
    Protocol for action-value policies.

    Implemented by:
        - MarkovMind (context-keyed value table)
        - KMind (compression search over byte histories)
    """

    action_count: int

    def step(self, novelty: float) -> int:
        """
        Consume a novelty score and return the sampled action index.

        Args:
            novelty: Non-negative novelty score (rounded to a byte internally)

        Returns:
            Action index in [0, action_count)
        """
        ...

    def reset(self) -> None:
        """Forget everything learned so far."""
        ...


def softmax(values: Sequence[float], temperature: float = 1.0) -> np.ndarray:
    """
    Temperature-scaled, numerically stabilized softmax.

    Args:
        values: Finite value vector
        temperature: Positive temperature; lower is sharper

    Returns:
        Probability vector summing to 1
    """
    if temperature <= 0:
        raise ValueError("temperature must be positive")
    scaled = np.asarray(values, dtype=np.float64) / temperature
    shift = scaled.max() * SOFTMAX_SCALE
    weights = np.exp(scaled - shift)
    return weights / weights.sum()


def sample_index(probabilities: Sequence[float], draw: float) -> int:
    """
    Inverse-CDF sampling.

    Walks the cumulative distribution in index order and returns the first
    index whose running sum exceeds `draw`. If rounding leaves the total just
    short of `draw`, the last index is returned.

    Args:
        probabilities: Probability vector
        draw: Uniform random value in [0, 1)
    """
    cumulative = 0.0
    for index, probability in enumerate(probabilities):
        cumulative += probability
        if cumulative > draw:
            return index
    return len(probabilities) - 1


def quantize(value: float) -> int:
    """Round a score to the nearest byte, clamped to [0, 255]."""
    return int(min(255, max(0, round(value))))
