"""
Complexity Estimator Tests
==========================

Tests for the compression-ratio complexity estimate.
"""

import numpy as np
import pytest

from curio_agent.signals.complexity import ComplexityEstimator, estimate_complexity


class TestEstimateComplexity:
    """Tests for estimate_complexity."""

    def test_empty_input_scores_zero(self):
        """Empty input has no complexity."""
        assert estimate_complexity(b"") == 0.0

    def test_constant_run_scores_low(self):
        """A long constant run compresses to almost nothing."""
        score = estimate_complexity(bytes(4096))
        assert score < 10.0

    def test_random_bytes_score_near_scale(self, rng):
        """Incompressible input lands near 255, possibly slightly above."""
        data = rng.integers(0, 256, 4096, dtype=np.uint8).tobytes()
        score = estimate_complexity(data)
        assert 240.0 < score < 265.0

    def test_constant_below_random(self, rng):
        """Structure scores lower than noise of the same length."""
        noise = rng.integers(0, 256, 1024, dtype=np.uint8).tobytes()
        assert estimate_complexity(b"\x07" * 1024) < estimate_complexity(noise)

    def test_pure_function_of_input(self, rng):
        """Repeated calls on the same bytes agree exactly."""
        data = rng.integers(0, 256, 512, dtype=np.uint8).tobytes()
        assert estimate_complexity(data) == estimate_complexity(bytearray(data))

    def test_single_byte(self):
        """A single byte expands under compression but stays finite."""
        score = estimate_complexity(b"\x00")
        assert np.isfinite(score)
        assert score > 0

    def test_scale_is_applied(self):
        data = b"abcabcabcabc"
        assert estimate_complexity(data, scale=1.0) * 255.0 == pytest.approx(
            estimate_complexity(data)
        )


class TestComplexityEstimator:
    """Tests for the bound estimator object."""

    def test_callable_matches_function(self):
        estimator = ComplexityEstimator()
        data = b"hello world" * 20
        assert estimator(data) == estimate_complexity(data)

    def test_invalid_level_rejected(self):
        with pytest.raises(ValueError):
            ComplexityEstimator(level=10)

    def test_repr(self):
        assert "level=9" in repr(ComplexityEstimator())
