"""
Policy Tests
============

Tests for the shared policy helpers, MarkovMind and KMind.
"""

import numpy as np
import pytest

from curio_agent.policy import KMind, MarkovMind, create_policy, quantize, sample_index, softmax


class TestSoftmax:
    """Tests for the stabilized temperature softmax."""

    def test_is_probability_vector(self, rng):
        probs = softmax(rng.random(6))
        assert np.all((probs > 0) & (probs < 1))
        assert probs.sum() == pytest.approx(1.0)

    def test_equal_values_are_uniform(self):
        assert np.allclose(softmax([3.0, 3.0, 3.0, 3.0]), 0.25)

    def test_huge_spread_does_not_overflow(self):
        probs = softmax([1000.0, 1.0, 0.0])
        assert np.all(np.isfinite(probs))
        assert probs[0] == pytest.approx(1.0)

    def test_extreme_magnitudes(self):
        probs = softmax([1e300, 1.0, -1e300])
        assert np.all(np.isfinite(probs))
        assert probs.sum() == pytest.approx(1.0)

    def test_low_temperature_sharpens(self):
        values = [0.2, 0.5, 0.3]
        assert softmax(values, 0.1)[1] > softmax(values, 1.0)[1]

    def test_non_positive_temperature_rejected(self):
        with pytest.raises(ValueError):
            softmax([1.0, 2.0], temperature=0.0)


class TestSampling:
    """Tests for inverse-CDF sampling and byte quantization."""

    @pytest.mark.parametrize("draw,expected", [(0.0, 0), (0.1, 0), (0.25, 1), (0.5, 2), (0.99, 2)])
    def test_inverse_cdf(self, draw, expected):
        assert sample_index([0.2, 0.3, 0.5], draw) == expected

    def test_rounding_shortfall_returns_last_index(self):
        assert sample_index([0.3, 0.3], 0.9) == 1

    def test_quantize_clamps(self):
        assert quantize(-3.0) == 0
        assert quantize(300.0) == 255
        assert quantize(2.6) == 3


class TestMarkovMind:
    """Tests for the context-keyed value table policy."""

    def test_actions_in_range(self, rng):
        mind = MarkovMind(5, rng)
        for novelty in rng.uniform(0, 40, 200):
            assert 0 <= mind.step(novelty) < 5

    def test_deterministic_for_seed(self):
        novelty = np.random.default_rng(3).uniform(0, 30, 300)
        a = MarkovMind(5, np.random.default_rng(42))
        b = MarkovMind(5, np.random.default_rng(42))
        assert [a.step(n) for n in novelty] == [b.step(n) for n in novelty]

    def test_different_seeds_diverge(self):
        novelty = np.random.default_rng(3).uniform(0, 30, 300)
        a = MarkovMind(5, np.random.default_rng(1))
        b = MarkovMind(5, np.random.default_rng(2))
        assert [a.step(n) for n in novelty] != [b.step(n) for n in novelty]

    def test_context_shifts_in_quantized_novelty(self, rng):
        mind = MarkovMind(4, rng, context_width=3)
        assert mind.context == (0, 0, 0)
        mind.step(7.4)
        mind.step(300.0)
        assert mind.context == (0, 7, 255)

    def test_table_bounded_by_context_space(self, rng):
        mind = MarkovMind(5, rng, context_width=1)
        for novelty in rng.uniform(0, 400, 10000):
            mind.step(novelty)
        assert mind.table_size <= mind.max_table_size == 256
        assert mind.steps == 10000

    def test_table_growth_wider_context(self, rng):
        mind = MarkovMind(5, rng, context_width=2)
        for novelty in rng.integers(0, 4, 10000):
            mind.step(float(novelty))
        assert mind.table_size <= 4 ** 2

    def test_stored_values_are_normalized(self, rng):
        mind = MarkovMind(5, rng, context_width=2)
        mind.step(1.0)
        for novelty in rng.uniform(0, 10, 50):
            context = mind.context
            mind.step(novelty)
            assert mind.values_for(context).sum() == pytest.approx(1.0)

    def test_repeated_context_flattens_to_uniform(self, rng):
        """The same context twice in a row aliases previous and current."""
        mind = MarkovMind(4, rng, context_width=3)
        mind.step(0.0)
        mind.step(0.0)
        assert np.allclose(mind.values_for((0, 0, 0)), 0.25)

    def test_first_step_values_are_stored_unnormalized(self, rng):
        mind = MarkovMind(3, rng)
        mind.step(5.0)
        values = mind.values_for((0, 0, 0))
        assert values.shape == (3,)
        assert np.all((values >= 0) & (values < 1))

    def test_reset(self, rng):
        mind = MarkovMind(3, rng)
        for _ in range(10):
            mind.step(12.0)
        mind.reset()
        assert mind.table_size == 0
        assert mind.context == (0, 0, 0)
        assert mind.steps == 0

    def test_invalid_arguments(self, rng):
        with pytest.raises(ValueError):
            MarkovMind(0, rng)
        with pytest.raises(ValueError):
            MarkovMind(3, rng, context_width=0)


class TestKMind:
    """Tests for the compression-search policy."""

    def test_actions_in_range(self, rng):
        mind = KMind(5, rng, size=256)
        for novelty in rng.uniform(0, 40, 30):
            assert 0 <= mind.step(novelty) < 5

    def test_deterministic_for_seed(self):
        a = KMind(5, np.random.default_rng(9), size=128)
        b = KMind(5, np.random.default_rng(9), size=128)
        assert [a.step(10.0 * i) for i in range(20)] == [b.step(10.0 * i) for i in range(20)]

    def test_first_step_writes_state_history(self, rng):
        mind = KMind(5, rng, size=64)
        action = mind.step(42.4)
        state = mind.state_history
        scores = mind.last_scores
        assert state[2] == 42
        assert state[3] == quantize(255 * scores[action])

    def test_filter_averages_scores(self, rng):
        mind = KMind(4, rng, size=64)
        mind.step(10.0)
        first = mind.last_scores
        assert np.allclose(mind.filter, first / 2)
        mind.step(20.0)
        assert np.allclose(mind.filter, (first / 2 + mind.last_scores) / 2)

    def test_scores_are_scaled_complexities(self, rng):
        mind = KMind(3, rng, size=128)
        mind.step(1.0)
        assert np.all(mind.last_scores > 0)
        assert np.all(mind.last_scores < 1.2)

    def test_sequential_candidates_accumulate(self, rng):
        """Without restore, each candidate trial builds on the previous one."""
        mind = KMind(5, rng, size=64)
        before = mind.action_history
        action = mind.step(3.0)
        after = mind.action_history
        assert after[0] == action
        assert list(after[1:5]) == [3, 2, 1, 0]
        assert after[5:] == before[:-5]

    def test_restore_candidates_prepend_once(self, rng):
        """With restore, the history grows by exactly the chosen action."""
        mind = KMind(5, rng, size=64, restore_between_candidates=True)
        before = mind.action_history
        action = mind.step(3.0)
        after = mind.action_history
        assert after[0] == action
        assert after[1:] == before[:-1]

    def test_reset(self, rng):
        mind = KMind(3, rng, size=32)
        mind.step(5.0)
        mind.reset()
        assert mind.last_scores is None
        assert np.all(mind.filter == 0)
        assert len(mind.action_history) == 32

    def test_invalid_arguments(self, rng):
        with pytest.raises(ValueError):
            KMind(0, rng)
        with pytest.raises(ValueError):
            KMind(3, rng, size=1)


class TestCreatePolicy:
    """Tests for the policy factory."""

    def test_markov(self, rng):
        policy = create_policy("markov", action_count=5, rng=rng, context_width=2)
        assert isinstance(policy, MarkovMind)
        assert policy.context_width == 2

    def test_kmind(self, rng):
        policy = create_policy(
            "kmind",
            action_count=6,
            rng=rng,
            history_size=128,
            restore_between_candidates=True,
        )
        assert isinstance(policy, KMind)
        assert policy.size == 128
        assert policy.restore_between_candidates

    def test_unknown(self, rng):
        with pytest.raises(ValueError):
            create_policy("qlearning", action_count=5, rng=rng)
