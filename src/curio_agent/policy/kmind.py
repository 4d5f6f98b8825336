"""
KMind
=====

Compression-search policy over two rolling byte histories.

State:
    - action history: recent action bytes, newest at index 0
    - state history: novelty bytes interleaved with derived action entropies
    - filter: per-action exponential filter of candidate scores

Per step:
    1. Advance the state cursor by 2 and record round(novelty).
    2. Advance the action cursor by 2. For every candidate action a:
       prepend a to the action history, score the action history with the
       complexity estimator, write that byte at the action cursor, then
       score the whole state history. That score / 255 is the candidate's.
    3. filter[a] = (filter[a] + score[a]) / 2
    4. probabilities = softmax(filter, temperature)
    5. Sample an action by inverse CDF.
    6. Write round(255 * score[action]) at the action cursor and the action
       byte at action history index 0.

Candidate trials are sequential by default: the action history is not
restored between candidates, so each trial starts from the previous one's
buffer. With `restore_between_candidates=True` each trial starts from the
same snapshot and the chosen action is prepended to it on commit.
"""

import logging
from typing import Optional

import numpy as np

from curio_agent.policy.base import quantize, sample_index, softmax
from curio_agent.signals.complexity import ComplexityEstimator


logger = logging.getLogger(__name__)


class KMind:
    """
    Kolmogorov-complexity search policy.

    Attributes:
        action_count: Number of actions to choose from (<= 256)
        size: Capacity of each byte history
        temperature: Softmax temperature
        restore_between_candidates: Snapshot/restore the action history per trial
    """

    def __init__(
        self,
        action_count: int,
        rng: np.random.Generator,
        size: int = 1024,
        temperature: float = 0.4,
        restore_between_candidates: bool = False,
        estimator: Optional[ComplexityEstimator] = None,
    ) -> None:
        if not 1 <= action_count <= 256:
            raise ValueError("action_count must be in [1, 256]")
        if size < 2:
            raise ValueError("size must be >= 2")

        self.action_count = action_count
        self.size = size
        self.temperature = temperature
        self.restore_between_candidates = restore_between_candidates

        self._rng = rng
        self._estimator = estimator or ComplexityEstimator()
        self._init_state()

        logger.info(
            f"KMind initialized: actions={action_count}, size={size}, "
            f"temperature={temperature}, restore={restore_between_candidates}"
        )

    def _init_state(self) -> None:
        self._state = bytearray(self._rng.integers(0, 256, self.size, dtype=np.uint8).tobytes())
        self._actions = bytearray(self._rng.integers(0, 256, self.size, dtype=np.uint8).tobytes())
        self._state_index = 0
        self._action_index = 1
        self._filter = np.zeros(self.action_count, dtype=np.float64)
        self._last_scores: Optional[np.ndarray] = None

    @property
    def action_history(self) -> bytes:
        return bytes(self._actions)

    @property
    def state_history(self) -> bytes:
        return bytes(self._state)

    @property
    def filter(self) -> np.ndarray:
        return self._filter.copy()

    @property
    def last_scores(self) -> Optional[np.ndarray]:
        return None if self._last_scores is None else self._last_scores.copy()

    def _prepend(self, action: int) -> None:
        self._actions[1:] = self._actions[:-1]
        self._actions[0] = action

    def step(self, novelty: float) -> int:
        """Consume a novelty score and return the sampled action index."""
        self._state_index = (self._state_index + 2) % self.size
        self._state[self._state_index] = quantize(novelty)
        self._action_index = (self._action_index + 2) % self.size

        snapshot = bytes(self._actions) if self.restore_between_candidates else None
        scores = np.zeros(self.action_count, dtype=np.float64)
        for candidate in range(self.action_count):
            if snapshot is not None:
                self._actions[:] = snapshot
            self._prepend(candidate)
            action_entropy = self._estimator(self._actions)
            self._state[self._action_index] = quantize(action_entropy)
            scores[candidate] = self._estimator(self._state) / self._estimator.scale

        self._filter = (self._filter + scores) / 2
        probabilities = softmax(self._filter, self.temperature)
        action = sample_index(probabilities, self._rng.random())

        self._state[self._action_index] = quantize(255 * scores[action])
        if snapshot is not None:
            self._actions[:] = snapshot
            self._prepend(action)
        else:
            self._actions[0] = action

        self._last_scores = scores
        return action

    def reset(self) -> None:
        """Re-randomize both histories and clear the filter."""
        self._init_state()
        logger.info("KMind reset")
