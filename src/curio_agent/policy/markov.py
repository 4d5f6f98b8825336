"""
Markov Mind
===========

Action-value policy keyed by a short history of quantized novelty bytes.

Per step:
    1. Look up the value vector for the current context (created lazily
       with uniform [0, 1) values).
    2. Sample an action from softmax(values, 1).
    3. Reinforce: values += 1 - previous_values, then renormalize to sum 1
       (skipped on the very first step).
    4. Store the vector under the current context and remember it as the
       previous vector.
    5. Shift the context left and append the current novelty byte.

The previous vector is held by reference. When the same context is visited
twice in a row, previous and current are the same array, which flattens the
entry to a uniform distribution.

The table is never evicted; its size is bounded by 256 ** context_width.
"""

import logging
from typing import Dict, Optional, Tuple

import numpy as np

from curio_agent.policy.base import quantize, sample_index, softmax


logger = logging.getLogger(__name__)

Context = Tuple[int, ...]


class MarkovMind:
    """
    Markov-context action-value policy.

    Attributes:
        action_count: Number of actions to choose from
        context_width: Bytes of novelty history in a context (k)
        temperature: Softmax temperature

    Example:
        mind = MarkovMind(action_count=5, rng=np.random.default_rng(1))
        action = mind.step(novelty)
    """

    def __init__(
        self,
        action_count: int,
        rng: np.random.Generator,
        context_width: int = 3,
        temperature: float = 1.0,
    ) -> None:
        """
        Initialize the mind.

        Args:
            action_count: Size of the action space (>= 1)
            rng: Random stream for lazy initialization and sampling
            context_width: Context width k; fixed for the instance lifetime
            temperature: Softmax temperature
        """
        if action_count < 1:
            raise ValueError("action_count must be >= 1")
        if context_width < 1:
            raise ValueError("context_width must be >= 1")

        self.action_count = action_count
        self.context_width = context_width
        self.temperature = temperature

        self._rng = rng
        self._table: Dict[Context, np.ndarray] = {}
        self._context: Context = (0,) * context_width
        self._previous: Optional[np.ndarray] = None
        self._steps: int = 0

        logger.info(
            f"MarkovMind initialized: actions={action_count}, "
            f"context_width={context_width}"
        )

    @property
    def context(self) -> Context:
        return self._context

    @property
    def table_size(self) -> int:
        """Number of contexts visited so far."""
        return len(self._table)

    @property
    def max_table_size(self) -> int:
        return 256 ** self.context_width

    @property
    def steps(self) -> int:
        return self._steps

    def values_for(self, context: Context) -> Optional[np.ndarray]:
        """Stored value vector for `context`, if visited."""
        return self._table.get(context)

    def step(self, novelty: float) -> int:
        """Consume a novelty score and return the sampled action index."""
        symbol = quantize(novelty)

        values = self._table.get(self._context)
        if values is None:
            values = self._rng.random(self.action_count)

        probabilities = softmax(values, self.temperature)
        action = sample_index(probabilities, self._rng.random())

        if self._previous is not None:
            values += 1.0 - self._previous
            values /= values.sum()

        self._previous = values
        self._table[self._context] = values
        self._context = self._context[1:] + (symbol,)
        self._steps += 1

        return action

    def reset(self) -> None:
        """Clear the table, the context and the previous vector."""
        self._table.clear()
        self._context = (0,) * self.context_width
        self._previous = None
        self._steps = 0
        logger.info("MarkovMind reset")
