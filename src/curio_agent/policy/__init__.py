"""
Policy Module
=============

Online action-value policies driven by the novelty score.

Both variants share one contract, `step(novelty) -> action` plus
`reset()`, and are selected at construction time:

    policy = create_policy("markov", action_count=5, rng=rng)
"""

import logging

import numpy as np

from curio_agent.policy.base import Policy, quantize, sample_index, softmax
from curio_agent.policy.kmind import KMind
from curio_agent.policy.markov import MarkovMind


logger = logging.getLogger(__name__)


def create_policy(
    kind: str,
    action_count: int,
    rng: np.random.Generator,
    context_width: int = 3,
    history_size: int = 1024,
    kmind_temperature: float = 0.4,
    restore_between_candidates: bool = False,
) -> Policy:
    """
    Create a policy by name.

    Args:
        kind: 'markov' or 'kmind'
        action_count: Size of the action space
        rng: Random stream owned by the policy
        context_width: MarkovMind context width
        history_size: KMind byte history capacity
        kmind_temperature: KMind softmax temperature
        restore_between_candidates: KMind candidate trial mode
    """
    if kind == "markov":
        return MarkovMind(action_count, rng, context_width=context_width)
    if kind == "kmind":
        return KMind(
            action_count,
            rng,
            size=history_size,
            temperature=kmind_temperature,
            restore_between_candidates=restore_between_candidates,
        )
    raise ValueError(f"Unknown policy kind: {kind}")


__all__ = [
    "KMind",
    "MarkovMind",
    "Policy",
    "create_policy",
    "quantize",
    "sample_index",
    "softmax",
]
