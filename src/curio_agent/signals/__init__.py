"""
Signals Module
==============

Complexity estimation shared by the novelty sensor and the KMind policy.
"""

from curio_agent.signals.complexity import ComplexityEstimator, estimate_complexity

__all__ = ["ComplexityEstimator", "estimate_complexity"]
