"""
Simulation Module
=================

Offline, camera-free validation of the sensor + policy core.

Example:
    from curio_agent.simulation import render_gif, run_simulation

    result = run_simulation(seed=1, iterations=1024)
    render_gif(result.frames, "sim.gif", scale=8)
"""

from curio_agent.simulation.harness import SimulationResult, run_simulation
from curio_agent.simulation.render import render_gif, to_image
from curio_agent.simulation.world import GridWorld

__all__ = [
    "GridWorld",
    "SimulationResult",
    "render_gif",
    "run_simulation",
    "to_image",
]
