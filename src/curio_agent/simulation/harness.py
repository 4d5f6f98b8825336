"""
Simulation Harness
==================

Camera-free driver for the sensor + policy core.

Each iteration:
    1. Sense the current grid (the grid is the "camera frame")
    2. Mind X picks a column, mind Y picks a row
    3. Either toggle that cell, or, with intensity deltas configured, let a
       third mind pick a delta to add to it
    4. Record a snapshot

One numpy Generator seeded from `seed` drives the world and every mind, so
a run is bit-reproducible for a given seed.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from curio_agent.policy.markov import MarkovMind
from curio_agent.sensing.sensor import SpectralNoveltySensor
from curio_agent.simulation.world import GridWorld


logger = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    """
    Output of one simulation run.

    Attributes:
        seed: Seed the run was started with
        frames: One (H, W) uint8 snapshot per iteration
        novelty: Novelty score sensed at each iteration
        moves: (x, y, delta) applied at each iteration
    """

    seed: int
    frames: List[np.ndarray] = field(default_factory=list)
    novelty: List[float] = field(default_factory=list)
    moves: List[Tuple[int, int, int]] = field(default_factory=list)

    @property
    def final_grid(self) -> np.ndarray:
        return self.frames[-1]

    @property
    def iterations(self) -> int:
        return len(self.frames)


def run_simulation(
    seed: int = 1,
    width: int = 16,
    height: int = 16,
    iterations: int = 1024,
    sensor_mode: str = "compression",
    depth: int = 8,
    context_width: int = 3,
    intensity_deltas: Optional[Sequence[int]] = None,
    log_every_n: int = 256,
) -> SimulationResult:
    """
    Run the grid-world simulation.

    Args:
        seed: Random seed for world and minds
        width: Grid width (= mind X action count)
        height: Grid height (= mind Y action count)
        iterations: Number of steps, one snapshot each
        sensor_mode: Novelty sensor mode
        depth: FFT depth
        context_width: Markov context width for every mind
        intensity_deltas: Deltas for the intensity mind; None toggles cells
        log_every_n: Progress log cadence

    Returns:
        SimulationResult with one frame per iteration
    """
    if iterations < 1:
        raise ValueError("iterations must be >= 1")

    rng = np.random.default_rng(seed)
    world = GridWorld.random(width, height, rng)
    sensor = SpectralNoveltySensor(
        mode=sensor_mode,
        depth=depth,
        log_every_n_frames=iterations + 1,
    )
    mind_x = MarkovMind(width, rng, context_width=context_width)
    mind_y = MarkovMind(height, rng, context_width=context_width)
    deltas = tuple(intensity_deltas) if intensity_deltas else None
    mind_intensity = (
        MarkovMind(len(deltas), rng, context_width=context_width) if deltas else None
    )

    logger.info(
        f"Simulation started: seed={seed}, grid={width}x{height}, "
        f"iterations={iterations}, sensor={sensor_mode}, "
        f"intensity={'deltas ' + str(deltas) if deltas else 'toggle'}"
    )

    result = SimulationResult(seed=seed)
    for i in range(iterations):
        novelty = sensor.sense(world.grid)
        x = mind_x.step(novelty)
        y = mind_y.step(novelty)

        before = int(world.grid[y, x])
        if mind_intensity is not None:
            world.adjust(x, y, deltas[mind_intensity.step(novelty)])
        else:
            world.toggle(x, y)

        result.novelty.append(novelty)
        result.moves.append((x, y, int(world.grid[y, x]) - before))
        result.frames.append(world.snapshot())

        if (i + 1) % log_every_n == 0:
            logger.info(
                f"Simulation [{i + 1}/{iterations}]: novelty={novelty:.3f}, "
                f"contexts={mind_x.table_size}/{mind_y.table_size}"
            )

    return result
