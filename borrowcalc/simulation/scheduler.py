"""
Batch scheduler for the scenario runner.

Scenarios are produced in fixed-size batches and control is handed back to the
event loop between batches so a run never blocks other requests for long.
Batching only affects responsiveness; the points produced are the same for any
batch size given the same random generator.
"""

import asyncio
import logging
from typing import Iterator, List, Optional, Tuple

import numpy as np

from borrowcalc.simulation.models import PathPoint, SimulationParameters
from borrowcalc.simulation.random_walk import make_rng
from borrowcalc.simulation.runner import run_scenarios

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50
DEFAULT_BATCH_DELAY = 0.01  # Seconds


def iter_batches(simulation_count: int, batch_size: int) -> Iterator[Tuple[int, int]]:
    """Yield [start, stop) scenario index ranges covering simulation_count."""
    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    for start in range(0, simulation_count, batch_size):
        yield start, min(start + batch_size, simulation_count)


async def run_batches(
    params: SimulationParameters,
    batch_size: int = DEFAULT_BATCH_SIZE,
    delay: float = DEFAULT_BATCH_DELAY,
    rng: Optional[np.random.Generator] = None,
) -> List[PathPoint]:
    """
    Run every scenario in batches, sleeping `delay` seconds after each batch.

    Cancelling the awaiting task stops scheduling further batches; the points
    collected so far are dropped with the task.

    Returns:
        simulation_count * year_horizon points, ordered by scenario then year
    """
    if rng is None:
        rng = make_rng(params.seed)

    points: List[PathPoint] = []
    batch_count = 0
    for start, stop in iter_batches(params.simulation_count, batch_size):
        points.extend(run_scenarios(params, start, stop, rng))
        batch_count += 1
        await asyncio.sleep(delay)

    logger.debug(
        f"Produced {len(points)} points in {batch_count} batches "
        f"of up to {batch_size} scenarios"
    )
    return points


def run_all(
    params: SimulationParameters,
    rng: Optional[np.random.Generator] = None,
) -> List[PathPoint]:
    """Run every scenario without yielding (scripts and tests)."""
    if rng is None:
        rng = make_rng(params.seed)
    return run_scenarios(params, 0, params.simulation_count, rng)
