"""
Monte Carlo simulation of borrowing outcomes.

Runs the batch scheduler, aggregates the points and publishes the result as a
single object. A busy flag rejects overlapping runs, so a stale run can never
overwrite a newer one.
"""

import logging
import time
from functools import lru_cache
from typing import Optional

from borrowcalc.config import get_settings
from borrowcalc.simulation.aggregator import aggregate
from borrowcalc.simulation.models import (
    SimulationInProgressError,
    SimulationParameters,
    SimulationResult,
)
from borrowcalc.simulation.scheduler import (
    DEFAULT_BATCH_DELAY,
    DEFAULT_BATCH_SIZE,
    run_all,
    run_batches,
)

logger = logging.getLogger(__name__)


class MonteCarloSimulator:
    """Holds the most recent simulation result and guards against overlapping runs."""

    def __init__(
        self,
        batch_size: int = DEFAULT_BATCH_SIZE,
        batch_delay: float = DEFAULT_BATCH_DELAY,
    ):
        self.batch_size = batch_size
        self.batch_delay = batch_delay
        self._running = False
        self._latest: Optional[SimulationResult] = None

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def latest(self) -> Optional[SimulationResult]:
        """Last completed result, or None."""
        return self._latest

    def reset(self) -> None:
        """Discard the published result."""
        self._latest = None

    async def run(self, params: SimulationParameters) -> SimulationResult:
        """
        Run a full simulation and publish its result.

        Args:
            params: Simulation configuration

        Returns:
            The new result, which also becomes `latest`

        Raises:
            InvalidSimulationParameters: If params fail validation
            SimulationInProgressError: If another run has not finished
        """
        params.validate()
        if self._running:
            raise SimulationInProgressError("A simulation is already running")

        self._running = True
        started = time.perf_counter()
        try:
            points = await run_batches(
                params, batch_size=self.batch_size, delay=self.batch_delay
            )
            distributions, summary = aggregate(points, params.year_horizon)
            result = SimulationResult(
                parameters=params,
                distributions=distributions,
                summary=summary,
            )
            self._latest = result
        finally:
            self._running = False

        elapsed = time.perf_counter() - started
        logger.info(
            f"Simulation finished: {params.simulation_count} scenarios x "
            f"{params.year_horizon} years in {elapsed:.2f}s, "
            f"P(benefit)={summary.probability_of_benefit:.1f}%"
        )
        return result


def run_simulation(params: SimulationParameters) -> SimulationResult:
    """Run a full simulation synchronously, without batching."""
    params.validate()
    points = run_all(params)
    distributions, summary = aggregate(points, params.year_horizon)
    return SimulationResult(
        parameters=params,
        distributions=distributions,
        summary=summary,
    )


@lru_cache()
def get_simulator() -> MonteCarloSimulator:
    """Get the shared simulator instance."""
    settings = get_settings()
    return MonteCarloSimulator(
        batch_size=settings.simulation_batch_size,
        batch_delay=settings.simulation_batch_delay,
    )
