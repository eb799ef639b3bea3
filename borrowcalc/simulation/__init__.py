"""
Monte Carlo Borrowing Simulator

Samples inflation and interest-rate paths, tracks the cumulative benefit of
borrowing, and reduces the scenarios to yearly percentile bands.
"""

from borrowcalc.simulation.models import (
    InvalidSimulationParameters,
    PathPoint,
    SimulationInProgressError,
    SimulationParameters,
    SimulationResult,
    SimulationSummary,
    YearlyDistribution,
)
from borrowcalc.simulation.simulator import (
    MonteCarloSimulator,
    get_simulator,
    run_simulation,
)

__all__ = [
    "InvalidSimulationParameters",
    "PathPoint",
    "SimulationInProgressError",
    "SimulationParameters",
    "SimulationResult",
    "SimulationSummary",
    "YearlyDistribution",
    "MonteCarloSimulator",
    "get_simulator",
    "run_simulation",
]
