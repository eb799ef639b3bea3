"""
Value records for the Monte Carlo borrowing-outcome simulator.

Every record is produced and consumed within a single run. Nothing here is
persisted.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from borrowcalc.config import get_settings


def _is_count(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class InvalidSimulationParameters(ValueError):
    """Raised when a run is requested with an unusable configuration."""


class SimulationInProgressError(RuntimeError):
    """Raised when a run is requested while another one is still in flight."""


@dataclass(frozen=True)
class SimulationParameters:
    """Inputs for one simulation run."""

    simulation_count: int
    year_horizon: int
    volatility: float  # Shock magnitude in percentage points
    initial_inflation: float  # Percent, e.g. 3.2
    initial_interest: float  # Percent, e.g. 7.5
    seed: Optional[int] = None  # None draws fresh entropy per run

    def validate(self) -> None:
        """
        Fail fast on configurations that would produce garbage output.

        Upper limits on count and horizon come from settings, the same values
        the API bounds its requests with.

        Raises:
            InvalidSimulationParameters: If any field is out of range
        """
        settings = get_settings()
        max_count = settings.simulation_max_count
        max_years = settings.simulation_max_years

        if not _is_count(self.simulation_count) or self.simulation_count <= 0:
            raise InvalidSimulationParameters(
                f"simulation_count must be a positive integer, got {self.simulation_count!r}"
            )
        if self.simulation_count > max_count:
            raise InvalidSimulationParameters(
                f"simulation_count must not exceed {max_count}, got {self.simulation_count}"
            )
        if not _is_count(self.year_horizon) or self.year_horizon <= 0:
            raise InvalidSimulationParameters(
                f"year_horizon must be a positive integer, got {self.year_horizon!r}"
            )
        if self.year_horizon > max_years:
            raise InvalidSimulationParameters(
                f"year_horizon must not exceed {max_years}, got {self.year_horizon}"
            )
        if not math.isfinite(self.volatility) or self.volatility < 0:
            raise InvalidSimulationParameters(
                f"volatility must be a non-negative number, got {self.volatility!r}"
            )
        for name in ("initial_inflation", "initial_interest"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise InvalidSimulationParameters(
                    f"{name} must be a finite, non-negative rate, got {value!r}"
                )


@dataclass(frozen=True)
class PathPoint:
    """One simulated (scenario, year) observation."""

    scenario_index: int
    year: int  # 0-indexed within the scenario
    inflation_rate: float
    interest_rate: float
    net_benefit: float  # inflation_rate - interest_rate
    cumulative_benefit: float  # Running sum of net_benefit within the scenario


@dataclass(frozen=True)
class YearlyDistribution:
    """Percentile band of cumulative benefit for one year (1-indexed)."""

    year: int
    p10: float
    p25: float
    p50: float
    p75: float
    p90: float
    mean: float


@dataclass(frozen=True)
class SimulationSummary:
    """Final-year statistics across all scenarios."""

    probability_of_benefit: float  # 0-100
    average_benefit: float
    worst_case: float
    best_case: float
    total_scenarios: int


@dataclass(frozen=True)
class SimulationResult:
    """Complete output of one run, replaced as a whole on the next run."""

    parameters: SimulationParameters
    distributions: List[YearlyDistribution]
    summary: SimulationSummary
    completed_at: datetime = field(default_factory=datetime.utcnow)
