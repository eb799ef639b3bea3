"""
Scenario runner: pairs an inflation walk with an interest walk and tracks the
running benefit of borrowing.
"""

from typing import List

import numpy as np

from borrowcalc.simulation.models import PathPoint, SimulationParameters
from borrowcalc.simulation.random_walk import generate_random_walk

# Interest rates are modelled as less volatile than inflation
INTEREST_VOLATILITY_SCALE = 0.8


def run_scenario(
    scenario_index: int,
    params: SimulationParameters,
    rng: np.random.Generator,
) -> List[PathPoint]:
    """
    Simulate one scenario over the full horizon.

    The two walks are drawn independently of each other.

    Returns:
        One PathPoint per year, year 0 first
    """
    inflation_path = generate_random_walk(
        params.initial_inflation, params.year_horizon, params.volatility, rng
    )
    interest_path = generate_random_walk(
        params.initial_interest,
        params.year_horizon,
        params.volatility * INTEREST_VOLATILITY_SCALE,
        rng,
    )

    points = []
    cumulative_benefit = 0.0
    for year in range(params.year_horizon):
        net_benefit = inflation_path[year] - interest_path[year]
        cumulative_benefit += net_benefit
        points.append(
            PathPoint(
                scenario_index=scenario_index,
                year=year,
                inflation_rate=inflation_path[year],
                interest_rate=interest_path[year],
                net_benefit=net_benefit,
                cumulative_benefit=cumulative_benefit,
            )
        )

    return points


def run_scenarios(
    params: SimulationParameters,
    start: int,
    stop: int,
    rng: np.random.Generator,
) -> List[PathPoint]:
    """Simulate scenarios with indices in [start, stop)."""
    points: List[PathPoint] = []
    for scenario_index in range(start, stop):
        points.extend(run_scenario(scenario_index, params, rng))
    return points
