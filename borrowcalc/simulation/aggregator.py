"""
Percentile aggregation of simulated path points.

Percentiles use a nearest-rank rule on the ascending values: the value at
index floor(p * count). An index outside the data (an empty year) yields 0.
"""

import math
from typing import Dict, Iterable, List, Sequence, Tuple

from borrowcalc.simulation.models import (
    PathPoint,
    SimulationSummary,
    YearlyDistribution,
)

PERCENTILES = (0.10, 0.25, 0.50, 0.75, 0.90)


def percentile(sorted_values: Sequence[float], p: float) -> float:
    """Nearest-rank percentile of pre-sorted values; 0 when out of range."""
    index = math.floor(p * len(sorted_values))
    if 0 <= index < len(sorted_values):
        return sorted_values[index]
    return 0.0


def _mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return math.fsum(values) / len(values)


def group_by_year(points: Iterable[PathPoint], year_horizon: int) -> Dict[int, List[float]]:
    """Bucket cumulative benefits by 0-indexed year."""
    buckets: Dict[int, List[float]] = {year: [] for year in range(year_horizon)}
    for point in points:
        if point.year in buckets:
            buckets[point.year].append(point.cumulative_benefit)
    return buckets


def yearly_distributions(
    buckets: Dict[int, List[float]], year_horizon: int
) -> List[YearlyDistribution]:
    """Build one distribution per year, labelled 1..year_horizon."""
    distributions = []
    for year in range(year_horizon):
        values = sorted(buckets.get(year, []))
        p10, p25, p50, p75, p90 = (percentile(values, p) for p in PERCENTILES)
        distributions.append(
            YearlyDistribution(
                year=year + 1,
                p10=p10,
                p25=p25,
                p50=p50,
                p75=p75,
                p90=p90,
                mean=_mean(values),
            )
        )
    return distributions


def summarize(final_values: Sequence[float]) -> SimulationSummary:
    """Summary statistics over the final-year cumulative benefits."""
    total = len(final_values)
    if total == 0:
        return SimulationSummary(
            probability_of_benefit=0.0,
            average_benefit=0.0,
            worst_case=0.0,
            best_case=0.0,
            total_scenarios=0,
        )

    positive = sum(1 for value in final_values if value > 0)
    return SimulationSummary(
        probability_of_benefit=positive / total * 100,
        average_benefit=_mean(final_values),
        worst_case=min(final_values),
        best_case=max(final_values),
        total_scenarios=total,
    )


def aggregate(
    points: Iterable[PathPoint], year_horizon: int
) -> Tuple[List[YearlyDistribution], SimulationSummary]:
    """
    Aggregate a complete run into yearly percentile bands and a summary.

    Pure: the same points always give the same output.

    Args:
        points: Every PathPoint of the run
        year_horizon: Number of simulated years

    Returns:
        Tuple of (distributions ordered by year, summary)
    """
    buckets = group_by_year(points, year_horizon)
    distributions = yearly_distributions(buckets, year_horizon)
    final_values = buckets.get(year_horizon - 1, []) if year_horizon > 0 else []
    return distributions, summarize(final_values)
