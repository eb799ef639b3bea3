"""
Mean-reverting random walk for economic rates.
"""

from typing import List, Optional

import numpy as np

MEAN_REVERSION = 0.1


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create a random generator. A None seed draws fresh OS entropy."""
    return np.random.default_rng(seed)


def generate_random_walk(
    initial: float,
    horizon: int,
    volatility: float,
    rng: np.random.Generator,
) -> List[float]:
    """
    Generate a bounded, mean-reverting path for one economic variable.

    Each step adds a uniform shock in [-volatility, +volatility] and a pull of
    10% of the distance back toward the starting value. Values are floored at
    zero.

    Args:
        initial: Starting value (percent)
        horizon: Number of points in the path
        volatility: Shock magnitude (percentage points)
        rng: Random generator to draw shocks from

    Returns:
        List of `horizon` non-negative values, the first equal to `initial`
    """
    if horizon <= 0:
        return []

    path = [float(initial)]
    if horizon == 1:
        return path

    shocks = rng.uniform(-volatility, volatility, size=horizon - 1)
    for shock in shocks:
        previous = path[-1]
        pull = MEAN_REVERSION * (initial - previous)
        path.append(max(0.0, previous + float(shock) + pull))

    return path
