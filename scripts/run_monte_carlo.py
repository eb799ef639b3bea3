"""
Run the Monte Carlo borrowing simulation from the command line.

Usage:
    python scripts/run_monte_carlo.py [simulations] [years] [volatility] [seed]
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from borrowcalc.config import get_settings
from borrowcalc.simulation import SimulationParameters, run_simulation


def main():
    settings = get_settings()
    args = sys.argv[1:]

    params = SimulationParameters(
        simulation_count=int(args[0]) if len(args) > 0 else 1000,
        year_horizon=int(args[1]) if len(args) > 1 else 10,
        volatility=float(args[2]) if len(args) > 2 else 2.0,
        initial_inflation=settings.fallback_inflation,
        initial_interest=settings.fallback_mortgage_rate,
        seed=int(args[3]) if len(args) > 3 else None,
    )

    result = run_simulation(params)

    print(f"{'Year':>4} {'P10':>9} {'P25':>9} {'P50':>9} {'P75':>9} {'P90':>9} {'Mean':>9}")
    for row in result.distributions:
        print(
            f"{row.year:>4} {row.p10:>9.2f} {row.p25:>9.2f} {row.p50:>9.2f} "
            f"{row.p75:>9.2f} {row.p90:>9.2f} {row.mean:>9.2f}"
        )

    summary = result.summary
    print()
    print(f"Scenarios:              {summary.total_scenarios}")
    print(f"Probability of benefit: {summary.probability_of_benefit:.1f}%")
    print(f"Average outcome:        {summary.average_benefit:.2f}")
    print(f"Worst case:             {summary.worst_case:.2f}")
    print(f"Best case:              {summary.best_case:.2f}")


if __name__ == "__main__":
    main()
