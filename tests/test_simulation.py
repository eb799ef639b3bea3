"""
Tests for the Monte Carlo borrowing simulator.

Sampling is random, so most assertions are statistical properties or use a
fixed seed / zero volatility.
"""

import asyncio

import pytest

from borrowcalc.config import get_settings
from borrowcalc.simulation import (
    InvalidSimulationParameters,
    MonteCarloSimulator,
    PathPoint,
    SimulationInProgressError,
    SimulationParameters,
    run_simulation,
)
from borrowcalc.simulation.aggregator import aggregate, percentile
from borrowcalc.simulation.random_walk import generate_random_walk, make_rng
from borrowcalc.simulation.runner import run_scenario
from borrowcalc.simulation.scheduler import iter_batches, run_all, run_batches


def make_params(**overrides):
    values = dict(
        simulation_count=200,
        year_horizon=10,
        volatility=2.0,
        initial_inflation=3.2,
        initial_interest=7.5,
    )
    values.update(overrides)
    return SimulationParameters(**values)


class TestRandomWalk:
    """Test the mean-reverting random walk."""

    def test_starts_at_initial_value(self):
        path = generate_random_walk(3.2, 10, 2.0, make_rng(1))
        assert path[0] == 3.2
        assert len(path) == 10

    def test_never_negative(self):
        """A low start with high volatility hits the floor but never crosses it."""
        rng = make_rng(7)
        for _ in range(200):
            path = generate_random_walk(0.5, 30, 5.0, rng)
            assert min(path) >= 0

    def test_zero_volatility_is_constant(self):
        path = generate_random_walk(4.25, 30, 0.0, make_rng())
        assert path == [4.25] * 30

    def test_seed_reproduces_path(self):
        first = generate_random_walk(3.0, 15, 1.5, make_rng(42))
        second = generate_random_walk(3.0, 15, 1.5, make_rng(42))
        assert first == second

    def test_step_bounded_by_shock_and_pull(self):
        """Each step moves at most volatility plus the 10% pull toward the start."""
        initial, volatility = 5.0, 1.0
        path = generate_random_walk(initial, 50, volatility, make_rng(3))
        for previous, current in zip(path, path[1:]):
            pull = 0.1 * (initial - previous)
            assert abs(current - (previous + pull)) <= volatility + 1e-9 or current == 0

    def test_degenerate_horizons(self):
        assert generate_random_walk(3.0, 0, 1.0, make_rng()) == []
        assert generate_random_walk(3.0, 1, 1.0, make_rng()) == [3.0]


class TestScenarioRunner:
    """Test per-scenario path points."""

    def test_net_and_cumulative_benefit(self):
        points = run_scenario(4, make_params(year_horizon=12), make_rng(5))
        assert len(points) == 12
        running = 0.0
        for year, point in enumerate(points):
            assert point.scenario_index == 4
            assert point.year == year
            assert point.net_benefit == pytest.approx(point.inflation_rate - point.interest_rate)
            running += point.net_benefit
            assert point.cumulative_benefit == pytest.approx(running)

    def test_first_year_uses_initial_rates(self):
        points = run_scenario(0, make_params(), make_rng(9))
        assert points[0].inflation_rate == 3.2
        assert points[0].interest_rate == 7.5
        assert points[0].cumulative_benefit == pytest.approx(3.2 - 7.5)

    def test_concrete_zero_volatility_scenario(self):
        """3% inflation against 7% interest loses 4 points every year."""
        params = make_params(
            simulation_count=10,
            year_horizon=3,
            volatility=0.0,
            initial_inflation=3.0,
            initial_interest=7.0,
        )
        points = run_all(params)
        assert all(point.net_benefit == -4.0 for point in points)
        finals = [point.cumulative_benefit for point in points if point.year == 2]
        assert finals == [-12.0] * 10

    def test_path_points_are_immutable(self):
        point = run_scenario(0, make_params(), make_rng(1))[0]
        with pytest.raises(AttributeError):
            point.net_benefit = 0.0


class TestBatchScheduler:
    """Test batching and cooperative yielding."""

    def test_iter_batches_covers_all_scenarios(self):
        assert list(iter_batches(120, 50)) == [(0, 50), (50, 100), (100, 120)]
        assert list(iter_batches(50, 50)) == [(0, 50)]
        assert list(iter_batches(0, 50)) == []

    def test_iter_batches_rejects_non_positive_size(self):
        with pytest.raises(ValueError):
            list(iter_batches(10, 0))

    @pytest.mark.anyio
    @pytest.mark.parametrize("batch_size", [1, 7, 50, 500])
    async def test_point_count_independent_of_batch_size(self, batch_size):
        params = make_params(simulation_count=130, year_horizon=6)
        points = await run_batches(params, batch_size=batch_size, delay=0)
        assert len(points) == 130 * 6

    @pytest.mark.anyio
    async def test_results_identical_across_batch_sizes(self):
        params = make_params(simulation_count=120, year_horizon=5, seed=11)
        small = await run_batches(params, batch_size=7, delay=0)
        large = await run_batches(params, batch_size=200, delay=0)
        assert small == large
        assert small == run_all(params)

    @pytest.mark.anyio
    async def test_yields_between_batches(self):
        """Another task gets to run while a simulation is in progress."""
        ticks = []

        async def ticker():
            for _ in range(3):
                ticks.append(len(ticks))
                await asyncio.sleep(0)

        params = make_params(simulation_count=200, year_horizon=5)
        task = asyncio.ensure_future(ticker())
        await run_batches(params, batch_size=50, delay=0.001)
        assert ticks, "ticker never ran during the simulation"
        await task
        assert ticks == [0, 1, 2]

    @pytest.mark.anyio
    async def test_cancellation_stops_run(self):
        params = make_params(simulation_count=5000, year_horizon=30)
        task = asyncio.ensure_future(run_batches(params, batch_size=50, delay=0.05))
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task


class TestAggregator:
    """Test percentile aggregation and summary statistics."""

    def test_percentile_nearest_rank(self):
        values = list(range(10))
        assert percentile(values, 0.10) == 1
        assert percentile(values, 0.50) == 5
        assert percentile(values, 0.90) == 9

    def test_percentile_empty_is_zero(self):
        assert percentile([], 0.5) == 0.0

    def test_distribution_per_year(self):
        params = make_params(year_horizon=8)
        distributions, _ = aggregate(run_all(params), params.year_horizon)
        assert [row.year for row in distributions] == list(range(1, 9))

    def test_percentiles_monotonic(self):
        params = make_params(simulation_count=500, year_horizon=15, volatility=3.0)
        distributions, _ = aggregate(run_all(params), params.year_horizon)
        for row in distributions:
            assert row.p10 <= row.p25 <= row.p50 <= row.p75 <= row.p90

    def test_summary_bounds(self):
        params = make_params(simulation_count=1000, year_horizon=10, volatility=2.5)
        _, summary = aggregate(run_all(params), params.year_horizon)
        assert 0 <= summary.probability_of_benefit <= 100
        assert summary.best_case >= summary.average_benefit >= summary.worst_case
        assert summary.total_scenarios == 1000

    def test_aggregation_is_idempotent(self):
        params = make_params(seed=123)
        points = run_all(params)
        first = aggregate(points, params.year_horizon)
        second = aggregate(points, params.year_horizon)
        assert first == second

    def test_zero_volatility_has_no_dispersion(self):
        params = make_params(simulation_count=5000, year_horizon=10, volatility=0.0)
        distributions, summary = aggregate(run_all(params), params.year_horizon)
        for row in distributions:
            assert row.p10 == row.p50 == row.p90
        assert summary.worst_case == summary.best_case

    def test_empty_points(self):
        distributions, summary = aggregate([], 3)
        assert len(distributions) == 3
        assert all(row.p50 == 0 and row.mean == 0 for row in distributions)
        assert summary.total_scenarios == 0
        assert summary.probability_of_benefit == 0

    def test_probability_counts_strictly_positive(self):
        points = [
            PathPoint(i, 0, 0.0, 0.0, value, value)
            for i, value in enumerate([-1.0, 0.0, 2.0, 3.0])
        ]
        _, summary = aggregate(points, 1)
        assert summary.probability_of_benefit == 50.0
        assert summary.worst_case == -1.0
        assert summary.best_case == 3.0
        assert summary.average_benefit == 1.0


class TestSimulationParameters:
    """Test validation of simulation inputs."""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"simulation_count": 0},
            {"simulation_count": -5},
            {"simulation_count": 5001},
            {"year_horizon": 0},
            {"year_horizon": 31},
            {"volatility": -0.1},
            {"volatility": float("nan")},
            {"initial_inflation": float("inf")},
            {"initial_interest": -1.0},
            {"simulation_count": True},
            {"year_horizon": True},
        ],
    )
    def test_invalid_parameters_rejected(self, overrides):
        with pytest.raises(InvalidSimulationParameters):
            make_params(**overrides).validate()

    def test_invalid_parameters_are_value_errors(self):
        with pytest.raises(ValueError):
            run_simulation(make_params(year_horizon=0))

    def test_limits_follow_settings(self, monkeypatch):
        """Raising the configured maximums widens what the core accepts."""
        settings = get_settings()
        monkeypatch.setattr(settings, "simulation_max_count", 8000)
        monkeypatch.setattr(settings, "simulation_max_years", 40)
        make_params(simulation_count=6000, year_horizon=35).validate()

    def test_lowered_limits_reject(self, monkeypatch):
        monkeypatch.setattr(get_settings(), "simulation_max_count", 150)
        with pytest.raises(InvalidSimulationParameters):
            make_params(simulation_count=200).validate()


class TestRunSimulation:
    """End-to-end simulation runs."""

    def test_concrete_scenario_summary(self):
        result = run_simulation(
            make_params(
                simulation_count=10,
                year_horizon=3,
                volatility=0.0,
                initial_inflation=3.0,
                initial_interest=7.0,
            )
        )
        summary = result.summary
        assert summary.probability_of_benefit == 0
        assert summary.worst_case == summary.best_case == summary.average_benefit == -12.0
        assert summary.total_scenarios == 10
        assert [row.p50 for row in result.distributions] == [-4.0, -8.0, -12.0]

    def test_seeded_runs_reproduce(self):
        params = make_params(seed=2024)
        assert run_simulation(params).distributions == run_simulation(params).distributions

    def test_favourable_rates_mostly_benefit(self):
        result = run_simulation(
            make_params(simulation_count=1000, initial_inflation=8.0, initial_interest=3.0)
        )
        assert result.summary.probability_of_benefit > 90


class TestMonteCarloSimulator:
    """Test the stateful simulator wrapper."""

    @pytest.mark.anyio
    async def test_run_publishes_result(self):
        simulator = MonteCarloSimulator(batch_delay=0)
        assert simulator.latest is None
        result = await simulator.run(make_params())
        assert simulator.latest is result
        assert not simulator.is_running

    @pytest.mark.anyio
    async def test_new_run_replaces_result(self):
        simulator = MonteCarloSimulator(batch_delay=0)
        first = await simulator.run(make_params(year_horizon=5))
        second = await simulator.run(make_params(year_horizon=7))
        assert simulator.latest is second
        assert first is not second
        assert len(simulator.latest.distributions) == 7

    @pytest.mark.anyio
    async def test_overlapping_run_rejected(self):
        simulator = MonteCarloSimulator(batch_size=10, batch_delay=0.01)
        first = asyncio.ensure_future(simulator.run(make_params(simulation_count=200)))
        await asyncio.sleep(0)
        assert simulator.is_running
        with pytest.raises(SimulationInProgressError):
            await simulator.run(make_params())
        await first
        assert not simulator.is_running

    @pytest.mark.anyio
    async def test_cancelled_run_publishes_nothing(self):
        simulator = MonteCarloSimulator(batch_size=10, batch_delay=0.05)
        task = asyncio.ensure_future(simulator.run(make_params(simulation_count=1000)))
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert simulator.latest is None
        assert not simulator.is_running

    @pytest.mark.anyio
    async def test_invalid_parameters_do_not_mark_busy(self):
        simulator = MonteCarloSimulator(batch_delay=0)
        with pytest.raises(InvalidSimulationParameters):
            await simulator.run(make_params(volatility=-1.0))
        assert not simulator.is_running

    @pytest.mark.anyio
    async def test_reset_clears_result(self):
        simulator = MonteCarloSimulator(batch_delay=0)
        await simulator.run(make_params())
        simulator.reset()
        assert simulator.latest is None
