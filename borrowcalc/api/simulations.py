"""
Monte Carlo simulation API endpoints.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from borrowcalc.config import get_settings
from borrowcalc.db.database import get_db
from borrowcalc.services.economic_data import load_latest_economic_data
from borrowcalc.simulation import (
    InvalidSimulationParameters,
    MonteCarloSimulator,
    SimulationInProgressError,
    SimulationParameters,
    SimulationResult,
    get_simulator,
)

router = APIRouter()
settings = get_settings()


class MonteCarloInput(BaseModel):
    """Simulation controls. Starting rates default to the latest stored economic data."""

    simulation_count: int = Field(
        1000, ge=settings.simulation_min_count, le=settings.simulation_max_count
    )
    year_horizon: int = Field(
        10, ge=settings.simulation_min_years, le=settings.simulation_max_years
    )
    volatility: float = Field(2.0, ge=0, le=settings.simulation_max_volatility)
    initial_inflation: Optional[float] = Field(None, ge=0, le=50)
    initial_interest: Optional[float] = Field(None, ge=0, le=50)
    seed: Optional[int] = Field(None, ge=0)


class YearlyDistributionOut(BaseModel):
    year: int
    p10: float
    p25: float
    p50: float
    p75: float
    p90: float
    mean: float


class SimulationSummaryOut(BaseModel):
    probability_of_benefit: float
    average_benefit: float
    worst_case: float
    best_case: float
    total_scenarios: int


class MonteCarloResponse(BaseModel):
    simulation_count: int
    year_horizon: int
    volatility: float
    initial_inflation: float
    initial_interest: float
    seed: Optional[int]
    yearly_data: List[YearlyDistributionOut]
    summary: SimulationSummaryOut
    completed_at: datetime


def to_response(result: SimulationResult) -> MonteCarloResponse:
    params = result.parameters
    return MonteCarloResponse(
        simulation_count=params.simulation_count,
        year_horizon=params.year_horizon,
        volatility=params.volatility,
        initial_inflation=params.initial_inflation,
        initial_interest=params.initial_interest,
        seed=params.seed,
        yearly_data=[
            YearlyDistributionOut(**vars(distribution))
            for distribution in result.distributions
        ],
        summary=SimulationSummaryOut(**vars(result.summary)),
        completed_at=result.completed_at,
    )


@router.post("/monte-carlo", response_model=MonteCarloResponse)
async def run_monte_carlo(
    inputs: MonteCarloInput,
    db: Session = Depends(get_db),
    simulator: MonteCarloSimulator = Depends(get_simulator),
):
    """Run a simulation and return its yearly percentile bands and summary."""
    initial_inflation = inputs.initial_inflation
    initial_interest = inputs.initial_interest
    if initial_inflation is None or initial_interest is None:
        economic = load_latest_economic_data(db)
        if initial_inflation is None:
            initial_inflation = economic.inflation
        if initial_interest is None:
            initial_interest = economic.mortgage_rate

    params = SimulationParameters(
        simulation_count=inputs.simulation_count,
        year_horizon=inputs.year_horizon,
        volatility=inputs.volatility,
        initial_inflation=initial_inflation,
        initial_interest=initial_interest,
        seed=inputs.seed,
    )

    try:
        result = await simulator.run(params)
    except InvalidSimulationParameters as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except SimulationInProgressError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return to_response(result)


@router.get("/monte-carlo/latest", response_model=MonteCarloResponse)
async def get_latest_monte_carlo(
    simulator: MonteCarloSimulator = Depends(get_simulator),
):
    """Most recent completed simulation."""
    if simulator.latest is None:
        raise HTTPException(status_code=404, detail="No simulation has been run")
    return to_response(simulator.latest)


@router.get("/monte-carlo/status")
async def get_monte_carlo_status(
    simulator: MonteCarloSimulator = Depends(get_simulator),
):
    """Whether a run is in flight; clients disable their run control while it is."""
    return {"running": simulator.is_running, "has_result": simulator.latest is not None}


@router.delete("/monte-carlo")
async def reset_monte_carlo(
    simulator: MonteCarloSimulator = Depends(get_simulator),
):
    """Discard the stored result."""
    if simulator.is_running:
        raise HTTPException(status_code=409, detail="A simulation is already running")
    simulator.reset()
    return {"reset": True}
