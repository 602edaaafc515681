"""Simulation comparison API endpoints.

GET /api/simulations/stats - Aggregate statistics
GET /api/simulations/best - Best runs by ROI
GET /api/simulations/worst - Worst runs by ROI
GET /api/simulations/{name} - First run whose name contains `name`
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from tally.api.app import get_settings
from tally.compare import simulations
from tally.config import Settings
from tally.models.types import SimulationResult, SimulationStats

router = APIRouter(prefix="/simulations")


def _load(settings: Settings) -> list[SimulationResult]:
    return simulations.load_simulation_results(settings.resolved_simulation_dir())


@router.get("/stats", response_model=SimulationStats)
def get_stats(settings: Settings = Depends(get_settings)) -> SimulationStats:
    return simulations.compute_statistics(_load(settings))


@router.get("/best", response_model=list[SimulationResult])
def get_best(
    limit: int = Query(default=10, ge=1),
    settings: Settings = Depends(get_settings),
) -> list[SimulationResult]:
    return simulations.best_results(_load(settings), limit)


@router.get("/worst", response_model=list[SimulationResult])
def get_worst(
    limit: int = Query(default=5, ge=1),
    settings: Settings = Depends(get_settings),
) -> list[SimulationResult]:
    return simulations.worst_results(_load(settings), limit)


@router.get("/{name}", response_model=SimulationResult)
def get_simulation(name: str, settings: Settings = Depends(get_settings)) -> SimulationResult:
    """Get one simulation result by name fragment.

    Raises:
        HTTPException: 404 if no result name contains the fragment.
    """
    result = simulations.find_result(_load(settings), name)
    if result is None:
        raise HTTPException(status_code=404, detail=f"No result found matching: {name}")
    return result
