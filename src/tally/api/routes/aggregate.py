"""Aggregation API endpoints.

GET /api/aggregate - Aggregate the input directories now (nothing is written)
GET /api/aggregate/latest - Last artifact written by `tally aggregate`
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from tally.adapter.results_fs import read_artifact
from tally.api.app import get_settings
from tally.config import Settings
from tally.models.types import AggregateArtifact
from tally.worker.orchestrator import AggregationOrchestrator

router = APIRouter()


@router.get("/aggregate", response_model=AggregateArtifact)
def get_aggregate(settings: Settings = Depends(get_settings)) -> AggregateArtifact:
    """Run a fresh aggregation over the configured input directories."""
    return AggregationOrchestrator(settings).summarize().artifact


@router.get("/aggregate/latest", response_model=AggregateArtifact)
def get_latest_aggregate(settings: Settings = Depends(get_settings)) -> AggregateArtifact:
    """Return the persisted artifact.

    Raises:
        HTTPException: 404 if no valid artifact has been written yet.
    """
    artifact = read_artifact(settings.resolved_output_path())
    if artifact is None:
        raise HTTPException(status_code=404, detail="No aggregated results found")
    return artifact
