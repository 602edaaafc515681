"""Aggregation run orchestration.

Walks the input directories, normalizes each result file and folds it
into the run state, then ranks the result and writes the artifact.

Architecture:
- fold_directory: pure fold of one directory into a partial state
- aggregate_directories: folds directories (optionally on a thread pool)
  and merges the partials in directory order
- AggregationOrchestrator: settings-driven entry point used by the CLI
  and the API
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from tally.adapter.results_fs import list_result_files, load_result_file, write_artifact
from tally.aggregation.state import AggregationState
from tally.aggregation.summary import build_artifact, summarize_run
from tally.config import Settings
from tally.models.domain import AggregationReport
from tally.models.types import AggregateArtifact
from tally.normalize.records import normalize_payload

logger = logging.getLogger(__name__)


def fold_directory(directory: Path) -> AggregationState:
    """Fold every result file of one directory into a fresh state.

    Files are visited in name order. Files that cannot be read or do not
    match a known layout are counted but otherwise skipped.

    Args:
        directory: Directory to scan; a missing directory yields an empty state.

    Returns:
        Partial AggregationState for this directory.
    """
    state = AggregationState()
    files = list_result_files(directory)
    if files:
        logger.info(f"Scanning {directory.name}/: found {len(files)} files")

    for path in files:
        state.count_file()
        batch = normalize_payload(load_result_file(path))
        if batch is None:
            logger.debug(f"Skipping {path.name}: not a recognized result file")
            continue
        state.fold_batch(batch)

    return state


def aggregate_directories(directories: Iterable[Path], workers: int = 1) -> AggregationState:
    """Fold all directories and merge them in the order given.

    With workers > 1 directories are folded concurrently; merging in
    directory order keeps the result identical to a sequential run.

    Args:
        directories: Input directories in scan order.
        workers: Thread pool size.

    Returns:
        Combined AggregationState.
    """
    directories = list(directories)
    if workers > 1 and len(directories) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            partials = list(pool.map(fold_directory, directories))
    else:
        partials = [fold_directory(d) for d in directories]

    state = AggregationState()
    for partial in partials:
        state.merge(partial)
    logger.info(f"Processed {state.total_files} files")
    return state


@dataclass
class AggregationResult:
    """Outcome of a full aggregation run."""

    report: AggregationReport
    artifact: AggregateArtifact
    output_path: Path | None = None


class AggregationOrchestrator:
    """Runs the scan -> fold -> rank -> persist pipeline for one base directory."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def collect(self) -> AggregationState:
        """Fold every configured input directory."""
        return aggregate_directories(self.settings.input_paths(), workers=self.settings.workers)

    def summarize(self) -> AggregationResult:
        """Aggregate and rank without touching the output artifact."""
        report = summarize_run(self.collect(), top_traders_limit=self.settings.top_traders_limit)
        artifact = build_artifact(report, strategies_limit=self.settings.strategies_limit)
        return AggregationResult(report=report, artifact=artifact)

    def run(self) -> AggregationResult:
        """Aggregate, rank and overwrite the output artifact.

        Raises:
            OSError: If the artifact cannot be written.
        """
        result = self.summarize()
        result.output_path = write_artifact(result.artifact, self.settings.resolved_output_path())
        return result
