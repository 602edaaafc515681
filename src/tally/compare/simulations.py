"""Simulation results comparison.

Loads per-run simulation results and produces the comparison views:
grouping by followed trader, best/worst runs, aggregate statistics and
name lookup.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from tally.adapter.results_fs import list_result_files, load_result_file
from tally.models.types import SimulationResult, SimulationStats

logger = logging.getLogger(__name__)

DEFAULT_BEST_LIMIT = 5
DEFAULT_WORST_LIMIT = 3


def load_simulation_results(results_dir: Path) -> list[SimulationResult]:
    """Load every valid simulation result file in a directory.

    Args:
        results_dir: Directory holding ``*.json`` simulation results.

    Returns:
        Parsed results in file name order; invalid files are skipped.
    """
    if not results_dir.is_dir():
        logger.warning(f"No simulation results directory: {results_dir}")
        return []

    results: list[SimulationResult] = []
    for path in list_result_files(results_dir):
        payload = load_result_file(path)
        if payload is None:
            logger.info(f"Skipped {path.name} (invalid JSON)")
            continue
        try:
            results.append(SimulationResult.model_validate(payload))
        except ValidationError:
            logger.info(f"Skipped {path.name} (not a simulation result)")
    return results


def group_by_trader(results: list[SimulationResult]) -> dict[str, list[SimulationResult]]:
    """Group results by lower-cased trader address, best ROI first in each group."""
    grouped: dict[str, list[SimulationResult]] = {}
    for result in results:
        grouped.setdefault(result.trader_address.lower(), []).append(result)
    return {
        trader: sorted(group, key=lambda r: r.roi, reverse=True)
        for trader, group in grouped.items()
    }


def best_results(results: list[SimulationResult], limit: int = DEFAULT_BEST_LIMIT) -> list[SimulationResult]:
    return sorted(results, key=lambda r: r.roi, reverse=True)[:limit]


def worst_results(results: list[SimulationResult], limit: int = DEFAULT_WORST_LIMIT) -> list[SimulationResult]:
    return sorted(results, key=lambda r: r.roi)[:limit]


def compute_statistics(results: list[SimulationResult]) -> SimulationStats:
    """Compute aggregate statistics over simulation results.

    Runs with ROI exactly 0 count as neither profitable nor unprofitable.
    Every figure is 0 for an empty input.
    """
    total = len(results)
    profitable = sum(1 for r in results if r.roi > 0)
    unprofitable = sum(1 for r in results if r.roi < 0)

    def pct(count: int) -> float:
        return count / total * 100 if total else 0.0

    return SimulationStats(
        total=total,
        profitable=profitable,
        unprofitable=unprofitable,
        profitable_pct=pct(profitable),
        unprofitable_pct=pct(unprofitable),
        avg_roi=sum(r.roi for r in results) / total if total else 0.0,
        avg_pnl=sum(r.total_pnl for r in results) / total if total else 0.0,
        total_copied_trades=sum(r.copied_trades for r in results),
        total_skipped_trades=sum(r.skipped_trades for r in results),
    )


def find_result(results: list[SimulationResult], needle: str) -> SimulationResult | None:
    """Return the first result whose name contains the needle."""
    for result in results:
        if needle in result.name:
            return result
    return None


def open_positions(result: SimulationResult) -> list[dict[str, Any]]:
    return [p for p in result.positions if not p.get("closed")]


def copy_rate(result: SimulationResult) -> float:
    """Share of the trader's trades that were copied, in percent."""
    if result.total_trades == 0:
        return 0.0
    return result.copied_trades / result.total_trades * 100
