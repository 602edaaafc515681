"""Ranking and summary of a finished aggregation run.

Computes strategy and trader rankings, corpus statistics and the
artifact payload. Domain logic is pure - file IO goes through the
adapter layer.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Iterable

from tally.aggregation.state import AggregationState
from tally.models.domain import AggregationReport, StrategyPerformance, TraderAggregate
from tally.models.types import AggregateArtifact, StrategyRow, SummaryStats, TopTraderRow

DEFAULT_TOP_TRADERS = 10
DEFAULT_ARTIFACT_STRATEGIES = 20


def rank_strategies(strategies: Iterable[StrategyPerformance]) -> list[StrategyPerformance]:
    """Sort strategies by best ROI, highest first.

    The sort is stable, so equal ROIs keep their discovery order.
    """
    return sorted(strategies, key=lambda s: s.best_roi, reverse=True)


def rank_traders(
    traders: dict[str, TraderAggregate],
    limit: int = DEFAULT_TOP_TRADERS,
) -> list[tuple[str, TraderAggregate]]:
    """Return the top traders by best ROI as (address, aggregate) pairs."""
    ranked = sorted(traders.items(), key=lambda item: item[1].best_roi, reverse=True)
    return ranked[:limit]


def compute_profitable_rate(profitable: int, total: int) -> float:
    """Percentage of profitable traders, 0 when nothing was analyzed."""
    if total == 0:
        return 0.0
    return profitable / total * 100


def summarize_run(
    state: AggregationState,
    top_traders_limit: int = DEFAULT_TOP_TRADERS,
) -> AggregationReport:
    """Rank a finished aggregation state and compute corpus statistics.

    Args:
        state: Accumulators after every file has been folded.
        top_traders_limit: Number of traders to keep in the ranking.

    Returns:
        AggregationReport with ranked strategies, top traders and stats.
    """
    strategies = rank_strategies(state.strategies.performances.values())

    total_traders = sum(s.traders_analyzed for s in strategies)
    total_profitable = sum(s.profitable_traders for s in strategies)

    return AggregationReport(
        strategies=strategies,
        top_traders=rank_traders(state.traders.traders, top_traders_limit),
        total_files=state.total_files,
        total_traders=total_traders,
        unique_traders=len(state.traders),
        total_profitable=total_profitable,
        profitable_rate=compute_profitable_rate(total_profitable, total_traders),
        best_strategy=strategies[0] if strategies else None,
    )


def _finite(value: float) -> float | None:
    # JSON has no representation for inf or nan
    return value if math.isfinite(value) else None


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. ...T12:00:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def strategy_row(performance: StrategyPerformance) -> StrategyRow:
    """Flatten a strategy accumulator for serialization."""
    return StrategyRow(
        strategy_id=performance.key.strategy_id,
        history_days=performance.key.history_days,
        multiplier=performance.key.multiplier,
        best_roi=_finite(performance.best_roi),
        best_win_rate=_finite(performance.best_win_rate),
        best_pnl=_finite(performance.best_pnl),
        avg_roi=_finite(performance.avg_roi),
        avg_win_rate=_finite(performance.avg_win_rate),
        traders_analyzed=performance.traders_analyzed,
        profitable_traders=performance.profitable_traders,
        files_count=performance.files_count,
    )


def build_artifact(
    report: AggregationReport,
    strategies_limit: int = DEFAULT_ARTIFACT_STRATEGIES,
    timestamp: str | None = None,
) -> AggregateArtifact:
    """Build the persisted summary artifact from a report.

    Args:
        report: Ranked aggregation report.
        strategies_limit: Number of ranked strategies to include.
        timestamp: Override for the artifact timestamp (defaults to now).

    Returns:
        AggregateArtifact ready to be written.
    """
    summary = SummaryStats(
        total_files=report.total_files,
        total_strategies=len(report.strategies),
        total_traders=report.total_traders,
        unique_traders=report.unique_traders,
        profitable_traders=report.total_profitable,
        profitable_rate=report.profitable_rate,
    )

    top_traders = [
        TopTraderRow(
            address=address,
            best_roi=_finite(aggregate.best_roi),
            best_strategy=aggregate.best_strategy.strategy_id,
            times_found=aggregate.times_found,
        )
        for address, aggregate in report.top_traders
    ]

    return AggregateArtifact(
        timestamp=timestamp or utc_timestamp(),
        summary=summary,
        strategies=[strategy_row(s) for s in report.strategies[:strategies_limit]],
        top_traders=top_traders,
    )
