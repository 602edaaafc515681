"""Domain models for Tally.

Pure Python dataclasses for the aggregation accumulators. They are
created lazily by the aggregators, mutated only while files are being
folded and treated as read-only once ranking starts.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Any

from tally.models.types import StrategyConfig


# ============================================================================
# Input Domain
# ============================================================================


class RecordShape(enum.Enum):
    """Layout of a result file's trader data."""

    LIST_OF_TRADERS = "traders"
    LIST_OF_RESULTS = "results"
    UNRECOGNIZED = "unrecognized"


@dataclass
class NormalizedBatch:
    """A qualifying result file reduced to its config and raw records.

    Records are left as parsed; per-record validity is decided by the
    aggregators.
    """

    shape: RecordShape
    config: StrategyConfig
    records: list[Any]


# ============================================================================
# Strategy Domain
# ============================================================================


@dataclass(frozen=True)
class StrategyKey:
    """Aggregation bucket identity: (history days, multiplier)."""

    history_days: int
    multiplier: float

    @classmethod
    def from_config(cls, config: StrategyConfig) -> StrategyKey:
        return cls(history_days=config.history_days, multiplier=config.multiplier)

    @property
    def strategy_id(self) -> str:
        """Display id, e.g. ``30d_1x`` or ``7d_2.5x``."""
        multiplier = repr(float(self.multiplier))
        if multiplier.endswith(".0"):
            multiplier = multiplier[:-2]
        return f"{self.history_days}d_{multiplier}x"


@dataclass
class StrategyPerformance:
    """Running performance accumulator for one strategy key.

    avg_roi and avg_win_rate hold the means of the most recently folded
    batch only; every other counter is cumulative.
    """

    key: StrategyKey
    best_roi: float = -math.inf
    best_win_rate: float = 0.0
    best_pnl: float = -math.inf
    avg_roi: float = 0.0
    avg_win_rate: float = 0.0
    traders_analyzed: int = 0
    profitable_traders: int = 0
    files_count: int = 0


# ============================================================================
# Trader Domain
# ============================================================================


@dataclass
class TraderAggregate:
    """Best observed performance of one trader across all strategies."""

    best_roi: float
    best_strategy: StrategyKey
    times_found: int = 1


# ============================================================================
# Report Domain
# ============================================================================


@dataclass
class AggregationReport:
    """Ranked, read-only view over a finished aggregation run."""

    strategies: list[StrategyPerformance]
    top_traders: list[tuple[str, TraderAggregate]]
    total_files: int
    total_traders: int
    unique_traders: int
    total_profitable: int
    profitable_rate: float
    best_strategy: StrategyPerformance | None = None
