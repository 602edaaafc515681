"""Aggregation state for a single run.

Bundles the strategy aggregator, the trader tracker and the file
counter so a fold can be handed around explicitly instead of living in
module globals.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from tally.aggregation.strategies import StrategyAggregator
from tally.aggregation.traders import TraderTracker
from tally.models.domain import NormalizedBatch, StrategyKey


@dataclass
class AggregationState:
    """Accumulators mutated by the fold loop, in file-arrival order."""

    strategies: StrategyAggregator = field(default_factory=StrategyAggregator)
    traders: TraderTracker = field(default_factory=TraderTracker)
    total_files: int = 0

    def count_file(self) -> None:
        """Count an enumerated result file, whether or not it qualifies."""
        self.total_files += 1

    def fold_batch(self, batch: NormalizedBatch) -> None:
        """Feed one qualifying file into both aggregators."""
        self.strategies.fold(batch.config, batch.records)
        self.traders.observe_batch(StrategyKey.from_config(batch.config), batch.records)

    def merge(self, later: AggregationState) -> None:
        """Append a partial state folded from files after this state's."""
        self.strategies.merge(later.strategies)
        self.traders.merge(later.traders)
        self.total_files += later.total_files
