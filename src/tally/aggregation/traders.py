"""Trader deduplication across strategies and files."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterable

from tally.aggregation.strategies import record_roi
from tally.models.domain import StrategyKey, TraderAggregate


class TraderTracker:
    """Best ROI and occurrence count per trader address."""

    def __init__(self) -> None:
        self.traders: dict[str, TraderAggregate] = {}

    def __len__(self) -> int:
        return len(self.traders)

    def observe(self, key: StrategyKey, record: Any) -> TraderAggregate | None:
        """Record one occurrence of a trader under a strategy.

        Ties keep the strategy that reached the best ROI first.

        Returns:
            The trader's aggregate, or None if the record has no usable
            ROI or no address.
        """
        roi = record_roi(record)
        if roi is None:
            return None
        address = record.get("address")
        if not isinstance(address, str) or not address:
            return None

        aggregate = self.traders.get(address)
        if aggregate is None:
            aggregate = TraderAggregate(best_roi=roi, best_strategy=key)
            self.traders[address] = aggregate
            return aggregate

        aggregate.times_found += 1
        if roi > aggregate.best_roi:
            aggregate.best_roi = roi
            aggregate.best_strategy = key
        return aggregate

    def observe_batch(self, key: StrategyKey, records: Iterable[Any]) -> None:
        for record in records:
            self.observe(key, record)

    def merge(self, later: TraderTracker) -> None:
        """Combine occurrences folded from later files."""
        for address, theirs in later.traders.items():
            mine = self.traders.get(address)
            if mine is None:
                self.traders[address] = replace(theirs)
                continue

            mine.times_found += theirs.times_found
            if theirs.best_roi > mine.best_roi:
                mine.best_roi = theirs.best_roi
                mine.best_strategy = theirs.best_strategy
