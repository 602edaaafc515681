"""Per-strategy performance aggregation.

Folds normalized batches into one StrategyPerformance per strategy key.
Folding is a plain fold over the file set: the same batch folded twice
is counted twice.
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Any, Iterable

from tally.models.domain import StrategyKey, StrategyPerformance
from tally.models.types import StrategyConfig


def as_number(value: Any) -> float | None:
    """Return value as a float when it is a real JSON number.

    Integers too large for a float saturate to +/-inf.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        number = math.inf if value > 0 else -math.inf
    if math.isnan(number):
        return None
    return number


def record_roi(record: Any) -> float | None:
    """ROI of a trader record, or None when the record must be skipped.

    An ROI of exactly 0 is valid; only a missing or non-numeric ROI
    disqualifies the record.
    """
    if not isinstance(record, dict):
        return None
    return as_number(record.get("roi"))


class StrategyAggregator:
    """Running per-strategy statistics keyed by (history days, multiplier)."""

    def __init__(self) -> None:
        self.performances: dict[StrategyKey, StrategyPerformance] = {}

    def __len__(self) -> int:
        return len(self.performances)

    def _get_or_create(self, key: StrategyKey) -> StrategyPerformance:
        performance = self.performances.get(key)
        if performance is None:
            performance = StrategyPerformance(key=key)
            self.performances[key] = performance
        return performance

    def fold(self, config: StrategyConfig, records: Iterable[Any]) -> StrategyPerformance:
        """Fold one file's trader records into its strategy bucket.

        files_count is bumped even for an empty batch. The batch means
        replace whatever averages an earlier file left on the bucket.

        Args:
            config: Strategy config of the file.
            records: Raw trader records of the file.

        Returns:
            The updated StrategyPerformance.
        """
        performance = self._get_or_create(StrategyKey.from_config(config))
        performance.files_count += 1

        batch_count = 0
        roi_sum = 0.0
        win_rate_sum = 0.0

        for record in records:
            roi = record_roi(record)
            if roi is None:
                continue

            win_rate = as_number(record.get("winRate")) or 0.0
            pnl = as_number(record.get("totalPnl")) or 0.0

            batch_count += 1
            roi_sum += roi
            win_rate_sum += win_rate

            performance.best_roi = max(performance.best_roi, roi)
            performance.best_win_rate = max(performance.best_win_rate, win_rate)
            performance.best_pnl = max(performance.best_pnl, pnl)
            if roi > 0:
                performance.profitable_traders += 1

        performance.traders_analyzed += batch_count
        if batch_count > 0:
            performance.avg_roi = roi_sum / batch_count
            performance.avg_win_rate = win_rate_sum / batch_count
        else:
            performance.avg_roi = 0.0
            performance.avg_win_rate = 0.0

        return performance

    def merge(self, later: StrategyAggregator) -> None:
        """Combine a partial fold of files that come after this one's.

        Best-* fields take the max, counters are summed and averages come
        from the later partial, which holds the last batch for its keys.
        """
        for key, theirs in later.performances.items():
            mine = self.performances.get(key)
            if mine is None:
                self.performances[key] = replace(theirs)
                continue

            mine.best_roi = max(mine.best_roi, theirs.best_roi)
            mine.best_win_rate = max(mine.best_win_rate, theirs.best_win_rate)
            mine.best_pnl = max(mine.best_pnl, theirs.best_pnl)
            mine.traders_analyzed += theirs.traders_analyzed
            mine.profitable_traders += theirs.profitable_traders
            mine.files_count += theirs.files_count
            mine.avg_roi = theirs.avg_roi
            mine.avg_win_rate = theirs.avg_win_rate
