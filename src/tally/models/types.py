"""Pydantic models for Tally.

Wire formats shared with the upstream producers (strategy config,
simulation results) and the aggregate artifact written for downstream
readers. Field names on the wire are camelCase; Python attributes are
snake_case and the models serialize with ``by_alias=True``.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator


class StrategyConfig(BaseModel):
    """Copy-strategy configuration embedded in every result file."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    history_days: PositiveInt = Field(alias="historyDays")
    multiplier: float = 1.0
    min_order_size: float | None = Field(default=None, alias="minOrderSize")
    starting_capital: float | None = Field(default=None, alias="startingCapital")

    @field_validator("multiplier", mode="before")
    @classmethod
    def default_multiplier(cls, value: Any) -> Any:
        # Producers write 0 or null when the multiplier was not set
        return value or 1.0


class SummaryStats(BaseModel):
    """Corpus-wide statistics for one aggregation run."""

    model_config = ConfigDict(populate_by_name=True)

    total_files: int = Field(alias="totalFiles")
    total_strategies: int = Field(alias="totalStrategies")
    total_traders: int = Field(alias="totalTraders")
    unique_traders: int = Field(alias="uniqueTraders")
    profitable_traders: int = Field(alias="profitableTraders")
    profitable_rate: float = Field(alias="profitableRate")


class StrategyRow(BaseModel):
    """One strategy bucket as written to the artifact.

    Best-* fields are None when no valid record ever reached the bucket;
    any non-finite value is written as None.
    """

    model_config = ConfigDict(populate_by_name=True)

    strategy_id: str = Field(alias="strategyId")
    history_days: int = Field(alias="historyDays")
    multiplier: float
    best_roi: float | None = Field(alias="bestROI")
    best_win_rate: float | None = Field(alias="bestWinRate")
    best_pnl: float | None = Field(alias="bestPnL")
    avg_roi: float | None = Field(alias="avgROI")
    avg_win_rate: float | None = Field(alias="avgWinRate")
    traders_analyzed: int = Field(alias="tradersAnalyzed")
    profitable_traders: int = Field(alias="profitableTraders")
    files_count: int = Field(alias="filesCount")


class TopTraderRow(BaseModel):
    """A ranked trader with its address inlined; a non-finite ROI is None."""

    model_config = ConfigDict(populate_by_name=True)

    address: str
    best_roi: float | None = Field(alias="bestROI")
    best_strategy: str = Field(alias="bestStrategy")
    times_found: int = Field(alias="timesFound")


class AggregateArtifact(BaseModel):
    """Persisted summary of an aggregation run."""

    model_config = ConfigDict(populate_by_name=True)

    timestamp: str
    summary: SummaryStats
    strategies: list[StrategyRow]
    top_traders: list[TopTraderRow] = Field(alias="topTraders")


class SimulationResult(BaseModel):
    """Result of a single copy-trading simulation run."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = None
    name: str
    logic: str | None = None
    timestamp: float | None = None
    trader_address: str = Field(alias="traderAddress")
    starting_capital: float = Field(default=0.0, alias="startingCapital")
    current_capital: float = Field(default=0.0, alias="currentCapital")
    total_trades: int = Field(default=0, alias="totalTrades")
    copied_trades: int = Field(default=0, alias="copiedTrades")
    skipped_trades: int = Field(default=0, alias="skippedTrades")
    total_invested: float = Field(default=0.0, alias="totalInvested")
    current_value: float = Field(default=0.0, alias="currentValue")
    realized_pnl: float = Field(default=0.0, alias="realizedPnl")
    unrealized_pnl: float = Field(default=0.0, alias="unrealizedPnl")
    total_pnl: float = Field(default=0.0, alias="totalPnl")
    roi: float = 0.0
    positions: list[dict[str, Any]] = Field(default_factory=list)


class SimulationStats(BaseModel):
    """Aggregate statistics over a set of simulation results."""

    model_config = ConfigDict(populate_by_name=True)

    total: int
    profitable: int
    unprofitable: int
    profitable_pct: float = Field(alias="profitablePct")
    unprofitable_pct: float = Field(alias="unprofitablePct")
    avg_roi: float = Field(alias="avgROI")
    avg_pnl: float = Field(alias="avgPnl")
    total_copied_trades: int = Field(alias="totalCopiedTrades")
    total_skipped_trades: int = Field(alias="totalSkippedTrades")
