"""Console rendering for aggregation and comparison reports."""

from __future__ import annotations

import math
from datetime import datetime

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from tally.compare.simulations import (
    best_results,
    copy_rate,
    group_by_trader,
    open_positions,
    worst_results,
)
from tally.models.domain import AggregationReport
from tally.models.types import SimulationResult, SimulationStats

MEDALS = {1: "🥇", 2: "🥈", 3: "🥉"}


def fmt_pct(value: float, digits: int = 1) -> str:
    if not math.isfinite(value):
        return "n/a"
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.{digits}f}%"


def fmt_usd(value: float, digits: int = 2) -> str:
    if not math.isfinite(value):
        return "n/a"
    sign = "+" if value >= 0 else "-"
    return f"{sign}${abs(value):.{digits}f}"


def _signed_style(value: float) -> str:
    return "green" if value >= 0 else "red"


def short_address(address: str) -> str:
    if len(address) <= 20:
        return address
    return f"{address[:10]}...{address[-8:]}"


def render_aggregate(report: AggregationReport, console: Console, strategies_limit: int = 15) -> None:
    """Print strategy and trader rankings plus overall statistics."""
    strategies = Table(title="🏆 Top strategies by best ROI", title_style="bold cyan")
    strategies.add_column("#", style="yellow", justify="right")
    strategies.add_column("Strategy", style="blue")
    strategies.add_column("Best ROI", justify="right")
    strategies.add_column("Best Win%", style="yellow", justify="right")
    strategies.add_column("Best P&L", justify="right")
    strategies.add_column("Avg ROI", justify="right")
    strategies.add_column("Profitable", justify="right")
    strategies.add_column("Files", justify="right")

    for rank, s in enumerate(report.strategies[:strategies_limit], start=1):
        strategies.add_row(
            str(rank),
            s.key.strategy_id,
            f"[{_signed_style(s.best_roi)}]{fmt_pct(s.best_roi)}[/]",
            f"{s.best_win_rate:.1f}%",
            fmt_usd(s.best_pnl, digits=0),
            fmt_pct(s.avg_roi),
            f"{s.profitable_traders}/{s.traders_analyzed}",
            str(s.files_count),
        )
    console.print(strategies)

    traders = Table(title="🎯 Top traders (found in multiple scans)", title_style="bold cyan")
    traders.add_column("#", style="yellow", justify="right")
    traders.add_column("Address", style="blue")
    traders.add_column("Best ROI", justify="right")
    traders.add_column("Best Strategy", style="cyan")
    traders.add_column("Found times", justify="right")

    for rank, (address, aggregate) in enumerate(report.top_traders, start=1):
        traders.add_row(
            str(rank),
            escape(address),
            f"[{_signed_style(aggregate.best_roi)}]{fmt_pct(aggregate.best_roi)}[/]",
            aggregate.best_strategy.strategy_id,
            str(aggregate.times_found),
        )
    console.print(traders)

    console.print("\n[bold cyan]📈 Overall statistics[/]")
    console.print(f"  Total files:        [cyan]{report.total_files}[/]")
    console.print(f"  Total strategies:   [cyan]{len(report.strategies)}[/]")
    console.print(f"  Total traders:      [cyan]{report.total_traders}[/]")
    console.print(f"  Unique traders:     [cyan]{report.unique_traders}[/]")
    console.print(
        f"  Profitable traders: [green]{report.total_profitable}[/] "
        f"({report.profitable_rate:.1f}%)"
    )

    best = report.best_strategy
    if best is not None:
        console.print(
            Panel(
                f"ID: [yellow]{best.key.strategy_id}[/]\n"
                f"ROI: [green]{fmt_pct(best.best_roi, digits=2)}[/]\n"
                f"Win Rate: [yellow]{best.best_win_rate:.1f}%[/]\n"
                f"P&L: [green]{fmt_usd(best.best_pnl)}[/]",
                title="🌟 Best strategy",
                border_style="green",
                expand=False,
            )
        )


def render_comparison_table(results: list[SimulationResult], console: Console) -> None:
    """Print one table per followed trader, best ROI first."""
    console.print(f"[bold cyan]📊 Simulation results comparison[/] ({len(results)} results)")

    for trader, group in group_by_trader(results).items():
        table = Table(title=f"▶ Trader: {short_address(trader)}", title_style="bold blue")
        table.add_column("Name", max_width=30, no_wrap=True)
        table.add_column("ROI", justify="right")
        table.add_column("P&L", justify="right")
        table.add_column("Trades", justify="right")
        table.add_column("Positions", justify="right")
        for result in group:
            table.add_row(
                escape(result.name),
                f"[{_signed_style(result.roi)}]{fmt_pct(result.roi, digits=2)}[/]",
                f"[{_signed_style(result.total_pnl)}]{fmt_usd(result.total_pnl)}[/]",
                f"{result.copied_trades}/{result.total_trades}",
                str(len(open_positions(result))),
            )
        console.print(table)


def _render_result_lines(result: SimulationResult, console: Console) -> None:
    console.print(f"   [dim]Trader: {result.trader_address[:10]}...[/]")
    console.print(f"   ROI: [{_signed_style(result.roi)}]{fmt_pct(result.roi, digits=2)}[/]")
    console.print(f"   P&L: [{_signed_style(result.total_pnl)}]{fmt_usd(result.total_pnl)}[/]")
    console.print(f"   Trades: {result.copied_trades} copied, {result.skipped_trades} skipped")


def render_best(results: list[SimulationResult], console: Console, limit: int = 5) -> None:
    console.print(f"\n[bold green]🏆 Top {limit} best performing configurations[/]\n")
    for rank, result in enumerate(best_results(results, limit), start=1):
        console.print(f"[bold]{MEDALS.get(rank, f'{rank}.')} {escape(result.name)}[/]")
        _render_result_lines(result, console)
        console.print(
            f"   Capital: ${result.starting_capital:.2f} → ${result.current_capital:.2f}\n"
        )


def render_worst(results: list[SimulationResult], console: Console, limit: int = 3) -> None:
    console.print(f"\n[bold red]⚠️  Worst {limit} performing configurations[/]\n")
    for rank, result in enumerate(worst_results(results, limit), start=1):
        console.print(f"[bold]{rank}. {escape(result.name)}[/]")
        _render_result_lines(result, console)
        console.print()


def render_statistics(stats: SimulationStats, console: Console) -> None:
    console.print("\n[bold cyan]📈 Aggregate statistics[/]\n")
    console.print(f"Total simulations: [yellow]{stats.total}[/]")
    console.print(f"Profitable: [green]{stats.profitable}[/] ({stats.profitable_pct:.1f}%)")
    console.print(f"Unprofitable: [red]{stats.unprofitable}[/] ({stats.unprofitable_pct:.1f}%)\n")
    console.print(f"Average ROI: [{_signed_style(stats.avg_roi)}]{fmt_pct(stats.avg_roi, digits=2)}[/]")
    console.print(f"Average P&L: [{_signed_style(stats.avg_pnl)}]{fmt_usd(stats.avg_pnl)}[/]\n")
    console.print(f"Total trades copied: [cyan]{stats.total_copied_trades}[/]")
    console.print(f"Total trades skipped: [yellow]{stats.total_skipped_trades}[/]")


def render_detail(result: SimulationResult, console: Console) -> None:
    """Print the full breakdown of one simulation result."""
    positions = open_positions(result)
    run_date = (
        datetime.fromtimestamp(result.timestamp / 1000).strftime("%Y-%m-%d %H:%M:%S")
        if result.timestamp
        else "unknown"
    )

    console.print(
        Panel(
            f"[bold]Configuration[/]\n"
            f"  Name: [yellow]{escape(result.name)}[/]\n"
            f"  Trader: [blue]{result.trader_address}[/]\n"
            f"  Logic: {result.logic or '-'}\n"
            f"  Date: {run_date}\n\n"
            f"[bold]Capital[/]\n"
            f"  Starting: [cyan]${result.starting_capital:.2f}[/]\n"
            f"  Current:  [cyan]${result.current_capital:.2f}[/]\n"
            f"  Invested: [cyan]${result.total_invested:.2f}[/]\n"
            f"  Value:    [cyan]${result.current_value:.2f}[/]\n\n"
            f"[bold]Performance[/]\n"
            f"  Total P&L: [{_signed_style(result.total_pnl)}]{fmt_usd(result.total_pnl)}[/]\n"
            f"  ROI:       [{_signed_style(result.roi)}]{fmt_pct(result.roi, digits=2)}[/]\n"
            f"  Realized:   ${result.realized_pnl:.2f}\n"
            f"  Unrealized: ${result.unrealized_pnl:.2f}\n\n"
            f"[bold]Trading activity[/]\n"
            f"  Total trades: [cyan]{result.total_trades}[/]\n"
            f"  Copied:       [green]{result.copied_trades}[/]\n"
            f"  Skipped:      [yellow]{result.skipped_trades}[/]\n"
            f"  Copy rate:    {copy_rate(result):.1f}%\n\n"
            f"[bold]Positions[/]\n"
            f"  Open:   [cyan]{len(positions)}[/]\n"
            f"  Closed: [dim]{len(result.positions) - len(positions)}[/]",
            title="📋 Detailed result",
            border_style="cyan",
        )
    )
