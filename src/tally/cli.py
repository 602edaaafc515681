"""Command line entry point.

Usage:
    tally aggregate [--base-dir DIR] [--output PATH] [--workers N]
    tally compare [all|best|worst|stats|detail] [ARG]

Exit codes:
    0: Success (including runs where some files were skipped)
    1: Fatal error or bad usage
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from tally.compare import simulations
from tally.config import Settings, load_settings
from tally.report import console as report
from tally.worker.orchestrator import AggregationOrchestrator

logger = logging.getLogger(__name__)

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Route log records through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tally", description="Strategy results aggregation")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--base-dir", type=Path, help="Directory holding the result folders")
    subparsers = parser.add_subparsers(dest="command", required=True)

    aggregate = subparsers.add_parser("aggregate", help="Aggregate all strategy result files")
    aggregate.add_argument("--output", type=Path, help="Artifact path (relative to base dir)")
    aggregate.add_argument("--workers", type=int, help="Fold directories on N threads")

    compare = subparsers.add_parser("compare", help="Compare simulation results")
    compare.add_argument(
        "view",
        nargs="?",
        default="all",
        choices=["all", "best", "worst", "stats", "detail"],
    )
    compare.add_argument("arg", nargs="?", help="Count for best/worst, name for detail")
    compare.add_argument("--results-dir", type=Path, help="Simulation results directory")

    return parser


def run_aggregate(settings: Settings) -> int:
    console.rule("[bold cyan]📊 Aggregator of all strategy results")
    result = AggregationOrchestrator(settings).run()
    report.render_aggregate(result.report, console, settings.console_strategies_limit)
    console.print(f"\n[green]✓ Aggregated results saved:[/] [cyan]{result.output_path}[/]")
    return 0


def _parse_count(arg: str | None, default: int) -> int:
    try:
        count = int(arg) if arg else default
    except ValueError:
        return default
    return count if count > 0 else default


def run_compare(settings: Settings, view: str, arg: str | None) -> int:
    results = simulations.load_simulation_results(settings.resolved_simulation_dir())
    if not results:
        console.print("[yellow]No simulation results to compare. Run simulations first.[/]")
        return 0

    if view == "all":
        report.render_comparison_table(results, console)
        report.render_best(results, console, 5)
        report.render_worst(results, console, 3)
        report.render_statistics(simulations.compute_statistics(results), console)
    elif view == "best":
        report.render_best(results, console, _parse_count(arg, 10))
    elif view == "worst":
        report.render_worst(results, console, _parse_count(arg, 5))
    elif view == "stats":
        report.render_statistics(simulations.compute_statistics(results), console)
    elif view == "detail":
        if not arg:
            console.print("[red]Please provide a result name to view details[/]")
            return 1
        found = simulations.find_result(results, arg)
        if found is None:
            console.print(f"[red]No result found matching: {arg}[/]")
            return 1
        report.render_detail(found, console)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        if args.command == "aggregate":
            settings = load_settings(
                base_dir=args.base_dir, output_path=args.output, workers=args.workers
            )
            return run_aggregate(settings)
        settings = load_settings(base_dir=args.base_dir, simulation_results_dir=args.results_dir)
        return run_compare(settings, args.view, args.arg)
    except Exception as e:
        logger.error(f"✗ Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
