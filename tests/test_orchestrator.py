"""Tests for the aggregation run orchestrator."""

import json
from pathlib import Path

import pytest
from conftest import make_analysis, make_scan, make_trader

from tally.config import Settings
from tally.models.domain import StrategyKey
from tally.worker.orchestrator import AggregationOrchestrator, aggregate_directories, fold_directory


class TestFoldDirectory:
    """Test folding a single directory."""

    def test_missing_directory_yields_empty_state(self, tmp_path: Path):
        state = fold_directory(tmp_path / "does_not_exist")

        assert state.total_files == 0
        assert len(state.strategies) == 0

    def test_only_json_files_read(self, write_result, tmp_path: Path):
        write_result("scans", "a.json", make_scan(traders=[make_trader("0x1", 5)]))
        write_result("scans", "notes.txt", "not json at all")

        state = fold_directory(tmp_path / "scans")

        assert state.total_files == 1
        assert len(state.traders) == 1

    def test_invalid_files_counted_but_skipped(self, write_result, tmp_path: Path):
        write_result("scans", "a.json", make_scan(traders=[make_trader("0x1", 5)]))
        write_result("scans", "b.json", "{not valid json")
        write_result("scans", "c.json", {"config": {"historyDays": 30}, "strategies": []})

        state = fold_directory(tmp_path / "scans")

        assert state.total_files == 3
        assert state.strategies.performances[StrategyKey(30, 1.0)].files_count == 1

    def test_oversized_integer_file_skipped(self, write_result, tmp_path: Path):
        digits = "9" * 5000
        payload = '{"config": {"historyDays": 30}, "traders": [{"address": "0x9", "roi": %s}]}' % digits
        write_result("scans", "a.json", payload)
        write_result("scans", "b.json", make_scan(traders=[make_trader("0x1", 5)]))

        state = fold_directory(tmp_path / "scans")

        assert state.total_files == 2
        assert state.strategies.performances[StrategyKey(30, 1.0)].files_count == 1
        assert list(state.traders.traders) == ["0x1"]

    def test_deeply_nested_file_skipped(self, write_result, tmp_path: Path):
        write_result("scans", "a.json", "[" * 100000 + "]" * 100000)
        write_result("scans", "b.json", make_scan(traders=[make_trader("0x1", 5)]))

        state = aggregate_directories([tmp_path / "scans"])

        assert state.total_files == 2
        assert list(state.traders.traders) == ["0x1"]

    def test_huge_integer_roi_does_not_abort(self, write_result, tmp_path: Path):
        huge = "9" * 400
        payload = '{"config": {"historyDays": 30}, "traders": [{"address": "0x9", "roi": %s}]}' % huge
        write_result("scans", "a.json", payload)
        write_result("scans", "b.json", make_scan(traders=[make_trader("0x1", 5)]))

        state = fold_directory(tmp_path / "scans")
        performance = state.strategies.performances[StrategyKey(30, 1.0)]

        assert performance.files_count == 2
        assert performance.best_roi == float("inf")
        assert performance.traders_analyzed == 2

    def test_missing_history_days_contributes_nothing(self, write_result, tmp_path: Path):
        payload = make_scan(traders=[make_trader("0x1", 50, win_rate=70)])
        del payload["config"]["historyDays"]
        write_result("scans", "a.json", payload)

        state = fold_directory(tmp_path / "scans")

        assert state.total_files == 1
        assert len(state.strategies) == 0
        assert len(state.traders) == 0

    def test_files_folded_in_name_order(self, write_result, tmp_path: Path):
        write_result("scans", "b.json", make_scan(traders=[make_trader("0x1", 2.0)]))
        write_result("scans", "a.json", make_scan(traders=[make_trader("0x1", 100.0)]))

        state = fold_directory(tmp_path / "scans")

        # b.json is folded last, so its batch mean is kept
        assert state.strategies.performances[StrategyKey(30, 1.0)].avg_roi == 2.0


class TestAggregateDirectories:
    """Test multi-directory aggregation."""

    @pytest.fixture
    def corpus(self, write_result, tmp_path: Path) -> list[Path]:
        write_result(
            "trader_scan_results",
            "scan_1.json",
            make_scan(30, 1.0, [make_trader("0xabc", 10, 55, 100), make_trader("0x1", -4)]),
        )
        write_result(
            "trader_scan_results",
            "scan_2.json",
            make_scan(30, 1.0, []),
        )
        write_result(
            "trader_analysis_results",
            "analysis_1.json",
            make_analysis(7, 2.0, [make_trader("0xabc", 25, 60, 300), make_trader("0x2", 0)]),
        )
        write_result(
            "top_traders_results",
            "top.json",
            make_scan(14, 0, [make_trader("0xabc", 5), {"address": "0x3"}]),
        )
        write_result(
            "strategy_factory_results",
            "factory.json",
            make_analysis(30, 1.0, [make_trader("0x4", 8, 20, 10), make_trader("0x5", 2, 40, 5)]),
        )
        return [
            tmp_path / "trader_scan_results",
            tmp_path / "trader_analysis_results",
            tmp_path / "top_traders_results",
            tmp_path / "strategy_factory_results",
        ]

    def test_files_count_per_key(self, corpus):
        state = aggregate_directories(corpus)

        assert state.total_files == 5
        assert state.strategies.performances[StrategyKey(30, 1.0)].files_count == 3
        assert state.strategies.performances[StrategyKey(7, 2.0)].files_count == 1
        assert state.strategies.performances[StrategyKey(14, 1.0)].files_count == 1

    def test_trader_found_across_strategies(self, corpus):
        state = aggregate_directories(corpus)
        aggregate = state.traders.traders["0xabc"]

        assert aggregate.best_roi == 25
        assert aggregate.times_found == 3
        assert aggregate.best_strategy == StrategyKey(7, 2.0)

    def test_average_comes_from_last_file_for_key(self, corpus):
        state = aggregate_directories(corpus)
        performance = state.strategies.performances[StrategyKey(30, 1.0)]

        assert performance.avg_roi == 5.0
        assert performance.avg_win_rate == 30.0
        assert performance.traders_analyzed == 4
        assert performance.profitable_traders == 3
        assert performance.best_roi == 10

    def test_parallel_matches_sequential(self, corpus):
        sequential = aggregate_directories(corpus, workers=1)
        parallel = aggregate_directories(corpus, workers=4)

        assert parallel.total_files == sequential.total_files
        assert parallel.strategies.performances == sequential.strategies.performances
        assert list(parallel.strategies.performances) == list(sequential.strategies.performances)
        assert parallel.traders.traders == sequential.traders.traders


class TestAggregationOrchestrator:
    """Test the settings-driven run."""

    def test_run_writes_artifact(self, write_result, settings: Settings):
        write_result(
            "trader_scan_results",
            "scan.json",
            make_scan(30, 1.0, [make_trader("0xabc", 12, 50, 40)]),
        )

        result = AggregationOrchestrator(settings).run()

        assert result.output_path == settings.base_dir / "strategy_factory_results" / "aggregated_results.json"
        payload = json.loads(result.output_path.read_text())
        assert payload["summary"]["totalFiles"] == 1
        assert payload["strategies"][0]["strategyId"] == "30d_1x"
        assert payload["topTraders"][0]["address"] == "0xabc"

    def test_run_overwrites_previous_artifact(self, write_result, settings: Settings):
        output = settings.resolved_output_path()
        output.parent.mkdir(parents=True)
        output.write_text('{"stale": true}')

        AggregationOrchestrator(settings).run()

        payload = json.loads(output.read_text())
        assert "stale" not in payload
        assert payload["strategies"] == []

    def test_previous_artifact_counted_but_not_aggregated(self, write_result, settings: Settings):
        write_result("trader_scan_results", "scan.json", make_scan(traders=[make_trader("0x1", 3)]))
        AggregationOrchestrator(settings).run()

        result = AggregationOrchestrator(settings).run()

        assert result.report.total_files == 2
        assert result.report.total_traders == 1

    def test_summarize_does_not_write(self, settings: Settings):
        result = AggregationOrchestrator(settings).summarize()

        assert result.output_path is None
        assert not settings.resolved_output_path().exists()

    def test_unwritable_output_raises(self, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        settings = Settings(base_dir=tmp_path, output_path=Path("blocker/out/results.json"))

        with pytest.raises(OSError):
            AggregationOrchestrator(settings).run()
