"""Shared pytest fixtures for tally tests."""

import json
from pathlib import Path

import pytest

from tally.config import Settings


def make_trader(address: str, roi, win_rate=None, total_pnl=None) -> dict:
    """Build a trader record the way the scan producers write it."""
    record = {"address": address, "roi": roi, "copiedTrades": 3}
    if win_rate is not None:
        record["winRate"] = win_rate
    if total_pnl is not None:
        record["totalPnl"] = total_pnl
    return record


def make_scan(history_days=30, multiplier=1.0, traders=None) -> dict:
    """Build a list-of-traders result payload."""
    return {
        "scanDate": "2024-01-01T00:00:00.000Z",
        "config": {
            "historyDays": history_days,
            "multiplier": multiplier,
            "minOrderSize": 1.0,
            "startingCapital": 1000.0,
        },
        "traders": traders or [],
    }


def make_analysis(history_days=30, multiplier=1.0, results=None) -> dict:
    """Build a results-list payload."""
    return {
        "timestamp": 1704067200000,
        "traderAddress": "0xfeed",
        "config": {"historyDays": history_days, "multiplier": multiplier},
        "results": results or [],
    }


@pytest.fixture
def write_result(tmp_path: Path):
    """Write a payload as <tmp_path>/<directory>/<name>; returns the path."""

    def _write(directory: str, name: str, payload) -> Path:
        target_dir = tmp_path / directory
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / name
        if isinstance(payload, str):
            path.write_text(payload, encoding="utf-8")
        else:
            path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings rooted at the test's temporary directory."""
    return Settings(base_dir=tmp_path)
