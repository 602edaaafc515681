"""Tests for runtime settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from tally.config import DEFAULT_INPUT_DIRS, Settings, load_settings


class TestSettings:
    """Test defaults and path resolution."""

    def test_defaults(self, tmp_path: Path):
        settings = Settings(base_dir=tmp_path)

        assert settings.input_dirs == list(DEFAULT_INPUT_DIRS)
        assert settings.strategies_limit == 20
        assert settings.top_traders_limit == 10
        assert settings.workers == 1
        assert settings.input_paths()[0] == tmp_path / "trader_scan_results"
        assert settings.resolved_output_path() == (
            tmp_path / "strategy_factory_results" / "aggregated_results.json"
        )

    def test_absolute_output_path_kept(self, tmp_path: Path):
        target = tmp_path / "elsewhere" / "out.json"
        settings = Settings(base_dir=tmp_path / "base", output_path=target)
        assert settings.resolved_output_path() == target

    def test_workers_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(workers=0)


class TestLoadSettings:
    """Test environment and override layering."""

    def test_environment_overrides(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("TALLY_BASE_DIR", str(tmp_path))
        monkeypatch.setenv("TALLY_WORKERS", "3")
        monkeypatch.setenv("TALLY_SIMULATION_DIR", "sims")

        settings = load_settings()

        assert settings.base_dir == tmp_path
        assert settings.workers == 3
        assert settings.resolved_simulation_dir() == tmp_path / "sims"

    def test_explicit_overrides_win_and_none_ignored(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("TALLY_WORKERS", "3")

        settings = load_settings(base_dir=tmp_path, workers=None, output_path=Path("x.json"))

        assert settings.workers == 3
        assert settings.resolved_output_path() == tmp_path / "x.json"
