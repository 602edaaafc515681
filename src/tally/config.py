"""Runtime settings.

Defaults match the directory layout the upstream producers write to.
Environment variables override the defaults; CLI flags override both.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field, PositiveInt

DEFAULT_INPUT_DIRS = (
    "trader_scan_results",
    "trader_analysis_results",
    "top_traders_results",
    "strategy_factory_results",
)
DEFAULT_OUTPUT_PATH = Path("strategy_factory_results/aggregated_results.json")
DEFAULT_SIMULATION_DIR = Path("simulation_results")


class Settings(BaseModel):
    """Aggregation and comparison settings.

    Relative paths resolve against base_dir.
    """

    base_dir: Path = Field(default_factory=Path.cwd)
    input_dirs: list[str] = Field(default_factory=lambda: list(DEFAULT_INPUT_DIRS))
    output_path: Path = DEFAULT_OUTPUT_PATH
    simulation_results_dir: Path = DEFAULT_SIMULATION_DIR
    strategies_limit: PositiveInt = 20
    top_traders_limit: PositiveInt = 10
    console_strategies_limit: PositiveInt = 15
    workers: PositiveInt = 1

    def input_paths(self) -> list[Path]:
        return [self.base_dir / name for name in self.input_dirs]

    def resolved_output_path(self) -> Path:
        return self.base_dir / self.output_path

    def resolved_simulation_dir(self) -> Path:
        return self.base_dir / self.simulation_results_dir


def load_settings(**overrides) -> Settings:
    """Build settings from TALLY_* environment variables plus overrides.

    Overrides whose value is None are ignored so CLI flags can be passed
    through unconditionally.
    """
    values: dict = {}
    if os.environ.get("TALLY_BASE_DIR"):
        values["base_dir"] = Path(os.environ["TALLY_BASE_DIR"])
    if os.environ.get("TALLY_OUTPUT_PATH"):
        values["output_path"] = Path(os.environ["TALLY_OUTPUT_PATH"])
    if os.environ.get("TALLY_SIMULATION_DIR"):
        values["simulation_results_dir"] = Path(os.environ["TALLY_SIMULATION_DIR"])
    if os.environ.get("TALLY_WORKERS"):
        values["workers"] = int(os.environ["TALLY_WORKERS"])

    values.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**values)
