"""Result file IO on the local file system.

Adapter for listing and reading upstream JSON result files and for
writing the aggregate artifact. Reading never raises: unreadable or
unparsable files come back as None so callers can skip them. Writing
raises, since a failed artifact write ends the run.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from tally.models.types import AggregateArtifact

logger = logging.getLogger(__name__)


def list_result_files(directory: Path) -> list[Path]:
    """List ``*.json`` files in a directory in name order.

    Args:
        directory: Directory to scan.

    Returns:
        Sorted file paths; empty when the directory does not exist.
    """
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if p.suffix == ".json" and p.is_file())


def load_result_file(path: Path) -> Any | None:
    """Read and parse one JSON result file.

    Args:
        path: File to read.

    Returns:
        The parsed JSON value, or None when the file cannot be read, is
        not valid JSON, or exceeds the decoder's digit or nesting limits.
    """
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError, RecursionError) as e:
        logger.debug(f"Skipping unreadable result file {path}: {e}")
        return None


def write_artifact(artifact: AggregateArtifact, output_path: Path) -> Path:
    """Write the aggregate artifact, replacing any previous one.

    Args:
        artifact: Artifact to serialize.
        output_path: Destination file; parent directories are created.

    Returns:
        The path written.

    Raises:
        OSError: If the directory cannot be created or the file written.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(artifact.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
    logger.info(f"Aggregated results saved: {output_path}")
    return output_path


def read_artifact(path: Path) -> AggregateArtifact | None:
    """Load a previously written artifact, or None if absent or invalid."""
    payload = load_result_file(path)
    if payload is None:
        return None
    try:
        return AggregateArtifact.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Ignoring invalid artifact {path}: {e}")
        return None
