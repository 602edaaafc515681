"""Result file normalization to a common batch shape.

Upstream producers write two layouts:
- trader scans / top-trader extracts: ``{config, traders: [...]}``
- trader analyses / strategy factory: ``{config, results: [...]}``

Classification runs before any aggregation so that a file either fully
qualifies or is fully skipped. Individual trader entries are not
validated here.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from tally.models.domain import NormalizedBatch, RecordShape
from tally.models.types import StrategyConfig

logger = logging.getLogger(__name__)


def classify_payload(payload: Any) -> RecordShape:
    """Detect which trader-list layout a parsed payload uses.

    The ``traders`` list wins when both lists are present.

    Args:
        payload: Any parsed JSON value.

    Returns:
        The detected RecordShape.
    """
    if not isinstance(payload, dict):
        return RecordShape.UNRECOGNIZED
    if isinstance(payload.get("traders"), list):
        return RecordShape.LIST_OF_TRADERS
    if isinstance(payload.get("results"), list):
        return RecordShape.LIST_OF_RESULTS
    return RecordShape.UNRECOGNIZED


def parse_config(raw: Any) -> StrategyConfig | None:
    """Parse a strategy config, or None when it cannot key a strategy."""
    if not isinstance(raw, dict):
        return None
    try:
        return StrategyConfig.model_validate(raw)
    except ValidationError:
        return None


def normalize_payload(payload: Any) -> NormalizedBatch | None:
    """Reduce a parsed result file to (config, records).

    Args:
        payload: Any parsed JSON value.

    Returns:
        NormalizedBatch, or None when the payload has no trader list or
        its config lacks a usable historyDays.
    """
    shape = classify_payload(payload)
    if shape is RecordShape.UNRECOGNIZED:
        return None

    config = parse_config(payload.get("config"))
    if config is None:
        logger.debug("Payload has a trader list but no usable config")
        return None

    return NormalizedBatch(shape=shape, config=config, records=payload[shape.value])
