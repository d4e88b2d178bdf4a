"""Build the scoring algorithm configuration from defaults, a JSON file and overrides."""

import json
import logging
import os
from pathlib import Path
from typing import Any

from models.scoring import ScoringAlgorithm

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "SCORING_CONFIG_PATH"


def _deep_merge(base: dict[str, Any], updates: dict[str, Any]) -> dict[str, Any]:
    """Merge ``updates`` into a copy of ``base``; nested dicts merge, everything else replaces."""
    merged = dict(base)
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_scoring_algorithm(
    path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> ScoringAlgorithm:
    """
    Load the scoring configuration.

    Defaults come from ``ScoringAlgorithm``. A JSON file (``path``, or the
    ``SCORING_CONFIG_PATH`` environment variable) is layered on top, then
    ``overrides``. Partial files are fine: ``{"cloud": {"band_optima":
    {"cloudcover_mid": 20}}}`` only changes that one optimum.

    Raises:
        FileNotFoundError: If an explicit or configured path does not exist
        pydantic.ValidationError: If the merged configuration is invalid
    """
    config = ScoringAlgorithm().model_dump()

    path = path or os.environ.get(CONFIG_PATH_ENV)
    if path:
        config_file = Path(path)
        if not config_file.exists():
            raise FileNotFoundError(f"Scoring config file not found: {config_file}")
        with open(config_file, "r", encoding="utf-8") as f:
            config = _deep_merge(config, json.load(f))
        logger.info(f"Loaded scoring config from {config_file}")

    if overrides:
        config = _deep_merge(config, overrides)

    return ScoringAlgorithm.model_validate(config)
