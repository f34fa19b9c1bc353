"""BackstopJS configuration document I/O and scenario appends."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Sequence

from visual_review.models.scenario import Scenario
from visual_review.models.url_pair import ValidatedPair

logger = logging.getLogger(__name__)


class BackstopConfigNotFoundError(FileNotFoundError):
    """Raised when the BackstopJS configuration file does not exist."""


def load_backstop_config(path: str | Path) -> dict:
    """Load the full configuration document.

    Unknown top-level settings are kept as-is. Invalid JSON raises
    ``json.JSONDecodeError``.
    """
    path = Path(path)
    if not path.exists():
        raise BackstopConfigNotFoundError(f"Backstop config file not found: {path}")
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def save_backstop_config(path: str | Path, data: dict) -> None:
    path = Path(path)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def apply_validated_pairs(pairs: Sequence[ValidatedPair], path: str | Path) -> int:
    """Append one scenario per pair to the config at ``path``.

    Labels are numbered from 1 within this call. Appends are unconditional,
    so running twice with the same pairs adds them twice.
    """
    config = load_backstop_config(path)
    if not config.get("scenarios"):
        config["scenarios"] = []
    scenarios = config["scenarios"]

    for index, pair in enumerate(pairs, 1):
        scenario = Scenario.from_pair(pair, index)
        scenarios.append(scenario.to_backstop())
        logger.info("Added scenario: %s", scenario.label)

    save_backstop_config(path, config)
    logger.info("Updated %s with %d additional scenarios", path, len(pairs))
    return len(pairs)
