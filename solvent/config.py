"""
Runtime configuration for SOLVENT.

Values can be overridden with environment variables prefixed SOLVENT_;
command line flags override both.

    SOLVENT_OUTPUT_PRECISION   significant digits printed by the CLI (10)
    SOLVENT_LOG_LEVEL          logging level name for the CLI (WARNING)
    SOLVENT_HISTORY_FILE       REPL history file (~/.solvent_history)
"""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

VERSION = "0.1.0"

MIN_PRECISION = 1
DEFAULT_PRECISION = 10


def parse_precision(text) -> int:
    """
    Parse a count of significant digits.

    Raises:
        ValueError: If text is not an integer of at least MIN_PRECISION
    """
    try:
        value = int(text)
    except (TypeError, ValueError):
        raise ValueError(f"Precision must be an integer, got {text!r}") from None
    if value < MIN_PRECISION:
        raise ValueError(f"Precision must be at least {MIN_PRECISION}, got {value}")
    return value


def _precision_from_env() -> int:
    raw = os.getenv("SOLVENT_OUTPUT_PRECISION")
    if raw is None:
        return DEFAULT_PRECISION
    try:
        return parse_precision(raw)
    except ValueError as e:
        logger.warning("Ignoring SOLVENT_OUTPUT_PRECISION: %s", e)
        return DEFAULT_PRECISION


OUTPUT_PRECISION = _precision_from_env()

LOG_LEVEL = os.getenv("SOLVENT_LOG_LEVEL", "WARNING").upper()

HISTORY_FILE = Path(os.getenv("SOLVENT_HISTORY_FILE",
                              str(Path.home() / ".solvent_history")))
HISTORY_LENGTH = 1000
