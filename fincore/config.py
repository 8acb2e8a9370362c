"""Configuration for the finance core.

Values can be overridden with environment variables; everything else in the
package reads them from here.
"""

import logging
import os
from pathlib import Path
from typing import Optional

_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

SEED_PATH = Path(os.getenv("FINCORE_SEED_PATH", _PROJECT_ROOT / "data" / "seed.json"))
LOG_LEVEL = os.getenv("FINCORE_LOG_LEVEL", "INFO").upper()
FILL_OPACITY = float(os.getenv("FINCORE_FILL_OPACITY", "0.4"))
CURRENCY = os.getenv("FINCORE_CURRENCY", "$")

# General balance chart
BALANCE_LABEL = "General balance"
BALANCE_LABELS = ("Incomes", "Outcomes")
INCOME_COLOR = "rgba(11, 155, 27, 1)"
OUTCOME_COLOR = "rgba(201, 12, 15, 1)"
BORDER_WIDTH = 1
HOVER_OFFSET = 4

DATE_FORMAT = "%m/%d/%Y"

_LOG_FORMAT = "%(levelname)s - %(name)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a single stream handler to the package logger."""
    logger = logging.getLogger("fincore")
    logger.setLevel(getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO))
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        logger.addHandler(handler)
    return logger
