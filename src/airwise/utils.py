from __future__ import annotations

import logging
import math
import sys
from typing import Iterable, Optional

import pandas as pd

from .config import LOG_DATE_FORMAT, LOG_FORMAT, LOG_LEVEL


def round_half_up(x: float) -> int:
    """Round to the nearest integer, ties upwards (350.5 -> 351, 349.5 -> 350).

    Same as ties-away-from-zero for the non-negative values seen here.
    """
    return int(math.floor(x + 0.5))


def ensure_columns(df: pd.DataFrame, cols: Iterable[str]) -> None:
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")


def safe_copy(df: pd.DataFrame) -> pd.DataFrame:
    # avoid view-related surprises
    return df.copy(deep=True)


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Configure a root logger with a simple console handler."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))

    root = logging.getLogger()
    root.setLevel((level or LOG_LEVEL).upper())
    root.addHandler(handler)
    return root
