"""Exceptions and warnings raised by airwise.

Bad concentrations raise :class:`InvalidReading`; asking for a pollutant
without a breakpoint table is a plain ``ValueError``. The
warnings signal a best-effort result (extrapolated index, neutral fallback
category) and never interrupt the caller.
"""

from __future__ import annotations

from typing import Iterable, Tuple


class AirQualityError(Exception):
    """Base class for airwise errors."""


class InvalidReading(AirQualityError, ValueError):
    """A pollutant concentration is missing, non-numeric, NaN or negative."""

    def __init__(self, message: str, fields: Iterable[str] = ()):
        super().__init__(message)
        self.fields: Tuple[str, ...] = tuple(fields)


class AirQualityWarning(UserWarning):
    """Base class for non-fatal airwise signals."""


class BreakpointTableExhausted(AirQualityWarning):
    """A concentration lies above the last breakpoint; the index was extrapolated."""


class InvalidOrdinal(AirQualityWarning):
    """A provider index outside 1..5 was mapped to the neutral category."""
