"""Category bands: EPA index categories and the provider 1-5 scale.

Also derives outdoor exercise advice from an index, and reduces
provider-reported per-parameter indices to an overall one.

All tables are built once at import and never mutated.
"""

from __future__ import annotations

import logging
import math
import numbers
import warnings
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple

import numpy as np

from .config import (
    EPA_CATEGORIES,
    EXERCISE_ADVICE,
    EXERCISE_LEVELS,
    HEALTH_MESSAGES,
    LEVEL_COLORS,
    LEVELS,
    NEUTRAL_COLOR,
    REPORTED_PARAMETERS,
)
from .errors import InvalidOrdinal
from .readings import check_concentration

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoryBand:
    label: str
    color: str
    lower: float = 0.0
    upper: Optional[float] = None  # None -> open-ended
    level: int = 0
    code: str = ""
    message: str = ""

    @property
    def is_open_ended(self) -> bool:
        return self.upper is None

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "color": self.color,
            "level": self.level,
            "code": self.code,
            "message": self.message,
        }


@dataclass(frozen=True)
class BandLadder:
    """Ascending bands scanned in order; the last one is open-ended.

    ``upper_inclusive`` selects ``value <= upper`` (EPA categories) or
    ``value < upper`` (per-pollutant display thresholds).
    """

    bands: Tuple[CategoryBand, ...]
    upper_inclusive: bool = False
    nan_band: Optional[CategoryBand] = None

    def __post_init__(self):
        if not self.bands:
            raise ValueError("A ladder needs at least one band")
        uppers = [b.upper for b in self.bands[:-1]]
        if any(u is None for u in uppers) or self.bands[-1].upper is not None:
            raise ValueError("Only the last band may be open-ended")
        if any(b >= a for a, b in zip(uppers[1:], uppers)):
            raise ValueError(f"Band bounds must be strictly increasing: {uppers}")

    def lookup(self, value: float) -> CategoryBand:
        if value is None or math.isnan(value):
            return self.nan_band if self.nan_band is not None else self.bands[0]
        for band in self.bands[:-1]:
            if value < band.upper or (self.upper_inclusive and value == band.upper):
                return band
        return self.bands[-1]

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(b.label for b in self.bands)


def build_ladder(
    labels: Sequence[str],
    colors: Sequence[str],
    thresholds: Sequence[float],
    upper_inclusive: bool = False,
    nan_band: Optional[CategoryBand] = None,
    codes: Optional[Sequence[str]] = None,
) -> BandLadder:
    """Build a ladder from ``len(labels) - 1`` ascending upper bounds."""
    if len(thresholds) != len(labels) - 1 or len(colors) != len(labels):
        raise ValueError(
            f"Expected {len(labels) - 1} thresholds and {len(labels)} colors, "
            f"got {len(thresholds)} and {len(colors)}"
        )
    bands = []
    lower = 0.0
    for i, label in enumerate(labels):
        upper = thresholds[i] if i < len(thresholds) else None
        code = codes[i] if codes else label.lower().replace(" ", "_")
        bands.append(
            CategoryBand(
                label=label,
                color=colors[i],
                lower=lower,
                upper=upper,
                level=i + 1,
                code=code,
                message=HEALTH_MESSAGES.get(code, "") if codes else "",
            )
        )
        lower = upper
    return BandLadder(bands=tuple(bands), upper_inclusive=upper_inclusive, nan_band=nan_band)


# Good label, grey color; used for NaN values and invalid provider ordinals
NEUTRAL_BAND = CategoryBand(label="Good", color=NEUTRAL_COLOR, level=0, code="unknown")

EPA_LADDER: BandLadder = build_ladder(
    labels=[c[1] for c in EPA_CATEGORIES],
    colors=[c[2] for c in EPA_CATEGORIES],
    thresholds=[c[0] for c in EPA_CATEGORIES[:-1]],
    upper_inclusive=True,
    codes=[c[3] for c in EPA_CATEGORIES],
)

PROVIDER_BANDS: Mapping[int, CategoryBand] = MappingProxyType(
    {
        i + 1: CategoryBand(
            label=label,
            color=LEVEL_COLORS[label],
            lower=i + 1,
            upper=i + 1,
            level=i + 1,
            code=label.lower().replace(" ", "_"),
        )
        for i, label in enumerate(LEVELS)
    }
)


def categorize_index(index: float) -> CategoryBand:
    """Map an EPA index to its category (upper bounds inclusive)."""
    return EPA_LADDER.lookup(index)


def health_recommendation(index: float) -> str:
    return categorize_index(index).message


def categorize_provider_index(ordinal: Any, warn: bool = True) -> CategoryBand:
    """Direct lookup of the provider's 1-5 index.

    Anything outside 1..5 maps to :data:`NEUTRAL_BAND`. This never raises: the
    provider value must not block the rest of the pipeline. With ``warn=False``
    the fallback is only logged.
    """
    band = None
    if not isinstance(ordinal, (bool, np.bool_)):
        try:
            band = PROVIDER_BANDS.get(ordinal)
        except TypeError:  # unhashable
            band = None
    if band is None:
        logger.warning(f"Provider index {ordinal!r} outside 1..5, using neutral category")
        if warn:
            warnings.warn(f"Provider index {ordinal!r} outside 1..5", InvalidOrdinal, stacklevel=2)
        return NEUTRAL_BAND
    return band


# -----------------------------
# Outdoor exercise advice
# -----------------------------


@dataclass(frozen=True)
class ExerciseAdvice:
    level: str  # safe / caution / avoid
    recommendation: str
    duration: str
    precautions: Tuple[str, ...] = ()
    best_time: str = ""
    alternatives: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "level": self.level,
            "recommendation": self.recommendation,
            "duration": self.duration,
            "precautions": list(self.precautions),
            "best_time": self.best_time,
            "alternatives": list(self.alternatives),
        }


def exercise_level(index: float) -> str:
    if isinstance(index, bool) or not isinstance(index, numbers.Real) or not math.isfinite(index):
        raise ValueError(f"Index must be a finite number, got {index!r}")
    for upper, level in EXERCISE_LEVELS:
        if upper is None or index <= upper:
            return level
    # unreachable with an open-ended last level
    raise ValueError(f"No exercise level for index {index!r}")


def exercise_safety(index: float) -> ExerciseAdvice:
    """Outdoor exercise advice for an EPA index: safe up to 50, caution up to 100."""
    level = exercise_level(index)
    advice = EXERCISE_ADVICE[level]
    shown = int(index) if float(index).is_integer() else index
    return ExerciseAdvice(
        level=level,
        recommendation=advice["recommendation"].format(aqi=shown),
        duration=advice["duration"],
        precautions=tuple(advice["precautions"]),
        best_time=advice["best_time"],
        alternatives=tuple(advice["alternatives"]),
    )


# -----------------------------
# Provider-reported indices
# -----------------------------


@dataclass(frozen=True)
class ReportedIndex:
    """Overall index derived from provider-supplied per-parameter indices."""

    value: float
    category: str  # category name reported alongside the maximum
    band: CategoryBand
    measurements: Mapping[str, float]
    area: str = ""

    @property
    def code(self) -> str:
        return self.band.code


def aggregate_reported_indices(observations: Iterable[Mapping[str, Any]]) -> ReportedIndex:
    """Reduce per-parameter observations to the overall (maximum) index.

    Each observation carries ``ParameterName``, ``AQI`` and ``Category.Name``.
    A later observation replaces the maximum only when strictly greater, so
    the first parameter reaching it keeps its category name. Observations
    without a usable index are skipped.
    """
    max_value = 0
    category = "Good"
    measurements = {}
    area = ""
    for obs in observations:
        name = str(obs.get("ParameterName", "")).strip().lower()
        value = obs.get("AQI")
        reason = check_concentration(f"{name or 'unnamed'} index", value)
        if reason is not None:
            logger.warning(f"Skipping observation: {reason}")
            continue
        param = REPORTED_PARAMETERS.get(name, name)
        measurements[param] = value
        if not area:
            area = str(obs.get("ReportingArea") or "")
        if value > max_value:
            max_value = value
            category = (obs.get("Category") or {}).get("Name") or categorize_index(value).label

    if not measurements:
        logger.info("No usable provider index observations")
    return ReportedIndex(
        value=max_value,
        category=category,
        band=categorize_index(max_value),
        measurements=MappingProxyType(measurements),
        area=area,
    )
