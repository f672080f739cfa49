"""Per-pollutant status classification for individual pollutant displays.

The thresholds follow an informal Good/Fair/Moderate/Poor/Very Poor scale
(Good/Fair/Poor for NH3 and NO) and are unrelated to the EPA breakpoints.
"""

from __future__ import annotations

import math
import numbers
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from .bands import NEUTRAL_BAND, BandLadder, CategoryBand, build_ladder
from .config import (
    DISPLAY_DECIMALS,
    DISPLAY_UNIT,
    LEVEL_COLORS,
    LEVELS,
    POLLUTANT_THRESHOLDS,
    SHORT_LEVELS,
    SMOKE_CO,
    SMOKE_PM25,
    SMOKE_PROVIDER_INDEX,
)
from .readings import PollutantKind


def _ladder_for(thresholds) -> BandLadder:
    if len(thresholds) == len(LEVELS) - 1:
        labels = LEVELS
        colors = [LEVEL_COLORS[label] for label in labels]
    elif len(thresholds) == len(SHORT_LEVELS) - 1:
        labels = SHORT_LEVELS
        # worst band of the short scale takes the "Very Poor" color
        colors = [LEVEL_COLORS["Good"], LEVEL_COLORS["Fair"], LEVEL_COLORS["Very Poor"]]
    else:
        raise ValueError(f"Unsupported number of thresholds: {thresholds}")
    return build_ladder(labels, colors, thresholds, upper_inclusive=False, nan_band=NEUTRAL_BAND)


POLLUTANT_LADDERS: Mapping[PollutantKind, BandLadder] = MappingProxyType(
    {PollutantKind(k): _ladder_for(thr) for k, thr in POLLUTANT_THRESHOLDS.items()}
)


def _as_float(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return math.nan
    return float(value)


def classify_pollutant(kind: Any, value: Any) -> CategoryBand:
    """Status band of one pollutant concentration (µg/m³).

    Scans the pollutant's thresholds in ascending order and returns the first
    band whose upper bound exceeds ``value``; anything at or above the last
    threshold is in the worst band. NaN, missing or non-numeric values and
    unknown pollutants map to the neutral band.
    """
    k = PollutantKind.parse(kind)
    if k is None or k not in POLLUTANT_LADDERS:
        return NEUTRAL_BAND
    return POLLUTANT_LADDERS[k].lookup(_as_float(value))


def classify_components(components: Mapping[str, Any]) -> Dict[PollutantKind, CategoryBand]:
    out = {}
    for key, value in components.items():
        k = PollutantKind.parse(key)
        if k is not None:
            out[k] = classify_pollutant(k, value)
    return out


def format_concentration(kind: Any, value: Any) -> str:
    k = PollutantKind.parse(kind)
    decimals = DISPLAY_DECIMALS.get(k.value, 0) if k is not None else 0
    v = _as_float(value)
    if math.isnan(v):
        return f"-- {DISPLAY_UNIT}"
    return f"{v:.{decimals}f} {DISPLAY_UNIT}"


def possible_smoke(components: Mapping[str, Any], provider_index: Optional[Any] = None) -> bool:
    """Heuristic wildfire/smoke flag based on the provider index, PM2.5 and CO."""
    values = {}
    for key, value in components.items():
        k = PollutantKind.parse(key)
        if k is not None:
            values[k] = _as_float(value)
    pm25 = values.get(PollutantKind.PM2_5, math.nan)
    co = values.get(PollutantKind.CO, math.nan)
    ordinal = _as_float(provider_index)
    # NaN comparisons are False, so missing values never raise the flag
    return ordinal >= SMOKE_PROVIDER_INDEX or pm25 >= SMOKE_PM25 or co >= SMOKE_CO
