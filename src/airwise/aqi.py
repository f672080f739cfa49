"""EPA AQI computation by piecewise-linear breakpoint interpolation.

Each regulated pollutant gets a sub-index interpolated on its breakpoint
table; the overall index is the worst (highest) sub-index.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import numpy as np
import pandas as pd

from .bands import CategoryBand, categorize_index, categorize_provider_index
from .classifier import classify_pollutant
from .config import EPA_BREAKPOINTS, EPA_INDEX_BREAKPOINTS, EPA_UNIT_CONVERSIONS
from .errors import BreakpointTableExhausted, InvalidReading
from .preprocessing import ReadingPreprocessor
from .readings import EPA_POLLUTANTS, PollutantKind, PollutantReading, check_concentration
from .utils import round_half_up

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BreakpointTable:
    """Concentration breakpoints paired 1:1 with index breakpoints.

    ``divisor`` converts µg/m³ into the unit the table is expressed in.
    """

    pollutant: PollutantKind
    concentrations: Tuple[float, ...]
    indices: Tuple[int, ...]
    unit: str = "µg/m³"
    divisor: float = 1.0

    def __post_init__(self):
        if len(self.concentrations) != len(self.indices):
            raise ValueError(
                f"{self.pollutant.value}: {len(self.concentrations)} concentration breakpoints "
                f"for {len(self.indices)} index breakpoints"
            )
        if len(self.concentrations) < 2:
            raise ValueError(f"{self.pollutant.value}: at least two breakpoints are required")
        if any(hi <= lo for lo, hi in zip(self.concentrations, self.concentrations[1:])):
            raise ValueError(f"{self.pollutant.value}: breakpoints must be strictly increasing")

    def convert(self, value: float) -> float:
        return value / self.divisor

    def interval_for(self, value: float) -> Tuple[int, bool]:
        """Position of the first interval with ``lo <= value <= hi``.

        A value equal to an inner breakpoint therefore belongs to the lower
        interval. Above the last breakpoint the last interval is returned and
        the second item is True.
        """
        bp = self.concentrations
        for i in range(len(bp) - 1):
            if bp[i] <= value <= bp[i + 1]:
                return i, False
        if value > bp[-1]:
            return len(bp) - 2, True
        # only reachable for values below the first breakpoint
        return 0, False

    def interpolate(self, value: float) -> Tuple[float, bool]:
        i, exhausted = self.interval_for(value)
        bp_lo, bp_hi = self.concentrations[i], self.concentrations[i + 1]
        idx_lo, idx_hi = self.indices[i], self.indices[i + 1]
        raw = (idx_hi - idx_lo) / (bp_hi - bp_lo) * (value - bp_lo) + idx_lo
        return raw, exhausted


def _build_tables() -> Mapping[PollutantKind, BreakpointTable]:
    tables = {}
    for kind in EPA_POLLUTANTS:
        divisor, unit = EPA_UNIT_CONVERSIONS[kind.value]
        tables[kind] = BreakpointTable(
            pollutant=kind,
            concentrations=tuple(EPA_BREAKPOINTS[kind.value]),
            indices=tuple(EPA_INDEX_BREAKPOINTS),
            unit=unit,
            divisor=divisor,
        )
    return MappingProxyType(tables)


EPA_TABLES: Mapping[PollutantKind, BreakpointTable] = _build_tables()


@dataclass(frozen=True)
class SubIndex:
    pollutant: PollutantKind
    concentration: float  # in the table's unit
    raw: float
    value: int
    exhausted: bool = False


@dataclass(frozen=True)
class ComputedIndex:
    value: int
    band: CategoryBand
    dominant: PollutantKind
    sub_indices: Tuple[SubIndex, ...] = field(default=())

    @property
    def label(self) -> str:
        return self.band.label

    @property
    def color(self) -> str:
        return self.band.color

    @property
    def exhausted_pollutants(self) -> Tuple[PollutantKind, ...]:
        return tuple(s.pollutant for s in self.sub_indices if s.exhausted)

    def by_pollutant(self) -> Dict[PollutantKind, int]:
        return {s.pollutant: s.value for s in self.sub_indices}


def compute_sub_index(kind: Union[PollutantKind, str], concentration: float, warn: bool = True) -> SubIndex:
    """Sub-index of one pollutant from its raw µg/m³ concentration.

    ``kind`` may be a :class:`PollutantKind`, a component key or an alias
    (``"pm2.5"``). Raises ``ValueError`` for pollutants without a breakpoint
    table and :class:`~airwise.errors.InvalidReading` for NaN, negative or
    non-numeric input. With ``warn=False`` an extrapolated value is only
    logged.
    """
    parsed = PollutantKind.parse(kind)
    if parsed not in EPA_TABLES:
        supported = ", ".join(p.value for p in EPA_POLLUTANTS)
        raise ValueError(f"No EPA breakpoint table for {kind!r}; supported pollutants: {supported}")
    table = EPA_TABLES[parsed]
    reason = check_concentration(table.pollutant.value, concentration)
    if reason is not None:
        raise InvalidReading(reason, fields=[table.pollutant.value])
    value = table.convert(concentration)
    raw, exhausted = table.interpolate(value)
    if exhausted:
        logger.warning(
            f"{table.pollutant.value}={value} {table.unit} exceeds the last breakpoint "
            f"({table.concentrations[-1]}), extrapolating"
        )
        if warn:
            warnings.warn(
                f"{table.pollutant.value} concentration {value} {table.unit} above table maximum",
                BreakpointTableExhausted,
                stacklevel=2,
            )
    return SubIndex(
        pollutant=table.pollutant,
        concentration=value,
        raw=raw,
        value=round_half_up(raw),
        exhausted=exhausted,
    )


def compute_overall_index(reading: Union[PollutantReading, Mapping[str, Any]], warn: bool = True) -> ComputedIndex:
    """Overall EPA index: the maximum sub-index across the six regulated pollutants.

    Raises :class:`~airwise.errors.InvalidReading` when a concentration is
    missing, NaN or negative. Extrapolated sub-indices give a single
    :class:`~airwise.errors.BreakpointTableExhausted` warning for the reading.
    """
    if not isinstance(reading, PollutantReading):
        reading = PollutantReading.from_components(reading)

    subs = [compute_sub_index(kind, reading.get(kind), warn=False) for kind in EPA_POLLUTANTS]

    # first pollutant reaching the maximum wins ties
    worst = subs[0]
    for s in subs[1:]:
        if s.value > worst.value:
            worst = s

    result = ComputedIndex(
        value=worst.value,
        band=categorize_index(worst.value),
        dominant=worst.pollutant,
        sub_indices=tuple(subs),
    )
    if warn and result.exhausted_pollutants:
        names = ", ".join(p.value for p in result.exhausted_pollutants)
        warnings.warn(f"Concentrations above table maximum for: {names}", BreakpointTableExhausted, stacklevel=2)
    return result


@dataclass
class AqiCalculator:
    """Row-wise evaluation of a table of readings.

    Never drops rows: invalid readings are flagged in ``is_valid``/``reason``
    and get NaN index columns. Nothing is reported through :mod:`warnings`;
    extrapolations and bad provider ordinals go to the log.
    """

    preprocessor: ReadingPreprocessor = None
    provider_col: str = "aqi"

    def __post_init__(self):
        if self.preprocessor is None:
            self.preprocessor = ReadingPreprocessor()

    def _evaluate_row(self, row: pd.Series) -> Tuple[Any, ...]:
        components = {k: row.get(k) for k in self.preprocessor.pollutant_cols}
        components = {k: (None if pd.isna(v) else v) for k, v in components.items()}
        try:
            result = compute_overall_index(components, warn=False)
        except InvalidReading as e:
            logger.debug(f"Row {row.name!r} rejected: {e}")
            return np.nan, None, None, None, False, str(e)
        exhausted = ",".join(p.value for p in result.exhausted_pollutants)
        return result.value, result.label, result.dominant.value, exhausted, True, ""

    def compute(self, df: pd.DataFrame) -> pd.DataFrame:
        data = self.preprocessor.transform(df)
        out = pd.DataFrame(index=data.index)

        for p in self.preprocessor.pollutant_cols:
            if p in data.columns:
                out[f"{p} CLASS"] = data[p].apply(lambda v, p=p: classify_pollutant(p, v).label)

        if len(data):
            results = data.apply(self._evaluate_row, axis=1, result_type="expand")
            results.columns = ["epa aqi", "epa category", "dominant pollutant", "extrapolated", "is_valid", "reason"]
        else:
            results = pd.DataFrame(
                columns=["epa aqi", "epa category", "dominant pollutant", "extrapolated", "is_valid", "reason"],
                index=data.index,
            )
        out = out.join(results)
        out["epa aqi"] = out["epa aqi"].astype("Int64")
        out["is_valid"] = out["is_valid"].astype(bool)

        if self.provider_col in data.columns:
            # out-of-range ordinals are logged row by row, not warned
            out["provider category"] = data[self.provider_col].apply(
                lambda v: categorize_provider_index(_as_ordinal(v), warn=False).label
            )

        n_invalid = int((~out["is_valid"]).sum())
        if n_invalid:
            logger.info(f"{n_invalid} of {len(out)} readings rejected")
        return out


def _as_ordinal(value: Any) -> Optional[Any]:
    # CSV columns holding NaN come back as floats: 3.0 -> 3
    if isinstance(value, (float, np.floating)) and not np.isnan(value) and float(value).is_integer():
        return int(value)
    return value
