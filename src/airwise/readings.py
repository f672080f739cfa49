"""Pollutant kinds and validated concentration readings."""

from __future__ import annotations

import math
import numbers
from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .config import COMPONENT_ALIASES, EPA_POLLUTANT_KEYS
from .errors import InvalidReading


class PollutantKind(str, Enum):
    CO = "co"
    NO = "no"
    NO2 = "no2"
    O3 = "o3"
    SO2 = "so2"
    PM2_5 = "pm2_5"
    PM10 = "pm10"
    NH3 = "nh3"

    @classmethod
    def parse(cls, key: Any) -> Optional["PollutantKind"]:
        """Resolve a kind, a component key or an alias. Unknown keys give None."""
        if isinstance(key, cls):
            return key
        if not isinstance(key, str):
            return None
        k = key.strip().lower()
        k = COMPONENT_ALIASES.get(k, k)
        try:
            return cls(k)
        except ValueError:
            return None


EPA_POLLUTANTS: Tuple[PollutantKind, ...] = tuple(PollutantKind(k) for k in EPA_POLLUTANT_KEYS)


def canonical_key(key: Any) -> Optional[str]:
    kind = PollutantKind.parse(key)
    return None if kind is None else kind.value


def check_concentration(name: str, value: Any) -> Optional[str]:
    """Return why ``value`` is not a usable concentration, or None if it is."""
    if value is None:
        return f"{name} is missing"
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return f"{name} is not numeric ({value!r})"
    v = float(value)
    if math.isnan(v):
        return f"{name} is NaN"
    if math.isinf(v):
        return f"{name} is infinite"
    if v < 0:
        return f"{name} is negative ({v})"
    return None


@dataclass(frozen=True)
class PollutantReading:
    """One set of concentrations, all in µg/m³.

    Every field is validated on construction so that nothing downstream ever
    sees a NaN or a negative value.
    """

    co: float
    no: float
    no2: float
    o3: float
    so2: float
    pm2_5: float
    pm10: float
    nh3: float

    def __post_init__(self):
        problems: List[str] = []
        bad: List[str] = []
        for f in fields(self):
            reason = check_concentration(f.name, getattr(self, f.name))
            if reason is not None:
                problems.append(reason)
                bad.append(f.name)
            else:
                # normalise ints / numpy scalars to plain floats
                object.__setattr__(self, f.name, float(getattr(self, f.name)))
        if problems:
            raise InvalidReading("Invalid reading: " + "; ".join(problems), fields=bad)

    @classmethod
    def from_components(cls, components: Mapping[str, Any]) -> "PollutantReading":
        """Build a reading from an upstream ``components`` mapping.

        Keys may use aliases (``pm2.5``, ``ozone``, ...); unknown keys are ignored.
        """
        values: Dict[str, Any] = {}
        for key, value in components.items():
            k = canonical_key(key)
            if k is not None:
                values[k] = value
        missing = [f.name for f in fields(cls) if f.name not in values]
        if missing:
            raise InvalidReading(f"Missing pollutant(s): {missing}", fields=missing)
        return cls(**values)

    def get(self, kind: PollutantKind) -> float:
        return getattr(self, PollutantKind(kind).value)

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)
