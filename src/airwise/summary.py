"""One-stop evaluation of a provider response for display."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .aqi import ComputedIndex, compute_overall_index
from .bands import CategoryBand, ExerciseAdvice, categorize_provider_index, exercise_safety
from .classifier import classify_components, format_concentration, possible_smoke
from .errors import InvalidReading
from .readings import PollutantKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AirQualitySummary:
    provider: Optional[CategoryBand]
    epa: Optional[ComputedIndex]
    pollutants: Mapping[PollutantKind, CategoryBand] = field(default_factory=dict)
    formatted: Mapping[PollutantKind, str] = field(default_factory=dict)
    smoke: bool = False
    error: str = ""

    @property
    def recommendation(self) -> str:
        return self.epa.band.message if self.epa is not None else ""

    @property
    def exercise(self) -> Optional[ExerciseAdvice]:
        return exercise_safety(self.epa.value) if self.epa is not None else None

    def to_dict(self) -> Dict[str, Any]:
        epa = None
        if self.epa is not None:
            epa = {
                "aqi": self.epa.value,
                "dominant": self.epa.dominant.value,
                "sub_indices": {k.value: v for k, v in self.epa.by_pollutant().items()},
                **self.epa.band.to_dict(),
            }
        return {
            "provider": self.provider.to_dict() if self.provider is not None else None,
            "epa": epa,
            "pollutants": {
                k.value: {"label": b.label, "color": b.color, "value": self.formatted.get(k, "")}
                for k, b in self.pollutants.items()
            },
            "exercise": self.exercise.to_dict() if self.epa is not None else None,
            "smoke": self.smoke,
            "error": self.error,
        }


def summarize(components: Mapping[str, Any], provider_index: Optional[Any] = None) -> AirQualitySummary:
    """Evaluate a components mapping and an optional provider 1-5 index.

    Never raises on bad data: an invalid reading leaves ``epa`` empty and the
    reason in ``error``; everything else is still filled in.
    """
    provider = categorize_provider_index(provider_index) if provider_index is not None else None

    epa = None
    error = ""
    try:
        epa = compute_overall_index(components)
    except InvalidReading as e:
        logger.warning(f"EPA index unavailable: {e}")
        error = str(e)

    pollutants = classify_components(components)
    formatted = {}
    for key, value in components.items():
        kind = PollutantKind.parse(key)
        if kind is not None:
            formatted[kind] = format_concentration(kind, value)

    return AirQualitySummary(
        provider=provider,
        epa=epa,
        pollutants=pollutants,
        formatted=formatted,
        smoke=possible_smoke(components, provider_index),
        error=error,
    )
