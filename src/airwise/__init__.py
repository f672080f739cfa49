"""airwise — air quality indices and categories from raw pollutant readings.

Main entrypoints:
- :func:`airwise.aqi.compute_overall_index` (EPA index from concentrations)
- :func:`airwise.classifier.classify_pollutant` (per-pollutant status)
- :func:`airwise.bands.categorize_provider_index` (provider 1-5 scale)
- :func:`airwise.bands.exercise_safety` (outdoor exercise advice)
- :func:`airwise.bands.aggregate_reported_indices` (provider per-parameter indices)
"""

from .aqi import AqiCalculator, ComputedIndex, SubIndex, compute_overall_index, compute_sub_index
from .bands import (
    CategoryBand,
    ExerciseAdvice,
    ReportedIndex,
    aggregate_reported_indices,
    categorize_index,
    categorize_provider_index,
    exercise_safety,
    health_recommendation,
)
from .classifier import classify_components, classify_pollutant, possible_smoke
from .errors import BreakpointTableExhausted, InvalidOrdinal, InvalidReading
from .readings import PollutantKind, PollutantReading
from .summary import AirQualitySummary, summarize

__all__ = [
    "AqiCalculator",
    "ComputedIndex",
    "SubIndex",
    "compute_overall_index",
    "compute_sub_index",
    "CategoryBand",
    "categorize_index",
    "categorize_provider_index",
    "health_recommendation",
    "ExerciseAdvice",
    "exercise_safety",
    "ReportedIndex",
    "aggregate_reported_indices",
    "classify_components",
    "classify_pollutant",
    "possible_smoke",
    "BreakpointTableExhausted",
    "InvalidOrdinal",
    "InvalidReading",
    "PollutantKind",
    "PollutantReading",
    "AirQualitySummary",
    "summarize",
]
