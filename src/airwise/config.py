"""Project configuration.

Edit this file to customize:
- EPA breakpoint tables and unit conversions per pollutant
- per-pollutant display thresholds (Good/Fair/Moderate/Poor/Very Poor)
- category labels, colors and health messages
- smoke heuristic thresholds
- outdoor exercise advice per safety level
- logging defaults
"""

from __future__ import annotations

import os
from typing import Dict, Optional, Tuple

# -----------------------------
# Pollutants
# -----------------------------
# Component keys as delivered by the upstream provider (µg/m³).

COMPONENT_KEYS: Tuple[str, ...] = ("co", "no", "no2", "o3", "so2", "pm2_5", "pm10", "nh3")

# Pollutants taking part in the EPA index, in evaluation order.
# The first pollutant reaching the overall index is reported as dominant.
EPA_POLLUTANT_KEYS: Tuple[str, ...] = ("pm2_5", "pm10", "o3", "no2", "so2", "co")

# Alternative spellings accepted on input (lower-cased before lookup)
COMPONENT_ALIASES: Dict[str, str] = {
    "pm25": "pm2_5",
    "pm2.5": "pm2_5",
    "pm2_5": "pm2_5",
    "ozone": "o3",
    "carbon_monoxide": "co",
    "nitrogen_monoxide": "no",
    "nitric_oxide": "no",
    "nitrogen_dioxide": "no2",
    "sulphur_dioxide": "so2",
    "sulfur_dioxide": "so2",
    "ammonia": "nh3",
}

# -----------------------------
# EPA breakpoints
# -----------------------------
# Concentration breakpoints are given in the unit the table is looked up in,
# i.e. *after* the conversion below.

EPA_INDEX_BREAKPOINTS: Tuple[int, ...] = (0, 50, 100, 150, 200, 300, 400, 500)

EPA_BREAKPOINTS: Dict[str, Tuple[float, ...]] = {
    "pm2_5": (0, 12.0, 35.4, 55.4, 150.4, 250.4, 350.4, 500.4),
    "pm10": (0, 54, 154, 254, 354, 424, 504, 604),
    "o3": (0, 54, 70, 85, 105, 200, 300, 400),
    "no2": (0, 53, 100, 360, 649, 1249, 1649, 2049),
    "so2": (0, 35, 75, 185, 304, 604, 804, 1004),
    "co": (0, 4.4, 9.4, 12.4, 15.4, 30.4, 40.4, 50.4),
}

# (divisor, unit looked up in)
EPA_UNIT_CONVERSIONS: Dict[str, Tuple[float, str]] = {
    "pm2_5": (1.0, "µg/m³"),
    "pm10": (1.0, "µg/m³"),
    "o3": (2.0, "ppb"),     # µg/m³ -> ppb approximation, i.e. x 0.5
    "no2": (1.0, "µg/m³"),
    "so2": (1.0, "µg/m³"),
    "co": (1000.0, "ppm"),  # µg/m³ -> ppm
}

# -----------------------------
# EPA categories
# -----------------------------
# (upper bound inclusive, label, color, status code)
EPA_CATEGORIES: Tuple[Tuple[Optional[float], str, str, str], ...] = (
    (50, "Good", "#00E400", "good"),
    (100, "Moderate", "#FFFF00", "moderate"),
    (150, "Unhealthy for Sensitive Groups", "#FF7E00", "unhealthy_sensitive"),
    (200, "Unhealthy", "#FF0000", "unhealthy"),
    (300, "Very Unhealthy", "#8F3F97", "very_unhealthy"),
    (None, "Hazardous", "#7E0023", "hazardous"),
)

HEALTH_MESSAGES: Dict[str, str] = {
    "good": "Air quality is good. Perfect day for outdoor activities!",
    "moderate": "Air quality is acceptable. Sensitive individuals should limit prolonged outdoor exertion.",
    "unhealthy_sensitive": (
        "Unhealthy for sensitive groups. People with heart/lung disease, older adults, "
        "and children should reduce outdoor activities."
    ),
    "unhealthy": "Unhealthy air quality. Everyone should limit outdoor activities. Consider indoor exercise instead.",
    "very_unhealthy": "Very unhealthy air. Avoid all outdoor activities. Stay indoors with windows closed.",
    "hazardous": (
        "Hazardous air quality! Remain indoors and avoid all outdoor activities. "
        "Seek medical attention if experiencing symptoms."
    ),
}

# -----------------------------
# Provider scale / per-pollutant display levels
# -----------------------------

LEVEL_COLORS: Dict[str, str] = {
    "Good": "#2ECC71",
    "Fair": "#F1C40F",
    "Moderate": "#F39C12",
    "Poor": "#E67E22",
    "Very Poor": "#E74C3C",
}

NEUTRAL_COLOR: str = "#9E9E9E"

LEVELS: Tuple[str, ...] = ("Good", "Fair", "Moderate", "Poor", "Very Poor")
SHORT_LEVELS: Tuple[str, ...] = ("Good", "Fair", "Poor")

# Upper bounds (exclusive) of every band but the last.
# Informal scale, not derived from a regulatory standard.
POLLUTANT_THRESHOLDS: Dict[str, Tuple[float, ...]] = {
    "so2": (20, 80, 250, 350),
    "no2": (40, 70, 150, 200),
    "pm10": (20, 50, 100, 200),
    "pm2_5": (10, 25, 50, 75),
    "o3": (60, 100, 140, 180),
    "co": (4400, 9400, 12400, 15400),
    # these two do not take part in any index
    "nh3": (50, 100),
    "no": (25, 50),
}

# -----------------------------
# Smoke heuristic
# -----------------------------

SMOKE_PROVIDER_INDEX: int = 4
SMOKE_PM25: float = 55.0    # µg/m³
SMOKE_CO: float = 9000.0    # µg/m³

# -----------------------------
# Outdoor exercise advice
# -----------------------------
# (upper bound inclusive, safety level); the last level is open-ended

EXERCISE_LEVELS: Tuple[Tuple[Optional[float], str], ...] = (
    (50, "safe"),
    (100, "caution"),
    (None, "avoid"),
)

EXERCISE_ADVICE: Dict[str, Dict[str, object]] = {
    "safe": {
        "recommendation": (
            "Air quality is good (AQI {aqi}). Great conditions for outdoor running! "
            "The air is clean and safe for extended exercise."
        ),
        "duration": "30-60 minutes",
        "precautions": ("Stay hydrated", "Warm up properly"),
        "best_time": "Early morning (6-8 AM)",
        "alternatives": (),
    },
    "caution": {
        "recommendation": (
            "Moderate air quality (AQI {aqi}). Outdoor exercise is acceptable for most people, "
            "but sensitive individuals should consider reducing intensity."
        ),
        "duration": "20-40 minutes",
        "precautions": (
            "Reduce intensity if you feel uncomfortable",
            "Take breaks as needed",
            "Avoid heavy traffic areas",
        ),
        "best_time": "Early morning (6-8 AM)",
        "alternatives": (),
    },
    "avoid": {
        "recommendation": (
            "Poor air quality (AQI {aqi}). Outdoor exercise is not recommended. "
            "Consider indoor alternatives to protect your respiratory health."
        ),
        "duration": "0 minutes outdoor",
        "precautions": ("Stay indoors", "Use air purifier if available", "Postpone outdoor activities"),
        "best_time": "Not recommended today",
        "alternatives": ("Indoor treadmill", "Yoga", "Strength training", "Stationary bike"),
    },
}

# -----------------------------
# Provider-reported indices
# -----------------------------
# ParameterName values of per-parameter AQI observations (lower-cased)

REPORTED_PARAMETERS: Dict[str, str] = {
    "o3": "ozone",
    "ozone": "ozone",
    "pm2.5": "pm25",
    "pm25": "pm25",
    "pm10": "pm10",
}

# -----------------------------
# Display
# -----------------------------

DISPLAY_DECIMALS: Dict[str, int] = {"pm2_5": 1, "no2": 1}
DISPLAY_UNIT: str = "µg/m³"

# -----------------------------
# Logging
# -----------------------------

LOG_LEVEL: str = os.getenv("AIRWISE_LOG_LEVEL", "INFO")
LOG_FORMAT: str = "%(asctime)s %(levelname)s [%(name)s:%(module)s:%(lineno)d] %(message)s"
LOG_DATE_FORMAT: str = "%Y-%m-%dT%H:%M:%S%z"
