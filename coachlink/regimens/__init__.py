"""Regimens module - workout program data model and intensity utilities."""

from coachlink.regimens.intensity import (
    INTENSITY_WEIGHTS,
    IntensityProfile,
    calculate_intensity_profile,
    determine_overall_intensity,
    get_intensity_color,
    get_overall_intensity,
)
from coachlink.regimens.types import (
    Exercise,
    IntensityLevel,
    Regimen,
    RegimenDay,
    columns_to_days,
    days_to_columns,
)

__all__ = [
    "INTENSITY_WEIGHTS",
    "Exercise",
    "IntensityLevel",
    "IntensityProfile",
    "Regimen",
    "RegimenDay",
    "calculate_intensity_profile",
    "columns_to_days",
    "days_to_columns",
    "determine_overall_intensity",
    "get_intensity_color",
    "get_overall_intensity",
]
