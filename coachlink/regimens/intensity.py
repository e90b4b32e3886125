"""Intensity aggregation for regimen days.

Core invariant: get_overall_intensity is a pure function of the multiset of
day labels. Ordering never changes the score.
"""

import math
from collections import Counter
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, Field

from coachlink.regimens.types import IntensityLevel

# Numeric weight per standard label. Labels outside this table weigh 0.
INTENSITY_WEIGHTS: dict[str, int] = {
    IntensityLevel.EASY.value: 25,
    IntensityLevel.MEDIUM.value: 50,
    IntensityLevel.HARD.value: 75,
    IntensityLevel.REST.value: 0,
}

INTENSITY_COLORS: dict[str, str] = {
    "easy": "green",
    "medium": "yellow",
    "hard": "red",
    "rest": "blue",
}
DEFAULT_INTENSITY_COLOR = "gray"


def _intensity_of(day: Any) -> str | None:
    if isinstance(day, Mapping):
        value = day.get("intensity")
    else:
        value = getattr(day, "intensity", None)
    return value if isinstance(value, str) else None


def _round_half_up(value: float) -> int:
    # Inputs are never negative, so this matches JavaScript's Math.round.
    return math.floor(value + 0.5)


def get_overall_intensity(days: Iterable[Any] | None) -> int:
    """Average intensity of a sequence of days on a 0-100 scale.

    Args:
        days: Days exposing an `intensity` label (models or mappings)

    Returns:
        Rounded mean weight; 0 for a missing or empty sequence
    """
    if not days:
        return 0

    weights = [INTENSITY_WEIGHTS.get(_intensity_of(day) or "", 0) for day in days]
    if not weights:
        return 0
    return _round_half_up(sum(weights) / len(weights))


class IntensityProfile(BaseModel):
    """Day counts per intensity label.

    Labels are compared trimmed and case-insensitively; anything that is not
    a standard label is counted under `custom`.
    """

    easy: int = 0
    medium: int = 0
    hard: int = 0
    rest: int = 0
    custom: dict[str, int] = Field(default_factory=dict)

    @property
    def total(self) -> int:
        return self.easy + self.medium + self.hard + self.rest + sum(self.custom.values())


def calculate_intensity_profile(days: Iterable[Any] | None) -> IntensityProfile:
    """Count days per intensity label. Days without a label are skipped."""
    counts: Counter[str] = Counter()
    for day in days or []:
        label = _intensity_of(day)
        if not label:
            continue
        counts[label.strip().lower()] += 1

    standard = {"easy", "medium", "hard", "rest"}
    return IntensityProfile(
        easy=counts.get("easy", 0),
        medium=counts.get("medium", 0),
        hard=counts.get("hard", 0),
        rest=counts.get("rest", 0),
        custom={label: count for label, count in counts.items() if label not in standard},
    )


def determine_overall_intensity(profile: IntensityProfile) -> str:
    """Qualitative label for a profile.

    A label wins with at least half of all days, checked Hard, Medium, Easy,
    Rest in that order; then with at least a third, in the same order.
    Otherwise the largest share wins. An empty profile is "Unknown".
    """
    total = profile.total
    if total == 0:
        return "Unknown"

    shares = [
        (IntensityLevel.HARD.value, profile.hard / total),
        (IntensityLevel.MEDIUM.value, profile.medium / total),
        (IntensityLevel.EASY.value, profile.easy / total),
        (IntensityLevel.REST.value, profile.rest / total),
    ]

    for threshold in (0.5, 0.33):
        for label, share in shares:
            if share >= threshold:
                return label

    # max() keeps the first maximum, so ties resolve Hard > Medium > Easy > Rest
    return max(shares, key=lambda item: item[1])[0]


def get_intensity_color(intensity: str) -> str:
    """UI color name for an intensity label."""
    return INTENSITY_COLORS.get(intensity.strip().lower(), DEFAULT_INTENSITY_COLOR)
