"""Regimen (workout program) data model.

Server payloads use camelCase field names and may carry MongoDB `_id`
identifiers; both are accepted and normalized into the snake_case models
below.
"""

from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class IntensityLevel(StrEnum):
    """Standard intensity labels. Days may also carry custom labels."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    REST = "Rest"


STANDARD_INTENSITIES: tuple[str, ...] = tuple(level.value for level in IntensityLevel)


def _normalize_server_record(data: Any) -> Any:
    if not isinstance(data, dict):
        return data
    # Explicit nulls fall back to the field defaults
    record = {key: value for key, value in data.items() if value is not None}
    if not record.get("id") and record.get("_id"):
        record["id"] = str(record["_id"])
    return record


class _ServerModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def normalize_server_record(cls, data: Any) -> Any:
        return _normalize_server_record(data)


class Exercise(_ServerModel):
    id: str = ""
    name: str = ""
    sets: int = 0
    is_reps: bool = Field(default=True, alias="isReps")
    reps: int = 0
    duration: str = ""
    distance: str = ""  # e.g. "30m", "400m"
    rest_interval: str = Field(default="", alias="restInterval")
    notes: str = ""
    media_links: list[str] = Field(default_factory=list, alias="mediaLinks")
    per_side: bool = Field(default=False, alias="perSide")


class RegimenDay(_ServerModel):
    """One training day. Only `intensity` matters for aggregation."""

    id: str = ""
    date: str = ""
    name: str = ""
    intensity: str = IntensityLevel.REST.value
    exercises: list[Exercise] = Field(default_factory=list)


class Regimen(_ServerModel):
    id: str = ""
    name: str = ""
    description: str = ""
    start_date: str = Field(default="", alias="startDate")
    end_date: str = Field(default="", alias="endDate")
    days: list[RegimenDay] = Field(default_factory=list)
    created_at: str = Field(default="", alias="createdAt")
    updated_at: str = Field(default="", alias="updatedAt")
    category: str = ""
    sport: str | None = None  # comma-separated tags
    level: str | None = None  # Beginner, Intermediate, Advanced
    custom_intensities: list[str] = Field(default_factory=list, alias="customIntensities")


RegimenColumns = dict[str, list[RegimenDay]]


def days_to_columns(days: list[RegimenDay]) -> RegimenColumns:
    """Group days into one column per intensity label.

    The four standard columns are always present, even when empty. Custom
    labels get a column of their own, in order of first appearance.
    """
    columns: RegimenColumns = {label: [] for label in STANDARD_INTENSITIES}
    for day in days:
        columns.setdefault(day.intensity, []).append(day)
    return columns


def _date_sort_key(day: RegimenDay) -> tuple[int, float]:
    try:
        parsed = datetime.fromisoformat(day.date.replace("Z", "+00:00"))
    except ValueError:
        return (1, 0.0)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return (0, parsed.timestamp())


def columns_to_days(columns: RegimenColumns) -> list[RegimenDay]:
    """Flatten intensity columns back into one list ordered by date.

    Days with unparseable dates sort last; ties keep column order.
    """
    days = [day for column in columns.values() for day in column]
    days.sort(key=_date_sort_key)
    return days
