"""Filter vocabulary shared by validation, evaluation and the routes.

The trip count selector and category flags are read by the engine; the
options, messages and UI bundle below are only passed through to the
presentation layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

TRIP_BUCKET_MAX = 3  # bucket 3 stands for "3 or more trips"


class TripCount(str, Enum):
    ALL = "all"
    ZERO = "0"
    ONE = "1"
    TWO = "2"

    @classmethod
    def parse(cls, value: Any) -> Optional["TripCount"]:
        """Map a raw selector value to a member; ``None`` if unrecognised."""
        if isinstance(value, cls):
            return value
        text = "" if value is None else str(value).strip().lower()
        if not text:
            return cls.ALL
        try:
            return cls(text)
        except ValueError:
            return None

    @property
    def bucket(self) -> Optional[int]:
        return None if self is TripCount.ALL else int(self.value)


@dataclass(frozen=True)
class CategoryFlags:
    # the trip count control is only shown on some views
    trip_count_enabled: bool = False


@dataclass(frozen=True)
class TripCountOption:
    value: str
    label: str


TRIP_COUNT_OPTIONS: Tuple[TripCountOption, ...] = (
    TripCountOption("all", "All (<3 trips)"),
    TripCountOption("0", "0 Trips Only"),
    TripCountOption("1", "1 Trip Only"),
    TripCountOption("2", "2 Trips Only"),
)

ERROR_MESSAGES: Mapping[str, str] = MappingProxyType(
    {
        "INVALID_DATE_RANGE": "Start date must be before or equal to end date",
        "INVALID_START_DATE": "Start date is invalid",
        "INVALID_END_DATE": "End date is invalid",
        "REQUIRED_FIELD": "This field is required",
        "INVALID_DATE_FORMAT": "Please enter a valid date",
    }
)


@dataclass(frozen=True)
class FilterDefaults:
    selected_date: str = ""
    start_date: str = ""
    end_date: str = ""
    zone: str = ""
    trip_count: str = "all"


@dataclass(frozen=True)
class FilterUIConfig:
    """Immutable bundle of everything the filter controls need to render."""

    max_visible_zones: int = 20
    date_display_format: str = "%m/%d/%Y"
    placeholder: str = "..."
    defaults: FilterDefaults = field(default_factory=FilterDefaults)
    trip_count_options: Tuple[TripCountOption, ...] = TRIP_COUNT_OPTIONS

    def to_dict(self) -> dict:
        return {
            "max_visible_zones": self.max_visible_zones,
            "date_display_format": self.date_display_format,
            "defaults": {
                "selected_date": self.defaults.selected_date,
                "start_date": self.defaults.start_date,
                "end_date": self.defaults.end_date,
                "zone": self.defaults.zone,
                "trip_count": self.defaults.trip_count,
            },
            "trip_count_options": [
                {"value": o.value, "label": o.label} for o in self.trip_count_options
            ],
            "error_messages": dict(ERROR_MESSAGES),
        }


DEFAULT_UI_CONFIG = FilterUIConfig()


__all__ = [
    "CategoryFlags",
    "TRIP_BUCKET_MAX",
    "TripCount",
    "DEFAULT_UI_CONFIG",
    "ERROR_MESSAGES",
    "FilterDefaults",
    "FilterUIConfig",
    "TRIP_COUNT_OPTIONS",
    "TripCountOption",
]
