"""Row-level filter evaluation.

Decides whether a single trip report row belongs in the filtered view:

    (specific date OR date range) AND zone AND trip count

Every function here is pure: it reads its arguments, never mutates them and
never raises on malformed values. A value that cannot be parsed simply fails
to match.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional

import pandas as pd

from tripview.utils.filter_params import (
    TRIP_BUCKET_MAX,
    CategoryFlags,
    DateInput,
    FilterState,
    TripCount,
)
from tripview.utils.filter_validation import is_blank, parse_date


def trips_to_bucket(trips: Any) -> Optional[int]:
    """Clamp a trip count to 0, 1, 2 or 3 (meaning 3+)."""
    if is_blank(trips):
        return None
    try:
        count = int(float(trips))
    except (TypeError, ValueError, OverflowError):
        return None
    return max(0, min(count, TRIP_BUCKET_MAX))


@dataclass(frozen=True)
class TripRow:
    date: DateInput
    zone: Optional[str]
    trips: Any = None

    @property
    def trips_bucket(self) -> Optional[int]:
        return trips_to_bucket(self.trips)

    @classmethod
    def from_record(
        cls,
        record: Mapping[str, Any],
        date_col: str = "date",
        zone_col: str = "zone",
        trips_col: str = "trips",
    ) -> "TripRow":
        zone = record.get(zone_col)
        return cls(
            date=record.get(date_col),
            zone=None if zone is None or pd.isna(zone) else str(zone),
            trips=record.get(trips_col),
        )


def apply_date_filtering(
    row_date: Any,
    specific_date: DateInput,
    range_start: DateInput,
    range_end: DateInput,
) -> bool:
    has_specific = not is_blank(specific_date)
    # only a complete range constrains; a lone bound is ignored
    has_range = not is_blank(range_start) and not is_blank(range_end)
    if not has_specific and not has_range:
        return True

    day = parse_date(row_date)
    if day is None:
        return False

    specific_match = False
    if has_specific:
        specific_match = day == parse_date(specific_date)

    range_match = False
    if has_range:
        start = parse_date(range_start)
        end = parse_date(range_end)
        range_match = start is not None and end is not None and start <= day <= end

    return specific_match or range_match


def apply_zone_filtering(row_zone: Any, selected_zone: Optional[str]) -> bool:
    if is_blank(selected_zone):
        return True
    if row_zone is None:
        return False
    return str(row_zone) == selected_zone


def apply_trip_count_filtering(row: TripRow, selector: Any) -> bool:
    parsed = TripCount.parse(selector)
    if parsed is None or parsed is TripCount.ALL:
        return True
    return row.trips_bucket == parsed.bucket


def should_include_row(
    row: TripRow,
    state: FilterState,
    flags: Optional[CategoryFlags] = None,
) -> bool:
    if not apply_date_filtering(row.date, state.specific_date, state.range_start, state.range_end):
        return False
    if not apply_zone_filtering(row.zone, state.zone):
        return False
    if flags is not None and flags.trip_count_enabled:
        return apply_trip_count_filtering(row, state.trip_count)
    return True


def filter_rows(
    rows: Iterable[TripRow],
    state: FilterState,
    flags: Optional[CategoryFlags] = None,
) -> List[TripRow]:
    """Included rows, in the order they were given."""
    return [row for row in rows if should_include_row(row, state, flags)]


__all__ = [
    "TripRow",
    "apply_date_filtering",
    "apply_trip_count_filtering",
    "apply_zone_filtering",
    "filter_rows",
    "should_include_row",
    "trips_to_bucket",
]
