"""Validation helpers for the dashboard filter inputs.

All functions accept the raw values the filter controls produce (strings,
possibly blank) as well as already-parsed ``datetime.date`` objects. None of
them raise on malformed input; an unparseable value simply fails validation.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import pandas as pd

from tripview.utils.filter_constants import (
    DEFAULT_UI_CONFIG,
    ERROR_MESSAGES,
    CategoryFlags,
    TripCount,
)

if TYPE_CHECKING:  # pragma: no cover
    from tripview.utils.filter_params import FilterState

logger = logging.getLogger("tripview")

ISO_DATE_FMT = "%Y-%m-%d"

# year-month-day, optionally followed by a clock time; keywords such as "now"
# or a bare "10:30" would otherwise be resolved against the current clock
DATE_SHAPE = re.compile(r"^\d{4}[-/.]\d{1,2}[-/.]\d{1,2}(?:[T ]\d{1,2}:\d{2}.*)?$")


def is_blank(value: Any) -> bool:
    if value is None or value is pd.NaT:
        return True
    if isinstance(value, date):
        return False
    return str(value).strip() == ""


def parse_date(value: Any) -> Optional[date]:
    """Parse a filter or row value into a calendar date.

    ``YYYY-MM-DD`` is tried first; other year-first text goes through pandas,
    so ``"2024-2-1"`` and ``"2024-02-01"`` land on the same day. Returns
    ``None`` for blank, unparseable, or not date-shaped input.
    """
    if is_blank(value):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    try:
        return datetime.strptime(text, ISO_DATE_FMT).date()
    except ValueError:
        pass

    if not DATE_SHAPE.match(text):
        return None

    try:
        parsed = pd.to_datetime(text, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        logger.debug("Could not parse date value %r", value)
        return None
    if pd.isna(parsed):
        return None
    return parsed.date()


def to_date_series(values: pd.Series) -> pd.Series:
    """Column-wise ``parse_date``: naive midnight timestamps, ``NaT`` where it fails.

    Timezone-aware columns keep their wall-clock day and lose the zone, so
    they compare against plain filter dates.
    """
    if not pd.api.types.is_datetime64_any_dtype(values):
        shaped = values.astype(str).str.strip().str.match(DATE_SHAPE.pattern, na=False)
        try:
            converted = pd.to_datetime(values.where(shaped), errors="coerce", format="mixed")
        except (ValueError, TypeError, OverflowError):
            converted = None
        if converted is None or not pd.api.types.is_datetime64_any_dtype(converted):
            # mixed offsets in one column; fall back to row by row
            converted = pd.to_datetime(values.map(parse_date), errors="coerce")
        values = converted

    if getattr(values.dt, "tz", None) is not None:
        values = values.dt.tz_localize(None)
    return values.dt.normalize()


def is_valid_date(value: Any) -> bool:
    # Empty dates are valid: every date field is optional.
    if is_blank(value):
        return True
    return parse_date(value) is not None


def validate_date_range(start: Any, end: Any) -> bool:
    """True when the range is complete and ordered, or not complete yet.

    A half-filled range is not an error (the user may still be picking the
    other bound). A malformed bound or ``start > end`` is.
    """
    if is_blank(start) or is_blank(end):
        return True

    start_date = parse_date(start)
    end_date = parse_date(end)
    if start_date is None or end_date is None:
        return False
    return start_date <= end_date


def get_date_range_error_message(start: Any, end: Any) -> Optional[str]:
    if is_blank(start) or is_blank(end):
        return None
    if not is_valid_date(start):
        return ERROR_MESSAGES["INVALID_START_DATE"]
    if not is_valid_date(end):
        return ERROR_MESSAGES["INVALID_END_DATE"]
    if not validate_date_range(start, end):
        return ERROR_MESSAGES["INVALID_DATE_RANGE"]
    return None


def has_specific_date_filter(selected_date: Any) -> bool:
    return not is_blank(selected_date)


def has_date_range_filter(start: Any, end: Any) -> bool:
    # Either bound on its own counts as an active range filter.
    return not is_blank(start) or not is_blank(end)


def _trip_count_active(state: "FilterState", flags: Optional[CategoryFlags]) -> bool:
    if flags is None or not flags.trip_count_enabled:
        return False
    selector = TripCount.parse(state.trip_count)
    return selector is not None and selector is not TripCount.ALL


def has_any_active_filters(
    state: "FilterState",
    flags: Optional[CategoryFlags] = None,
) -> bool:
    """Return True if at least one filter field constrains the view.

    The trip count selector only counts when ``flags.trip_count_enabled`` is
    set; otherwise it is ignored whatever its value.
    """
    if has_specific_date_filter(state.specific_date):
        return True
    if has_date_range_filter(state.range_start, state.range_end):
        return True
    if not is_blank(state.zone):
        return True
    return _trip_count_active(state, flags)


def has_both_date_filters(state: "FilterState") -> bool:
    """Specific date and date range both set, i.e. OR logic is in play."""
    return has_specific_date_filter(state.specific_date) and has_date_range_filter(
        state.range_start, state.range_end
    )


def get_cleared_filter_values() -> Dict[str, str]:
    defaults = DEFAULT_UI_CONFIG.defaults
    return {
        "selected_date": defaults.selected_date,
        "start_date": defaults.start_date,
        "end_date": defaults.end_date,
        "zone": defaults.zone,
        "trip_count": defaults.trip_count,
    }


def get_cleared_date_filters() -> Dict[str, str]:
    defaults = DEFAULT_UI_CONFIG.defaults
    return {
        "selected_date": defaults.selected_date,
        "start_date": defaults.start_date,
        "end_date": defaults.end_date,
    }


def format_date_for_display(value: Any, fmt: Optional[str] = None) -> str:
    parsed = parse_date(value)
    if parsed is None:
        return DEFAULT_UI_CONFIG.placeholder
    return parsed.strftime(fmt or DEFAULT_UI_CONFIG.date_display_format)


def describe_active_filters(
    state: "FilterState",
    flags: Optional[CategoryFlags] = None,
) -> List[Dict[str, str]]:
    """Build the "currently applied filters" tags, in display order."""
    tags: List[Dict[str, str]] = []

    if has_specific_date_filter(state.specific_date):
        tags.append(
            {
                "kind": "specific_date",
                "label": f"Specific: {format_date_for_display(state.specific_date)}",
            }
        )

    if has_date_range_filter(state.range_start, state.range_end):
        start_label = format_date_for_display(state.range_start)
        end_label = format_date_for_display(state.range_end)
        tags.append({"kind": "date_range", "label": f"Range: {start_label} - {end_label}"})

    if not is_blank(state.zone):
        tags.append({"kind": "zone", "label": f"Zone: {state.zone}"})

    if _trip_count_active(state, flags):
        selector = TripCount.parse(state.trip_count)
        labels = {o.value: o.label for o in DEFAULT_UI_CONFIG.trip_count_options}
        tags.append({"kind": "trip_count", "label": f"Trips: {labels[selector.value]}"})

    if has_both_date_filters(state):
        tags.append({"kind": "or_logic", "label": "OR Logic Active"})

    return tags


__all__ = [
    "describe_active_filters",
    "format_date_for_display",
    "get_cleared_date_filters",
    "get_cleared_filter_values",
    "get_date_range_error_message",
    "has_any_active_filters",
    "has_both_date_filters",
    "has_date_range_filter",
    "has_specific_date_filter",
    "is_blank",
    "is_valid_date",
    "parse_date",
    "to_date_series",
    "validate_date_range",
]
