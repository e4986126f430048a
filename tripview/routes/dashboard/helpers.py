"""Shared helper functions for dashboard routes."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from flask import current_app

from tripview.utils.filter_params import CategoryFlags, FilterState, TripCount
from tripview.utils.filter_validation import (
    describe_active_filters,
    get_date_range_error_message,
    has_any_active_filters,
    has_both_date_filters,
    validate_date_range,
)

logger = logging.getLogger("tripview")

FILTER_FIELDS = ("selected_date", "start_date", "end_date", "zone", "trip_count")


def _truthy(value: Any) -> bool:
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def raw_filter_values(source: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Pull the filter fields out of request args or a JSON body."""
    source = source or {}
    values: Dict[str, str] = {}
    for key in FILTER_FIELDS:
        # JSON bodies may carry numbers; 0 is a real selector
        value = source.get(key)
        values[key] = "" if value is None else str(value)
    if not values["trip_count"].strip():
        values["trip_count"] = TripCount.ALL.value
    return values


def build_flags(source: Optional[Mapping[str, Any]] = None) -> CategoryFlags:
    """Category flags from config, optionally overridden per request."""
    enabled = bool(current_app.config.get("SHOW_TRIP_COUNT_FILTER", False))
    if source and "show_trip_count" in source:
        enabled = _truthy(source.get("show_trip_count"))
    return CategoryFlags(trip_count_enabled=enabled)


def build_state(source: Optional[Mapping[str, Any]]) -> FilterState:
    values = raw_filter_values(source)

    trip_count = values["trip_count"]
    if TripCount.parse(trip_count) is None:
        logger.warning("Unknown trip_count selector %r; using 'all'", trip_count)
        trip_count = TripCount.ALL

    return FilterState.from_raw(
        selected_date=values["selected_date"],
        start_date=values["start_date"],
        end_date=values["end_date"],
        zone=values["zone"],
        trip_count=trip_count,
    )


def filter_report(source: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Validation and activity signals for one set of raw filter values."""
    values = raw_filter_values(source)
    state = build_state(source)
    flags = build_flags(source)

    return {
        "range_valid": validate_date_range(values["start_date"], values["end_date"]),
        "range_error": get_date_range_error_message(values["start_date"], values["end_date"]),
        "has_active_filters": has_any_active_filters(state, flags),
        "or_logic": has_both_date_filters(state),
        "tags": describe_active_filters(state, flags),
    }


__all__ = [
    "FILTER_FIELDS",
    "build_flags",
    "build_state",
    "filter_report",
    "raw_filter_values",
]
