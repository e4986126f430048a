"""Filter state, validation and row evaluation for the dashboard."""

from .filter_engine import (  # noqa: F401
    TripRow,
    apply_date_filtering,
    apply_trip_count_filtering,
    apply_zone_filtering,
    filter_rows,
    should_include_row,
)
from .filter_params import CategoryFlags, FilterState, TripCount  # noqa: F401
from .filter_validation import (  # noqa: F401
    has_any_active_filters,
    has_both_date_filters,
    is_valid_date,
    validate_date_range,
)
