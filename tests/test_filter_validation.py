"""Tests for tripview.utils.filter_validation."""

from datetime import date, datetime

import pandas as pd
import pytest

from tripview.utils.filter_params import CategoryFlags, FilterState, TripCount
from tripview.utils.filter_validation import (
    describe_active_filters,
    format_date_for_display,
    get_cleared_date_filters,
    get_cleared_filter_values,
    get_date_range_error_message,
    has_any_active_filters,
    has_both_date_filters,
    has_date_range_filter,
    is_valid_date,
    parse_date,
    to_date_series,
    validate_date_range,
)

ENABLED = CategoryFlags(trip_count_enabled=True)
DISABLED = CategoryFlags(trip_count_enabled=False)


class TestParseDate:
    def test_iso(self):
        assert parse_date("2024-02-01") == date(2024, 2, 1)

    def test_unpadded_matches_padded(self):
        assert parse_date("2024-2-1") == parse_date("2024-02-01")

    def test_surrounding_whitespace(self):
        assert parse_date("  2024-02-01 ") == date(2024, 2, 1)

    def test_datetime_truncated(self):
        assert parse_date(datetime(2024, 2, 1, 13, 45)) == date(2024, 2, 1)

    def test_date_passthrough(self):
        d = date(2024, 2, 1)
        assert parse_date(d) is d

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank(self, value):
        assert parse_date(value) is None

    @pytest.mark.parametrize("value", ["not-a-date", "2024-02-30", "garbage 12"])
    def test_garbage(self, value):
        assert parse_date(value) is None

    @pytest.mark.parametrize("value", ["now", "today", "tomorrow", "10:30", "March", "2024"])
    def test_clock_relative_and_partial_text(self, value):
        assert parse_date(value) is None

    def test_slashed_year_first(self):
        assert parse_date("2024/02/01") == date(2024, 2, 1)

    def test_iso_timestamp(self):
        assert parse_date("2024-02-01T23:15:00+00:00") == date(2024, 2, 1)


class TestToDateSeries:
    def test_strings(self):
        out = to_date_series(pd.Series(["2024-02-01", "2024-2-3", "2024-02-05 13:45"]))
        assert out.tolist() == [
            pd.Timestamp("2024-02-01"),
            pd.Timestamp("2024-02-03"),
            pd.Timestamp("2024-02-05"),
        ]

    def test_unparseable_become_nat(self):
        out = to_date_series(pd.Series(["now", "10:30", None, "garbage", "2024-01-01"]))
        assert out.isna().tolist() == [True, True, True, True, False]

    def test_timezone_dropped_keeps_wall_clock_day(self):
        aware = pd.Series(pd.to_datetime(["2024-03-01 23:30", "2024-03-02 00:15"])).dt.tz_localize(
            "America/New_York"
        )
        out = to_date_series(aware)
        assert out.dt.tz is None
        assert out.tolist() == [pd.Timestamp("2024-03-01"), pd.Timestamp("2024-03-02")]


class TestIsValidDate:
    @pytest.mark.parametrize("value", [None, "", "  "])
    def test_empty_is_valid(self, value):
        assert is_valid_date(value) is True

    def test_valid(self):
        assert is_valid_date("2024-01-01") is True

    def test_invalid(self):
        assert is_valid_date("not-a-date") is False

    @pytest.mark.parametrize("value", ["now", "today", "10:30", "March"])
    def test_clock_relative_text_is_invalid(self, value):
        assert is_valid_date(value) is False


class TestValidateDateRange:
    def test_start_empty(self):
        assert validate_date_range("", "2024-01-01") is True

    def test_end_empty(self):
        assert validate_date_range("2024-01-01", "") is True

    def test_both_empty(self):
        assert validate_date_range(None, None) is True

    def test_backwards(self):
        assert validate_date_range("2024-05-01", "2024-01-01") is False

    def test_malformed_start(self):
        assert validate_date_range("not-a-date", "2024-01-01") is False

    def test_malformed_end(self):
        assert validate_date_range("2024-01-01", "nope") is False

    def test_same_day(self):
        assert validate_date_range("2024-01-01", "2024-01-01") is True

    def test_calendar_not_string_comparison(self):
        # "2024-10-01" < "2024-9-30" as strings
        assert validate_date_range("2024-9-30", "2024-10-01") is True

    def test_accepts_date_objects(self):
        assert validate_date_range(date(2024, 1, 2), date(2024, 1, 1)) is False

    def test_clock_relative_bound(self):
        assert validate_date_range("today", "2099-01-01") is False
        assert get_date_range_error_message("today", "2099-01-01") == "Start date is invalid"


class TestErrorMessage:
    def test_incomplete_range(self):
        assert get_date_range_error_message("2024-01-01", "") is None

    def test_invalid_start(self):
        assert get_date_range_error_message("x", "2024-01-01") == "Start date is invalid"

    def test_invalid_end(self):
        assert get_date_range_error_message("2024-01-01", "x") == "End date is invalid"

    def test_backwards(self):
        assert (
            get_date_range_error_message("2024-05-01", "2024-01-01")
            == "Start date must be before or equal to end date"
        )

    def test_valid(self):
        assert get_date_range_error_message("2024-01-01", "2024-05-01") is None


class TestHasAnyActiveFilters:
    def test_nothing_set(self):
        assert has_any_active_filters(FilterState(), ENABLED) is False

    def test_specific_date(self):
        assert has_any_active_filters(FilterState.from_raw(selected_date="2024-01-01")) is True

    def test_blank_strings_are_unset(self):
        state = FilterState(specific_date="  ", range_start="", zone=" ")
        assert has_any_active_filters(state, ENABLED) is False

    def test_lone_start_counts(self):
        assert has_any_active_filters(FilterState.from_raw(start_date="2024-01-01")) is True

    def test_lone_end_counts(self):
        assert has_any_active_filters(FilterState.from_raw(end_date="2024-01-01")) is True

    def test_invalid_date_still_counts(self):
        assert has_any_active_filters(FilterState.from_raw(selected_date="garbage")) is True

    def test_zone(self):
        assert has_any_active_filters(FilterState(zone="Z1")) is True

    def test_trip_count_enabled(self):
        assert has_any_active_filters(FilterState(trip_count=TripCount.ONE), ENABLED) is True

    def test_trip_count_disabled_is_ignored(self):
        assert has_any_active_filters(FilterState(trip_count=TripCount.ONE), DISABLED) is False

    def test_trip_count_without_flags_is_ignored(self):
        assert has_any_active_filters(FilterState(trip_count=TripCount.TWO)) is False

    def test_trip_count_all_is_default(self):
        assert has_any_active_filters(FilterState(trip_count=TripCount.ALL), ENABLED) is False


class TestDateFilterPresence:
    def test_range_either_bound(self):
        assert has_date_range_filter("", "2024-01-01") is True
        assert has_date_range_filter("2024-01-01", None) is True
        assert has_date_range_filter("", " ") is False

    def test_both(self):
        state = FilterState.from_raw(selected_date="2024-01-01", end_date="2024-02-01")
        assert has_both_date_filters(state) is True

    def test_specific_only(self):
        assert has_both_date_filters(FilterState.from_raw(selected_date="2024-01-01")) is False

    def test_range_only(self):
        state = FilterState.from_raw(start_date="2024-01-01", end_date="2024-02-01")
        assert has_both_date_filters(state) is False


class TestClearedValues:
    def test_all(self):
        assert get_cleared_filter_values() == {
            "selected_date": "",
            "start_date": "",
            "end_date": "",
            "zone": "",
            "trip_count": "all",
        }

    def test_dates_only(self):
        assert get_cleared_date_filters() == {"selected_date": "", "start_date": "", "end_date": ""}

    def test_cleared_values_are_inactive(self):
        state = FilterState.from_raw(**get_cleared_filter_values())
        assert has_any_active_filters(state, ENABLED) is False


class TestDisplay:
    def test_format(self):
        assert format_date_for_display("2024-02-01") == "02/01/2024"

    def test_placeholder(self):
        assert format_date_for_display("") == "..."
        assert format_date_for_display("bogus") == "..."

    def test_tags_in_order(self):
        state = FilterState.from_raw(
            selected_date="2024-01-01",
            start_date="2024-03-01",
            zone="Z1",
            trip_count="2",
        )
        tags = describe_active_filters(state, ENABLED)
        assert [t["kind"] for t in tags] == [
            "specific_date",
            "date_range",
            "zone",
            "trip_count",
            "or_logic",
        ]
        assert tags[1]["label"] == "Range: 03/01/2024 - ..."
        assert tags[3]["label"] == "Trips: 2 Trips Only"

    def test_no_tags_when_inactive(self):
        assert describe_active_filters(FilterState(trip_count=TripCount.ONE), DISABLED) == []
