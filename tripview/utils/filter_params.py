# filter_params.py
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, List, Optional, Tuple, Union

import pandas as pd

from tripview.utils.filter_constants import TRIP_BUCKET_MAX, CategoryFlags, TripCount
from tripview.utils.filter_validation import (
    is_blank,
    parse_date,
    to_date_series,
    validate_date_range,
)

# A filter date is either parsed already, a raw string that failed to parse
# (still "set", but it can never match), or unset.
DateInput = Union[date, str, None]


def quote_ident(col: str) -> str:
    return '"' + str(col).replace('"', '""') + '"'


def _boundary_date(value: Any) -> DateInput:
    if is_blank(value):
        return None
    parsed = parse_date(value)
    return parsed if parsed is not None else str(value).strip()


@dataclass(frozen=True)
class FilterState:
    specific_date: DateInput = None
    range_start: DateInput = None
    range_end: DateInput = None
    zone: Optional[str] = None
    trip_count: TripCount = TripCount.ALL

    @classmethod
    def from_raw(
        cls,
        selected_date: Any = "",
        start_date: Any = "",
        end_date: Any = "",
        zone: Any = "",
        trip_count: Any = TripCount.ALL,
    ) -> "FilterState":
        """Build a state from the strings the filter controls hold.

        Dates are parsed here, once. A value that does not parse is kept as
        its raw text so it still counts as set.
        """
        selector = TripCount.parse(trip_count)
        return cls(
            specific_date=_boundary_date(selected_date),
            range_start=_boundary_date(start_date),
            range_end=_boundary_date(end_date),
            zone=None if is_blank(zone) else str(zone),
            trip_count=selector if selector is not None else TripCount.ALL,
        )

    # -------- derived state --------
    @property
    def has_specific_date(self) -> bool:
        return not is_blank(self.specific_date)

    @property
    def has_complete_range(self) -> bool:
        # a lone bound is not a half-open range: it constrains nothing
        return not is_blank(self.range_start) and not is_blank(self.range_end)

    @property
    def is_range_valid(self) -> bool:
        return validate_date_range(self.range_start, self.range_end)

    def trip_bucket(self, flags: Optional[CategoryFlags]) -> Optional[int]:
        """Bucket the view is restricted to, or ``None`` when unconstrained."""
        if flags is None or not flags.trip_count_enabled:
            return None
        selector = TripCount.parse(self.trip_count)
        return selector.bucket if selector is not None else None

    # -------- pandas path --------
    def apply(
        self,
        df: pd.DataFrame,
        date_col: str,
        zone_col: str,
        trips_col: str,
        flags: Optional[CategoryFlags] = None,
    ) -> pd.DataFrame:
        """
        Return the rows of ``df`` this state includes, in their original order.

        (specific date OR date range) AND zone AND trip count, evaluated
        column-wise. Same verdicts as ``should_include_row`` row by row.
        """
        mask = pd.Series(True, index=df.index)

        if self.has_specific_date or self.has_complete_range:
            row_dates = self._date_series(df, date_col)
            date_mask = pd.Series(False, index=df.index)

            if self.has_specific_date:
                specific = parse_date(self.specific_date)
                if specific is not None:
                    date_mask |= row_dates == pd.Timestamp(specific)

            if self.has_complete_range:
                start = parse_date(self.range_start)
                end = parse_date(self.range_end)
                if start is not None and end is not None:
                    date_mask |= (row_dates >= pd.Timestamp(start)) & (
                        row_dates <= pd.Timestamp(end)
                    )

            mask &= date_mask

        if not is_blank(self.zone):
            if zone_col in df.columns:
                zones = df[zone_col]
                mask &= zones.notna() & (zones.astype(str) == self.zone)
            else:
                mask &= False

        bucket = self.trip_bucket(flags)
        if bucket is not None:
            if trips_col in df.columns:
                trips = pd.to_numeric(df[trips_col], errors="coerce")
                mask &= trips.clip(lower=0, upper=TRIP_BUCKET_MAX) // 1 == bucket
            else:
                mask &= False

        return df[mask]

    @staticmethod
    def _date_series(df: pd.DataFrame, date_col: str) -> pd.Series:
        if date_col not in df.columns:
            return pd.Series(pd.NaT, index=df.index, dtype="datetime64[ns]")
        return to_date_series(df[date_col])

    # -------- SQL helpers --------
    def to_sql_where(
        self,
        date_col: str,
        zone_col: str,
        trips_col: str,
        flags: Optional[CategoryFlags] = None,
        available_columns: Optional[Iterable[str]] = None,
    ) -> Tuple[str, List[Any]]:
        """
        Build a safe SQL WHERE clause and its parameters (DuckDB compatible).

        The date category becomes one parenthesised OR group; categories are
        joined with AND. A criterion that cannot match (unparseable filter
        value, missing column) becomes FALSE rather than being dropped.
        """
        where: List[str] = []
        params: List[Any] = []
        cols = set(available_columns) if available_columns is not None else None

        def has(col: str) -> bool:
            return cols is None or col in cols

        if self.has_specific_date or self.has_complete_range:
            date_terms: List[str] = []
            day = f"TRY_CAST({quote_ident(date_col)} AS DATE)"

            if self.has_specific_date:
                specific = parse_date(self.specific_date)
                if specific is not None and has(date_col):
                    date_terms.append(f"{day} = CAST(? AS DATE)")
                    params.append(specific.isoformat())
                else:
                    date_terms.append("FALSE")

            if self.has_complete_range:
                start = parse_date(self.range_start)
                end = parse_date(self.range_end)
                if start is not None and end is not None and has(date_col):
                    date_terms.append(f"{day} BETWEEN CAST(? AS DATE) AND CAST(? AS DATE)")
                    params.extend([start.isoformat(), end.isoformat()])
                else:
                    date_terms.append("FALSE")

            where.append("(" + " OR ".join(date_terms) + ")")

        if not is_blank(self.zone):
            if has(zone_col):
                where.append(f"CAST({quote_ident(zone_col)} AS VARCHAR) = ?")
                params.append(self.zone)
            else:
                where.append("FALSE")

        bucket = self.trip_bucket(flags)
        if bucket is not None:
            if has(trips_col):
                trips = f"TRY_CAST({quote_ident(trips_col)} AS DOUBLE)"
                where.append(
                    f"({trips} IS NOT NULL AND "
                    f"FLOOR(LEAST(GREATEST({trips}, 0), {TRIP_BUCKET_MAX})) = ?)"
                )
                params.append(bucket)
            else:
                where.append("FALSE")

        clause = " AND ".join(where) if where else "1=1"
        return clause, params


__all__ = [
    "CategoryFlags",
    "DateInput",
    "FilterState",
    "TRIP_BUCKET_MAX",
    "TripCount",
    "quote_ident",
]
