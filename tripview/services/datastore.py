"""Data access helpers for trip report rows."""

from __future__ import annotations

import glob
import logging
import os
from io import BytesIO
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import duckdb
import pandas as pd
import requests

from tripview.utils.filter_params import CategoryFlags, FilterState, quote_ident
from tripview.utils.filter_validation import to_date_series

logger = logging.getLogger("tripview")

TABLE = "prod.trips"


class DataStore:
    """Own data loading, preprocessing, and in-memory caching of trip reports.

    Storage backend: DuckDB (.duckdb file)
    - Source data: CSV files matched by Config.CSV_GLOB, an uploaded frame,
      or a remote parquet file at BUCKET_URL
    - Materialized table: prod.trips
    """

    def __init__(self, config: Mapping[str, Any]):
        self.config = config
        self._df: Optional[pd.DataFrame] = None
        self._con: Optional[duckdb.DuckDBPyConnection] = None

    @property
    def date_col(self) -> str:
        return self.config.get("DATE_COL", "date")

    @property
    def zone_col(self) -> str:
        return self.config.get("ZONE_COL", "zone")

    @property
    def trips_col(self) -> str:
        return self.config.get("TRIPS_COL", "trips")

    # ---------- DuckDB helpers ----------

    def _connect(self) -> duckdb.DuckDBPyConnection:
        if self._con is None:
            db_path = str(self.config.get("DUCKDB_PATH"))
            os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
            self._con = duckdb.connect(db_path)
        return self._con

    def close(self) -> None:
        if self._con is not None:
            self._con.close()
            self._con = None

    def _table_exists(self) -> bool:
        con = self._connect()
        try:
            return bool(
                con.execute(
                    "SELECT COUNT(*) FROM information_schema.tables "
                    "WHERE table_schema='prod' AND table_name='trips';"
                ).fetchone()[0]
            )
        except duckdb.Error:
            return False

    def rebuild_from_csv(self) -> None:
        """Full rebuild of prod.trips from CSVs matched by CSV_GLOB."""
        con = self._connect()
        csv_glob = self.config.get("CSV_GLOB", "data/*.csv")
        date_fmt = self.config.get("DATE_FMT", "%Y-%m-%d")
        date_col = quote_ident(self.date_col)

        files = glob.glob(csv_glob)
        if not files:
            logger.warning("No CSV files found for glob %s; prod.trips not built", csv_glob)
            return

        logger.info("Building prod.trips from %d CSV file(s): %s", len(files), csv_glob)
        con.execute("CREATE SCHEMA IF NOT EXISTS prod;")
        con.execute(f"DROP TABLE IF EXISTS {TABLE};")
        con.execute(
            f"""
            CREATE TABLE {TABLE} AS
            WITH raw AS (
              SELECT * FROM read_csv_auto('{csv_glob}', HEADER=TRUE, ALL_VARCHAR=TRUE)
            )
            SELECT
              CAST(try_strptime({date_col}, '{date_fmt}') AS DATE) AS {date_col},
              * EXCLUDE ({date_col})
            FROM raw;
            """
        )
        con.execute(f"ANALYZE {TABLE};")
        logger.info("DuckDB table prod.trips rebuilt and analyzed.")

        self._df = None

    def run_query(self, sql: str, params=None) -> pd.DataFrame:
        """Execute SQL on DuckDB and return as pandas DataFrame."""
        con = self._connect()
        return con.execute(sql, params or []).df()

    def query_filtered(
        self,
        state: FilterState,
        flags: Optional[CategoryFlags] = None,
        limit: Optional[int] = None,
    ) -> pd.DataFrame:
        """Filter prod.trips inside DuckDB with the same rules as the pandas path."""
        if not self._table_exists():
            return pd.DataFrame()

        columns = self.run_query(f"SELECT * FROM {TABLE} LIMIT 0;").columns
        clause, params = state.to_sql_where(
            date_col=self.date_col,
            zone_col=self.zone_col,
            trips_col=self.trips_col,
            flags=flags,
            available_columns=columns,
        )
        sql = f"SELECT * FROM {TABLE} WHERE {clause}"
        if limit is not None:
            sql += " LIMIT ?"
            params = params + [int(limit)]
        return self.run_query(sql + ";", params)

    # ---------- pandas side ----------

    def _preprocess(self, df: pd.DataFrame) -> pd.DataFrame:
        df = df.drop_duplicates().reset_index(drop=True)

        date_col = self.date_col
        if date_col in df.columns:
            df[date_col] = to_date_series(df[date_col])

        # zone codes are identifiers, never numbers
        zone_col = self.zone_col
        if zone_col in df.columns:
            df[zone_col] = df[zone_col].astype("string").str.strip()

        trips_col = self.trips_col
        if trips_col in df.columns:
            df[trips_col] = pd.to_numeric(df[trips_col], errors="coerce")

        return df

    def load(self) -> pd.DataFrame:
        if self._df is not None:
            return self._df

        if not self._table_exists():
            logger.info("DuckDB table prod.trips missing; attempting to build from CSV.")
            try:
                self.rebuild_from_csv()
            except duckdb.Error as e:
                logger.warning("Building prod.trips from CSV failed: %s", e)

        if self._table_exists():
            try:
                raw = self.run_query(f"SELECT * FROM {TABLE};")
                logger.info("Loaded data from local DuckDB prod.trips.")
                self._df = self._preprocess(raw)
                return self._df
            except duckdb.Error as e:
                logger.warning("DuckDB table load failed: %s", e)

        if self.fetch_remote(timeout=60):
            return self._df

        logger.error("No data source succeeded; serving an empty frame.")
        self._df = None
        return pd.DataFrame()

    def fetch_remote(self, timeout: int = 10) -> bool:
        url = self.config.get("BUCKET_URL")
        headers = {"apikey": self.config.get("SUPABASE_KEY")}
        if not url:
            logger.warning("No BUCKET_URL configured.")
            return False

        try:
            resp = requests.get(url, headers=headers, timeout=timeout)
            resp.raise_for_status()
            raw = pd.read_parquet(BytesIO(resp.content))
        except (requests.HTTPError, requests.ConnectionError, requests.Timeout) as e:
            logger.error("Failed to fetch remote file from BUCKET_URL: %s", e)
            return False

        logger.info("Loaded remote parquet from BUCKET_URL.")
        self.set_df(raw)
        return True

    def set_df(self, df: pd.DataFrame) -> None:
        self._df = self._preprocess(df)
        logger.info("DataStore loaded %d row(s) into memory.", len(self._df))

        con = self._connect()
        con.execute("CREATE SCHEMA IF NOT EXISTS prod;")
        con.execute(f"DROP TABLE IF EXISTS {TABLE};")
        date_col = quote_ident(self.date_col)
        con.register("tmp_df", self._df)
        try:
            if self.date_col in self._df.columns:
                con.execute(
                    f"""
                    CREATE TABLE {TABLE} AS
                    SELECT
                      CAST({date_col} AS DATE) AS {date_col},
                      * EXCLUDE ({date_col})
                    FROM tmp_df;
                    """
                )
            else:
                con.execute(f"CREATE TABLE {TABLE} AS SELECT * FROM tmp_df;")
        finally:
            con.unregister("tmp_df")
        con.execute(f"ANALYZE {TABLE};")
        logger.info("Persisted DataFrame into DuckDB prod.trips.")

    def get(self, copy: bool = True) -> pd.DataFrame:
        df = self.load()
        return df.copy(deep=False) if copy else df

    def reload(self) -> None:
        self._df = None
        logger.info("DataStore cache cleared")

    def filtered(self, state: FilterState, flags: Optional[CategoryFlags] = None) -> pd.DataFrame:
        return state.apply(
            self.get(copy=False),
            date_col=self.date_col,
            zone_col=self.zone_col,
            trips_col=self.trips_col,
            flags=flags,
        )

    def available_zones(self, df: Optional[pd.DataFrame] = None) -> List[str]:
        df = self.get(copy=False) if df is None else df
        if self.zone_col not in df.columns:
            return []
        return sorted(set(df[self.zone_col].dropna().astype(str).tolist()))

    def date_bounds(self, df: Optional[pd.DataFrame] = None) -> Tuple[str, str]:
        df = self.get(copy=False) if df is None else df
        if self.date_col not in df.columns or len(df) == 0:
            return "", ""
        dates = pd.to_datetime(df[self.date_col], errors="coerce")
        dmin, dmax = dates.min(), dates.max()
        start = dmin.date().isoformat() if pd.notna(dmin) else ""
        end = dmax.date().isoformat() if pd.notna(dmax) else ""
        return start, end

    def compute_summary(self, df: pd.DataFrame) -> Dict[str, Union[int, str, None]]:
        date_min, date_max = self.date_bounds(df)
        out: Dict[str, Union[int, str, None]] = {
            "rows": len(df),
            "cols": len(df.columns),
            "zones": (df[self.zone_col].nunique() if self.zone_col in df.columns else None),
            "trips": None,
            "date_min": date_min,
            "date_max": date_max,
        }
        if self.trips_col in df.columns:
            total = pd.to_numeric(df[self.trips_col], errors="coerce").sum()
            out["trips"] = int(total) if pd.notna(total) else 0
        return out


__all__ = ["DataStore", "TABLE"]
