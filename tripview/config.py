"""Application configuration objects."""

import os
import sys
from pathlib import Path

from dotenv import load_dotenv

if getattr(sys, "frozen", False):
    load_dotenv(os.path.join(sys._MEIPASS, ".env"))
else:
    load_dotenv()


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Base configuration for the trip report dashboard."""

    # -------------------------
    # Data paths
    # -------------------------
    # DuckDB database file
    DUCKDB_PATH = Path(os.getenv("TRIPVIEW_DUCKDB_PATH", "data/warehouse.duckdb"))

    # Location of incoming CSVs (from client uploads)
    CSV_GLOB = os.getenv("TRIPVIEW_CSV_GLOB", "data/*.csv")
    DATE_FMT = os.getenv("TRIPVIEW_DATE_FMT", "%Y-%m-%d")

    # -------------------------
    # Data schema
    # -------------------------
    DATE_COL = os.getenv("TRIPVIEW_DATE_COL", "date")
    ZONE_COL = os.getenv("TRIPVIEW_ZONE_COL", "zone")
    TRIPS_COL = os.getenv("TRIPVIEW_TRIPS_COL", "trips")

    # -------------------------
    # External services
    # -------------------------
    BUCKET_URL = os.getenv("BUCKET_URL")
    SUPABASE_KEY = os.getenv("SUPABASE_KEY")

    # -------------------------
    # UI filters
    # -------------------------
    # Trip count category is only offered on some report views
    SHOW_TRIP_COUNT_FILTER = _env_flag("TRIPVIEW_SHOW_TRIP_COUNT_FILTER")

    ZONES_MAX_OPTIONS = int(os.getenv("TRIPVIEW_ZONES_MAX_OPTIONS", "20"))


__all__ = ["Config"]
