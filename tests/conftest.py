from datetime import date

import pandas as pd
import pytest

from tripview.app import create_app
from tripview.utils.filter_engine import TripRow


def sample_frame() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "idx": [0, 1, 2, 3, 4, 5],
            "date": ["2024-01-01", "2024-02-01", "2024-03-01", "2024-03-15", "2024-03-31", "2024-04-01"],
            "zone": ["Z1", "Z1", "Z2", "Z1", "Z2", "Z1"],
            "trips": [0, 1, 2, 5, 1, 3],
        }
    )


@pytest.fixture
def frame() -> pd.DataFrame:
    return sample_frame()


@pytest.fixture
def rows():
    return [
        TripRow(date(2024, 1, 1), "Z1", 0),
        TripRow(date(2024, 2, 1), "Z1", 1),
        TripRow(date(2024, 3, 1), "Z2", 2),
        TripRow(date(2024, 3, 15), "Z1", 5),
        TripRow(date(2024, 3, 31), "Z2", 1),
        TripRow(date(2024, 4, 1), "Z1", 3),
    ]


@pytest.fixture
def app(tmp_path):
    app = create_app(
        {
            "TESTING": True,
            "DUCKDB_PATH": tmp_path / "warehouse.duckdb",
            "CSV_GLOB": str(tmp_path / "incoming" / "*.csv"),
            "BUCKET_URL": None,
            "SHOW_TRIP_COUNT_FILTER": False,
            "ZONES_MAX_OPTIONS": 20,
        }
    )
    datastore = app.extensions["datastore"]
    datastore.set_df(sample_frame())
    yield app
    datastore.close()


@pytest.fixture
def client(app):
    return app.test_client()
