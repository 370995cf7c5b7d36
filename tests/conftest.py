"""Shared fixtures: a small car CSV and an isolated data directory."""

import os
import tempfile

# Keep session logs out of the user's home directory. Must run before
# explorer.logging is imported, since it resolves LOG_DIR at import time.
os.environ.setdefault("CAR_EXPLORER_DIR", tempfile.mkdtemp(prefix="car-explorer-tests-"))

import pytest

CSV_HEADER = (
    "Name,Type,Retail Price,Dealer Cost,Horsepower(HP),Engine Size (l),"
    "City Miles Per Gallon,Highway Miles Per Gallon"
)

CSV_ROWS = [
    "Alpha,Sedan,20000,18000,150,2.0,25,33",
    "Bravo,Truck,50000,45000,300,5.0,15,20",
    "Charlie,Sedan,35000,31000,220,3.0,,28",
]


def write_csv(path, rows=None, header=CSV_HEADER):
    lines = [header] + list(CSV_ROWS if rows is None else rows)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def make_csv(tmp_path):
    """Factory: make_csv(rows, header=..., name=...) -> path."""
    def _make(rows=None, header=CSV_HEADER, name="custom.csv"):
        return write_csv(tmp_path / name, rows, header)
    return _make


@pytest.fixture
def cars_csv(tmp_path):
    """Three cars: two Sedans and a Truck; Charlie has no city MPG."""
    return write_csv(tmp_path / "cars.csv")
