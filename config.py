"""
Settings for the car explorer.

Values come from two optional JSON files merged together: ``config.json``
next to this module, then ``~/.car-explorer/config.json`` on top. A ``.env``
file may set ``CAR_EXPLORER_CSV`` and ``CAR_EXPLORER_DIR``.
"""

import json
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

CONFIG_PATH = Path.home() / ".car-explorer" / "config.json"
_LOCAL_CONFIG_PATH = Path(__file__).resolve().parent / "config.json"
_user_config: dict = {}


def _load_config() -> dict:
    merged: dict = {}
    for path in (_LOCAL_CONFIG_PATH, CONFIG_PATH):
        if path is not None and path.exists():
            try:
                with open(path, "r", encoding="utf-8") as f:
                    merged.update(json.load(f))
            except (json.JSONDecodeError, OSError):
                # Unreadable file counts as absent
                pass
    return merged


def get(key: str, default=None):
    """Look up a setting; nested sections use dots, e.g. ``get("attributes.size")``.

    A missing key, or a path that runs into a non-dict, gives ``default``.
    """
    keys = key.split(".")
    val = _user_config
    for k in keys:
        if isinstance(val, dict):
            val = val.get(k)
        else:
            return default
    return val if val is not None else default


_user_config = _load_config()


# ---- Log directory ------------------------------------------------------------
# Session logs are written under <dir>/logs.

_data_dir: Optional[Path] = None


def get_data_dir() -> Path:
    """Directory that holds the session logs.

    ``CAR_EXPLORER_DIR`` wins over the ``data_dir`` setting, which wins over
    ``~/.car-explorer``. The answer is computed once per process.
    """
    global _data_dir
    if _data_dir is not None:
        return _data_dir
    env_val = os.environ.get("CAR_EXPLORER_DIR")
    if env_val:
        _data_dir = Path(env_val).expanduser().resolve()
    else:
        configured = get("data_dir")
        if configured:
            _data_dir = Path(configured).expanduser().resolve()
        else:
            _data_dir = Path.home() / ".car-explorer"
    return _data_dir


def _reset_data_dir() -> None:
    global _data_dir
    _data_dir = None


# ---- Dataset and chart config ---------------------------------------------------
# Column names must match the CSV header exactly. A name that does not match
# any column simply reads as missing for every record.
CSV_FILE = os.getenv("CAR_EXPLORER_CSV") or get("csv_file", "cars.csv")

X_ATTR = get("attributes.x", "Retail Price")
Y_ATTR = get("attributes.y", "Horsepower(HP)")
COLOR_ATTR = get("attributes.color", "Type")
SIZE_ATTR = get("attributes.size", "City Miles Per Gallon")
NAME_ATTR = get("attributes.name", "Name")
ENGINE_SIZE_ATTR = get("attributes.engine_size", "Engine Size (l)")

DETAIL_ATTRS = get("detail_attrs", [
    "Name",
    "Type",
    "Retail Price",
    "Horsepower(HP)",
    "Engine Size (l)",
    "City Miles Per Gallon",
    "Highway Miles Per Gallon",
])

STAR_ATTRS = get("star_attrs", [
    "Retail Price",
    "Dealer Cost",
    "Horsepower(HP)",
    "Engine Size (l)",
    "City Miles Per Gallon",
    "Highway Miles Per Gallon",
])

CHART_TITLE = get("chart.title", "Car models: Horsepower vs. Price")
