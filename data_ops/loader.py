"""
CSV loader: reads the car table into a Dataset.

Everything is read as text first so that only the configured numeric
columns are coerced; the rest of the row passes through untouched.
"""

import asyncio
import logging
from concurrent.futures import Executor
from pathlib import Path

import pandas as pd

from .dataset import Dataset, build_dataset

logger = logging.getLogger("car-explorer")


class LoadError(RuntimeError):
    """The data source could not be read or parsed."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"Failed to load '{source}': {reason}")
        self.source = source
        self.reason = reason


def read_table(source: str | Path) -> pd.DataFrame:
    """Read a delimited file with a header row, all cells as text.

    Raises:
        LoadError: If the file is missing, unreadable, empty or malformed.
    """
    try:
        df = pd.read_csv(
            source,
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
        )
    except FileNotFoundError as e:
        raise LoadError(str(source), "file not found") from e
    except pd.errors.EmptyDataError as e:
        raise LoadError(str(source), "file is empty") from e
    except (OSError, ValueError) as e:
        raise LoadError(str(source), f"{type(e).__name__}: {e}") from e

    if len(df.columns) == 0:
        raise LoadError(str(source), "no header row")

    df.columns = [str(c).strip() for c in df.columns]
    return df


def load_dataset(
    source: str | Path,
    numeric_attrs,
    color_attr: str,
) -> Dataset:
    """Load *source* and coerce *numeric_attrs* to float.

    Args:
        source: Path or URL of the CSV file.
        numeric_attrs: Column names to coerce (missing ones are ignored).
        color_attr: Categorical column used for colors and the legend.

    Returns:
        Dataset with records, first-seen categories and domains.

    Raises:
        LoadError: If the table cannot be read.
    """
    df = read_table(source)
    missing = [a for a in numeric_attrs if a not in df.columns]
    if missing:
        logger.warning(f"[Loader] Columns not found in {source}: {missing}")
    dataset = build_dataset(df, numeric_attrs, color_attr, source=str(source))
    logger.debug(f"[Loader] Read {len(dataset)} records from {source}")
    return dataset


async def load_dataset_async(
    source: str | Path,
    numeric_attrs,
    color_attr: str,
    executor: Executor | None = None,
) -> Dataset:
    """Run load_dataset() in an executor so the event loop stays responsive."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        executor, load_dataset, source, tuple(numeric_attrs), color_attr,
    )
