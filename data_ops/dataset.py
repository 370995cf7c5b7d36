"""
In-memory car dataset.

Record wraps one CSV row (numeric fields already coerced to float).
Dataset holds the backing pandas DataFrame, the ordered records, the
first-seen category values and the per-attribute Domains computed once at
load time.
"""

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class Domain:
    """Observed (min, max) of one numeric attribute across the whole dataset.

    Both bounds are NaN when the attribute has no finite values. A domain
    with a non-finite bound is degenerate.
    """

    min: float
    max: float

    @property
    def is_degenerate(self) -> bool:
        """True if the domain cannot be used to normalize values."""
        if not (math.isfinite(self.min) and math.isfinite(self.max)):
            return True
        return self.min == self.max

    def normalize(self, value: float) -> float:
        """Map *value* onto [0, 1] (unclamped); 0 for NaN or degenerate domains."""
        if self.is_degenerate or not _is_finite(value):
            return 0.0
        return (value - self.min) / (self.max - self.min)

    def as_tuple(self) -> tuple[float, float]:
        return (self.min, self.max)


def _is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def _is_finite(value: Any) -> bool:
    return isinstance(value, (int, float, np.integer, np.floating)) and math.isfinite(value)


def to_number(value: Any) -> float:
    """Coerce a raw cell value to float, NaN if it is missing, malformed or infinite."""
    if value is None:
        return float("nan")
    if isinstance(value, (int, float, np.integer, np.floating)) and not isinstance(value, bool):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            return float("nan")
    # "inf" parses as a float but is not a usable measurement
    return number if math.isfinite(number) else float("nan")


MISSING_PLACEHOLDER = "N/A"


def is_missing(value: Any) -> bool:
    """True for None, empty/blank strings and NaN."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return _is_nan(value)


def format_value(value: Any, placeholder: str = MISSING_PLACEHOLDER) -> str:
    """Render a cell for display: integral floats lose their ``.0``."""
    if is_missing(value):
        return placeholder
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass
class Record:
    """A single car row.

    Attributes:
        index: 0-based position in the dataset.
        values: Column name -> value. Numeric columns hold floats (NaN when
            missing), everything else is the raw text.
    """

    index: int
    values: dict[str, Any]

    def get(self, attr: str, default: Any = None) -> Any:
        return self.values.get(attr, default)

    def number(self, attr: str) -> float:
        """Numeric value of *attr*; NaN if absent or not a number."""
        return to_number(self.values.get(attr))

    def text(self, attr: str) -> str:
        value = self.values.get(attr)
        return "" if value is None else str(value)

    def __getitem__(self, attr: str) -> Any:
        return self.values[attr]


@dataclass
class Dataset:
    """Ordered car records plus everything derived from them at load time."""

    data: pd.DataFrame
    records: list[Record]
    color_attr: str
    numeric_attrs: tuple[str, ...] = ()
    source: str = ""
    categories: list[str] = field(default_factory=list)
    domains: Mapping[str, Domain] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def columns(self) -> list[str]:
        return [str(c) for c in self.data.columns]

    def __len__(self) -> int:
        return len(self.records)

    def domain(self, attr: str) -> Domain:
        """Precomputed domain for *attr*, a NaN domain if it was never computed."""
        return self.domains.get(attr, Domain(float("nan"), float("nan")))

    def summary(self) -> dict:
        """Return a compact summary dict suitable for load diagnostics."""
        return {
            "source": self.source,
            "columns": self.columns,
            "num_records": len(self.records),
            "categories": list(self.categories),
            "numeric_attrs": list(self.numeric_attrs),
            "sample": dict(self.records[0].values) if self.records else None,
        }


def first_seen(values) -> list[str]:
    """Distinct values in order of first appearance."""
    seen: dict[str, None] = {}
    for v in values:
        seen.setdefault(v, None)
    return list(seen)


def coerce_numeric(column: pd.Series) -> pd.Series:
    """Parse a text column as float; malformed and infinite cells become NaN."""
    values = pd.to_numeric(column, errors="coerce").astype(float)
    return values.replace([np.inf, -np.inf], np.nan)


def compute_domains(df: pd.DataFrame, attrs) -> Mapping[str, Domain]:
    """Compute the observed domain of each attribute, ignoring NaN.

    Returns a read-only mapping; columns missing from *df* get a NaN domain.
    """
    domains: dict[str, Domain] = {}
    for attr in attrs:
        if attr in domains:
            continue
        if attr not in df.columns:
            domains[attr] = Domain(float("nan"), float("nan"))
            continue
        col = coerce_numeric(df[attr])
        if col.notna().any():
            domains[attr] = Domain(float(col.min()), float(col.max()))
        else:
            domains[attr] = Domain(float("nan"), float("nan"))
    return MappingProxyType(domains)


def build_dataset(
    df: pd.DataFrame,
    numeric_attrs,
    color_attr: str,
    source: str = "",
) -> Dataset:
    """Coerce *numeric_attrs* in *df* and assemble a Dataset.

    Every other column is left as text. Rows are never dropped: values that
    fail to coerce become NaN.
    """
    df = df.copy()
    numeric_attrs = tuple(dict.fromkeys(numeric_attrs))
    for attr in numeric_attrs:
        if attr in df.columns:
            df[attr] = coerce_numeric(df[attr])

    records = [
        Record(index=i, values=row)
        for i, row in enumerate(df.to_dict(orient="records"))
    ]
    if color_attr in df.columns:
        categories = first_seen(df[color_attr].astype(str))
    else:
        categories = []

    return Dataset(
        data=df,
        records=records,
        color_attr=color_attr,
        numeric_attrs=numeric_attrs,
        source=source,
        categories=categories,
        domains=compute_domains(df, numeric_attrs),
    )
