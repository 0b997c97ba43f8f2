from __future__ import annotations

import warnings
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from tipsdash.data import NUMERIC_FIELDS

MISSING_CATEGORY = "N/A"


def _numeric_column(table: pd.DataFrame, field: str) -> np.ndarray:
    return pd.to_numeric(table[field], errors="coerce").to_numpy(dtype=float)


def pearson(x: np.ndarray, y: np.ndarray) -> float:
    """Pearson's r with n-1 in both the covariance and the deviations.

    NaN anywhere in either series, or a series with zero variance, gives NaN.
    """
    n = len(x)
    with np.errstate(divide="ignore", invalid="ignore"), warnings.catch_warnings():
        warnings.simplefilter("ignore", RuntimeWarning)
        dx = x - np.mean(x)
        dy = y - np.mean(y)
        cov = np.sum(dx * dy) / (n - 1)
        return float(cov / (np.std(x, ddof=1) * np.std(y, ddof=1)))


def compute_correlation_matrix(table: pd.DataFrame, fields: Sequence[str] = NUMERIC_FIELDS) -> pd.DataFrame:
    if table is None or table.empty:
        raise ValueError("correlation matrix needs a non-empty table")
    fields = list(fields)
    missing = [f for f in fields if f not in table.columns]
    if missing:
        raise KeyError(f"unknown fields: {', '.join(missing)}")

    columns = {f: _numeric_column(table, f) for f in fields}
    values = [[pearson(columns[a], columns[b]) for b in fields] for a in fields]
    return pd.DataFrame(values, index=fields, columns=fields, dtype=float)


def correlation_extent(matrix: pd.DataFrame) -> Optional[Tuple[float, float]]:
    flat = matrix.to_numpy(dtype=float).ravel()
    flat = flat[~np.isnan(flat)]
    if flat.size == 0:
        return None
    return float(flat.min()), float(flat.max())


def correlation_records(matrix: pd.DataFrame) -> List[dict]:
    """Long-format (row, column, value) records in matrix order."""
    out: List[dict] = []
    for i, row in enumerate(matrix.index):
        for j, col in enumerate(matrix.columns):
            out.append({"row": str(row), "column": str(col), "row_index": i, "column_index": j, "value": float(matrix.iat[i, j])})
    return out


def compute_grouped_average(table: pd.DataFrame, category_field: str, value_field: str) -> pd.DataFrame:
    if category_field not in table.columns or value_field not in table.columns:
        raise KeyError(f"unknown fields: {category_field!r}, {value_field!r}")
    if table.empty:
        return pd.DataFrame({"category": pd.Series(dtype=object), "value": pd.Series(dtype=float), "count": pd.Series(dtype=int)})

    base = pd.DataFrame(
        {
            "category": table[category_field].astype(object),
            "value": pd.to_numeric(table[value_field], errors="coerce"),
        }
    )
    grouped = (
        base.groupby("category", sort=False, dropna=False)["value"]
        .agg(value="mean", count="size")
        .reset_index()
    )
    grouped["category"] = grouped["category"].astype(object).map(lambda v: MISSING_CATEGORY if pd.isna(v) else v)
    return grouped[["category", "value", "count"]]
