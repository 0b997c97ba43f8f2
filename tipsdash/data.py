from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd


logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parents[1] / "data"
DATA_FILE = "tips.csv"

NUMERIC_FIELDS: List[str] = ["tip", "total_bill", "size"]
CATEGORY_FIELDS: List[str] = ["sex", "smoker", "day", "time"]
TIPS_COLUMNS: List[str] = ["total_bill", "tip", "sex", "smoker", "day", "time", "size"]


def get_source_files(path: Optional[Path] = None) -> List[Path]:
    candidate = Path(path) if path is not None else DATA_DIR / DATA_FILE
    return [candidate] if candidate.is_file() else []


def file_signature(files: List[Path]) -> Tuple[Tuple[str, float], ...]:
    return tuple((str(f), f.stat().st_mtime) for f in files)


def numericize(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    for col in cols:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce")
    return df


def coerce_str_safe(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    for col in cols:
        if col in df.columns:
            series = df[col].astype("string").str.strip()
            series = series.replace({"nan": pd.NA, "None": pd.NA, "": pd.NA})
            df[col] = series
    return df


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    df.columns = [str(c).strip().lower() for c in df.columns]
    return df.loc[:, ~df.columns.duplicated()].copy()


# ---------------- Loaders ----------------
def load_tips(path: Path) -> pd.DataFrame:
    """Read the tips CSV into a table of records.

    Every cell is read as text first; numeric fields are coerced afterwards so
    that a stray non-numeric value becomes NaN instead of failing the load.
    Raises ValueError when the header lacks a required column or the file
    holds no records.
    """
    df = pd.read_csv(path, dtype=str, skipinitialspace=True, keep_default_na=False)
    df = normalize_columns(df)

    missing = [c for c in TIPS_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"{Path(path).name} is missing columns: {', '.join(missing)}")
    if df.empty:
        raise ValueError(f"{Path(path).name} contains no records")

    df = numericize(df, NUMERIC_FIELDS)
    df = coerce_str_safe(df, CATEGORY_FIELDS)
    return df.reset_index(drop=True)


# ---------------- Public API (Streamlit parity + FastAPI use) ----------------
@lru_cache(maxsize=4)
def _load_dashboard_data_cached(files_sig: Tuple[Tuple[str, float], ...]) -> Dict[str, object]:
    files = [name for name, _ in files_sig]
    try:
        tips = load_tips(Path(files[0]))
    except Exception as exc:
        logger.exception("failed to load tips data from %s", files[0])
        return {"files": files, "tips": None, "error": str(exc)}

    logger.info("loaded %d tip records from %s", len(tips), files[0])
    return {"files": files, "tips": tips, "error": None}


def load_dashboard_data(path: Optional[Path] = None) -> Dict[str, object]:
    files = get_source_files(path)
    if not files:
        missing = Path(path) if path is not None else DATA_DIR / DATA_FILE
        logger.error("tips data file not found: %s", missing)
        return {"files": [], "tips": None, "error": f"data file not found: {missing}"}
    return _load_dashboard_data_cached(file_signature(files))
