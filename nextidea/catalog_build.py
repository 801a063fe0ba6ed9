from __future__ import annotations

"""
Utilities to load and normalise the curated idea catalog.

The catalog is a hand-authored JSON list of idea templates.  This
module flattens it into a pandas DataFrame with a canonical schema so
that the filter in :mod:`nextidea.retrieval` and the mapping helpers
never have to care whether an entry was written with ``camelCase`` or
``snake_case`` keys, or whether the cost range was nested.
"""

import json
import re
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd
from loguru import logger

from .config import CATALOG_PATH, CATALOG_PATH_OVERRIDE


# ---------------------------
# Column detection / standardisation
# ---------------------------

# Accept both the snake_case layout we ship and the camelCase one used by
# the original web front-end.
COLUMN_CANDIDATES: Dict[str, List[str]] = {
    "title": ["title", "Title", "name"],
    "summary": ["summary", "Summary", "description"],
    "target_customer": ["target_customer", "targetCustomer", "Target Customer"],
    "steps_to_start": ["steps_to_start", "stepsToStart", "steps"],
    "cost_min": ["cost_range.min", "costRange.min", "cost_min"],
    "cost_max": ["cost_range.max", "costRange.max", "cost_max"],
    "currency": ["cost_range.currency", "costRange.currency", "currency"],
    "complexity": ["complexity", "Complexity"],
    "local_viability_notes": ["local_viability_notes", "localViabilityNotes", "notes"],
    "tags": ["tags", "Tags"],
    "why_now_signals": ["why_now_signals", "whyNowSignals", "signals"],
}

CATALOG_COLUMNS = ["template_id"] + list(COLUMN_CANDIDATES)

_LIST_COLUMNS = ("steps_to_start", "tags", "why_now_signals")
_TEXT_COLUMNS = ("title", "summary", "target_customer", "local_viability_notes")
_COMPLEXITY_LEVELS = {"LOW", "MEDIUM", "HIGH"}


def _standardise_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Rename raw catalog columns to the canonical internal names."""
    col_map: Dict[str, str] = {}
    lower_to_original = {c.lower(): c for c in df.columns}

    for canon, candidates in COLUMN_CANDIDATES.items():
        for candidate in candidates:
            # Try exact, then case-insensitive
            if candidate in df.columns:
                col_map[candidate] = canon
                break
            cand_lower = candidate.lower()
            if cand_lower in lower_to_original:
                col_map[lower_to_original[cand_lower]] = canon
                break

    df_std = df.rename(columns=col_map)

    missing = [c for c in COLUMN_CANDIDATES if c not in df_std.columns]
    if missing:
        logger.warning("Raw catalog is missing columns: {}", missing)

    return df_std


# ---------------------------
# Field parsing helpers
# ---------------------------

def _is_missing(value) -> bool:
    return value is None or (isinstance(value, float) and pd.isna(value))


def parse_list_field(value) -> List[str]:
    """Convert a raw list-ish cell into a clean list of strings.

    Real lists pass through (stripped, blanks removed); strings are split
    on ``;`` or ``|`` so a hand-edited CSV export still round-trips.
    Repeated entries are kept: they count in scoring.
    """
    if _is_missing(value):
        return []
    if isinstance(value, (list, tuple)):
        items = [str(v).strip() for v in value]
    else:
        items = [p.strip() for p in re.split(r"[;|]+", str(value))]

    return [item for item in items if item]


def parse_cost(value) -> int:
    """Parse a cost bound into a non-negative whole number of dollars."""
    if _is_missing(value):
        return 0
    if isinstance(value, (int, float)):
        return max(0, int(value))
    digits = re.sub(r"[^\d.]", "", str(value))
    if not digits:
        return 0
    try:
        return max(0, int(float(digits)))
    except ValueError:
        return 0


def _canonicalise_complexity(value) -> Optional[str]:
    if _is_missing(value):
        return None
    level = str(value).strip().upper()
    return level if level in _COMPLEXITY_LEVELS else None


# ---------------------------
# Catalog normalisation
# ---------------------------

def normalise_catalog_df(df_raw: pd.DataFrame) -> pd.DataFrame:
    """
    Normalise a raw catalog frame into the canonical schema:

    - template_id (int, catalog order)
    - title, summary, target_customer, local_viability_notes (str)
    - steps_to_start, tags, why_now_signals (List[str])
    - cost_min, cost_max (int dollars, cost_max >= cost_min)
    - currency ("USD")
    - complexity ("LOW" / "MEDIUM" / "HIGH")

    Rows without a title or with an unknown complexity are dropped.
    """
    logger.info("Normalising catalog dataframe with {} raw rows", len(df_raw))

    df = _standardise_columns(df_raw.copy())

    if "title" not in df.columns:
        logger.error("No title column found after standardisation; resulting catalog will be empty.")
        return pd.DataFrame(columns=CATALOG_COLUMNS)

    for col in _TEXT_COLUMNS:
        if col not in df.columns:
            df[col] = ""
        df[col] = df[col].fillna("").astype(str).str.strip()

    df = df[df["title"] != ""]
    df = df.drop_duplicates(subset=["title"]).reset_index(drop=True)

    for col in _LIST_COLUMNS:
        if col in df.columns:
            df[col] = df[col].apply(parse_list_field)
        else:
            df[col] = [[] for _ in range(len(df))]

    df["cost_min"] = df["cost_min"].apply(parse_cost) if "cost_min" in df.columns else 0
    df["cost_max"] = df["cost_max"].apply(parse_cost) if "cost_max" in df.columns else 0
    # a max below min is an authoring slip; widen rather than drop
    df["cost_max"] = df[["cost_min", "cost_max"]].max(axis=1)
    df["currency"] = "USD"

    if "complexity" in df.columns:
        df["complexity"] = df["complexity"].apply(_canonicalise_complexity)
    else:
        df["complexity"] = None
    bad = df["complexity"].isna()
    if bad.any():
        logger.warning("Dropping {} catalog rows with unknown complexity: {}", int(bad.sum()), df.loc[bad, "title"].tolist())
        df = df[~bad].reset_index(drop=True)

    df_out = df[[c for c in CATALOG_COLUMNS if c != "template_id"]].copy()
    df_out.insert(0, "template_id", range(len(df_out)))

    logger.info("Catalog normalisation complete. Final rows: {}", len(df_out))
    return df_out


# ---------------------------
# IO helpers
# ---------------------------

def resolve_catalog_path(path: Optional[Path] = None) -> Path:
    if path is not None:
        return Path(path)
    if CATALOG_PATH_OVERRIDE:
        return Path(CATALOG_PATH_OVERRIDE)
    return CATALOG_PATH


def load_raw_catalog(path: Optional[Path] = None) -> pd.DataFrame:
    """
    Load raw catalog records from a JSON file into a flat DataFrame.

    Nested ``cost_range`` objects are flattened by ``json_normalize`` into
    ``cost_range.min`` / ``cost_range.max`` columns.
    """
    path = resolve_catalog_path(path)
    if not path.exists():
        raise FileNotFoundError(f"Idea catalog not found at {path}")

    logger.info("Loading raw catalog from {}", path)
    with path.open("r", encoding="utf-8") as handle:
        records = json.load(handle)
    if not isinstance(records, list):
        raise ValueError(f"Idea catalog at {path} must be a JSON list of templates")

    df = pd.json_normalize(records)
    logger.info("Loaded {} rows from raw catalog", len(df))
    return df


@lru_cache(maxsize=4)
def _load_catalog_cached(path_str: str) -> pd.DataFrame:
    return normalise_catalog_df(load_raw_catalog(Path(path_str)))


def load_catalog(path: Optional[Path] = None) -> pd.DataFrame:
    """
    Load the normalised catalog, cached per resolved path.

    Callers must treat the returned frame as read-only.
    """
    return _load_catalog_cached(str(resolve_catalog_path(path)))


def clear_catalog_cache() -> None:
    _load_catalog_cached.cache_clear()
