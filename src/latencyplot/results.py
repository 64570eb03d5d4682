"""Readers for load-test result files.

Two encodings are understood:

- CSV, headerless, one result per row:
  ``timestamp (unix ns), code, latency (ns), bytes_out, bytes_in, error,
  body, attack, seq, method, url, headers``. Rows written by older tools
  stop after ``body``; their missing columns get defaults, and short and
  full-width rows may be mixed in one file.
- JSON lines, one object per line with the keys ``attack, seq, code,
  timestamp (RFC3339), latency (ns), bytes_out, bytes_in, error, ...``.
  Only ``timestamp`` and ``latency`` are required; a missing ``error``
  means the request succeeded.

Both are parsed with pandas into a normalized frame and then turned into
Measurement records in timestamp order.
"""

from __future__ import annotations

from os import PathLike
from typing import IO, Iterator, Union

import pandas as pd

from latencyplot.measurement import Measurement
from latencyplot.utils.logging import get_logger

logger = get_logger(__name__)

Source = Union[str, PathLike, IO]

CSV_COLUMNS = [
    "timestamp", "code", "latency", "bytes_out", "bytes_in", "error",
    "body", "attack", "seq", "method", "url", "headers",
]
REQUIRED_COLUMNS = ("timestamp", "latency")

_DEFAULTS = {
    "error": "",
    "attack": "",
    "seq": 0,
    "code": 0,
    "method": "",
    "url": "",
    "bytes_in": 0,
    "bytes_out": 0,
}


def _check_columns(df: pd.DataFrame, source: str) -> None:
    missing = [
        c for c in REQUIRED_COLUMNS
        if c not in df.columns or (df[c].isna() | (df[c].astype(str) == "")).any()
    ]
    if missing:
        raise ValueError(f"{source} results are missing required columns: {missing}")


def _normalize(df: pd.DataFrame) -> pd.DataFrame:
    """Fill optional columns, coerce dtypes and sort by timestamp (stable)."""
    df = df.copy()
    for col, default in _DEFAULTS.items():
        if col not in df.columns:
            df[col] = default
    df["error"] = df["error"].fillna("").astype(str)
    df["attack"] = df["attack"].fillna("").astype(str)
    df["method"] = df["method"].fillna("").astype(str)
    df["url"] = df["url"].fillna("").astype(str)
    for col in ("seq", "code", "bytes_in", "bytes_out"):
        df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0).astype("int64")
    return df.sort_values("timestamp", kind="stable").reset_index(drop=True)


def read_csv_results(source: Source) -> pd.DataFrame:
    """Parse headerless CSV results into a normalized frame.

    Raises:
        ValueError: If a row lacks a timestamp or latency, or has more than
            the known columns.
    """
    try:
        raw = pd.read_csv(
            source, header=None, names=CSV_COLUMNS, index_col=False, dtype=str, keep_default_na=False
        )
    except pd.errors.EmptyDataError:
        logger.debug("empty CSV results")
        return _normalize(pd.DataFrame(columns=list(REQUIRED_COLUMNS)))

    _check_columns(raw, "CSV")

    raw["timestamp"] = pd.to_datetime(pd.to_numeric(raw["timestamp"]), unit="ns", utc=True)
    raw["latency"] = pd.to_timedelta(pd.to_numeric(raw["latency"]), unit="ns")
    return _normalize(raw)


def read_json_results(source: Source) -> pd.DataFrame:
    """Parse JSON-lines results into a normalized frame.

    Raises:
        ValueError: If required keys are missing or a line is not valid JSON.
    """
    raw = pd.read_json(source, lines=True, convert_dates=False, dtype=False)
    if raw.empty:
        logger.debug("empty JSON results")
        return _normalize(pd.DataFrame(columns=list(REQUIRED_COLUMNS)))
    _check_columns(raw, "JSON")

    raw["timestamp"] = pd.to_datetime(raw["timestamp"], utc=True, format="ISO8601")
    raw["latency"] = pd.to_timedelta(pd.to_numeric(raw["latency"]), unit="ns")
    return _normalize(raw)


def results_from_frame(df: pd.DataFrame) -> Iterator[Measurement]:
    """Yield one Measurement per row of a normalized results frame."""
    for row in df.itertuples(index=False):
        yield Measurement(
            target=row.attack,
            timestamp=row.timestamp,
            latency=row.latency,
            error=row.error,
            code=int(row.code),
            seq=int(row.seq),
            method=row.method,
            url=row.url,
            bytes_in=int(row.bytes_in),
            bytes_out=int(row.bytes_out),
        )
