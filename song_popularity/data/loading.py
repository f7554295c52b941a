from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import pandas as pd

from ..core.errors import DataAccessError
from .schema import apply_schema, get_schema

"""
Datenladen (I/O Layer).

Aufgabe:
- Liest Song-Records aus CSV, JSON oder einem ganzen Ordner
- Gibt immer ein schema-typisiertes DataFrame zurück (siehe schema.py)

Wichtig:
- Keine Filterung / kein Labeling hier
- Lesefehler werden als DataAccessError weitergereicht
"""

logger = logging.getLogger(__name__)

JsonPayload = Union[str, bytes, Dict[str, Any], List[Dict[str, Any]]]


def _read_csv_raw(filepath: Path, is_train_data: bool, header: bool, delimiter: str) -> pd.DataFrame:
    names = list(get_schema(is_train_data))
    return pd.read_csv(
        filepath,
        sep=delimiter,
        header=0 if header else None,
        names=names,
        index_col=False,
        dtype=str,
    )


def load_csv(filepath: Path | str, is_train_data: bool = True, header: bool = False, delimiter: str = ",") -> pd.DataFrame:
    """
    Loads song records from a CSV file whose columns follow schema order.

    Parameter
    ---------
    header:
        True if the first line holds column names; it is skipped, columns are
        still mapped positionally.
    """
    path = Path(filepath)
    logger.info("Reading data from %s", path)
    try:
        raw = _read_csv_raw(path, is_train_data, header, delimiter)
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise DataAccessError(f"Cannot read CSV {path}: {e}") from e

    df = apply_schema(raw, is_train_data)
    logger.info("Data shape: %s", df.shape)
    return df


def _records_from_json(payload: JsonPayload) -> List[Dict[str, Any]]:
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as e:
            raise DataAccessError(f"Invalid JSON payload: {e}") from e

    if isinstance(payload, dict):
        return [payload]
    if isinstance(payload, list) and all(isinstance(r, dict) for r in payload):
        return payload
    raise DataAccessError(f"JSON payload must be an object or a list of objects, got {type(payload).__name__}")


def df_from_json(payload: JsonPayload, is_train_data: bool = False) -> pd.DataFrame:
    """
    Builds a DataFrame from a JSON song payload (single object or list of objects).

    Used for scoring single songs, so the inference schema (no song_hotness)
    is the default.
    """
    records = _records_from_json(payload)
    raw = pd.DataFrame.from_records(records) if records else pd.DataFrame()
    return apply_schema(raw, is_train_data).reset_index(drop=True)


def _read_json_file(path: Path) -> pd.DataFrame:
    text = path.read_text(encoding="utf-8").strip()
    if not text:
        return pd.DataFrame()
    try:
        records = _records_from_json(text)
    except DataAccessError:
        # JSON lines: one object per line
        records = [r for ln in text.splitlines() if ln.strip() for r in _records_from_json(ln)]
    return pd.DataFrame.from_records(records)


def load_data_from_folder(folder: Path | str, is_train_data: bool = True, header: bool = False) -> pd.DataFrame:
    """
    Bulk loader: concatenates every *.csv, *.json and *.parquet file in `folder`.

    Files are read in sorted name order so the resulting row order is stable.
    """
    folder = Path(folder)
    if not folder.is_dir():
        raise DataAccessError(f"Data folder not found: {folder}")

    files = sorted(p for p in folder.iterdir() if p.suffix.lower() in (".csv", ".json", ".parquet"))
    if not files:
        raise DataAccessError(f"No .csv/.json/.parquet files in {folder}")

    frames = []
    for p in files:
        suffix = p.suffix.lower()
        try:
            if suffix == ".csv":
                raw = _read_csv_raw(p, is_train_data, header, ",")
            elif suffix == ".json":
                raw = _read_json_file(p)
            else:
                raw = pd.read_parquet(p)
        except (OSError, ValueError, pd.errors.ParserError, UnicodeDecodeError) as e:
            raise DataAccessError(f"Cannot read {p}: {e}") from e

        frames.append(apply_schema(raw, is_train_data))
        logger.info("Loaded %s (%d rows)", p.name, len(raw))

    df = pd.concat(frames, ignore_index=True)
    logger.info("Data shape: %s", df.shape)
    return df
