# song_popularity/data/schema.py
from __future__ import annotations

import json
import logging
from typing import Dict

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

# column names the stages depend on
SCORE_COL = "song_hotness"
LABEL_COL = "label"
YEAR_COL = "year"
LATITUDE_COL = "artist_latitude"
LONGITUDE_COL = "artist_longitude"
GEO_COLS = (LATITUDE_COL, LONGITUDE_COL)

FLOAT = "float64"
INT = "Int64"
STRING = "string"

_SONG_FIELDS: Dict[str, str] = {
    # metadata
    "artist_familiarity": FLOAT,
    "artist_hotttnesss": FLOAT,
    "artist_id": STRING,
    "artist_latitude": FLOAT,
    "artist_location": STRING,
    "artist_longitude": FLOAT,
    "artist_name": STRING,
    "title": STRING,
    # analysis
    "danceability": FLOAT,
    "duration": FLOAT,
    "end_of_fade_in": FLOAT,
    "energy": FLOAT,
    "key": INT,
    "key_confidence": FLOAT,
    "loudness": FLOAT,
    "mode": INT,
    "mode_confidence": FLOAT,
    "start_of_fade_out": FLOAT,
    "tempo": FLOAT,
    "time_signature": INT,
    "time_signature_confidence": FLOAT,
    # metadata arrays, kept as serialized strings
    "artist_terms": STRING,
    "artist_terms_freq": STRING,
    "artist_terms_weight": STRING,
    # musicbrainz
    "year": INT,
}


def get_schema(is_train_data: bool = True) -> Dict[str, str]:
    """
    Ordered column -> dtype mapping for a song record.

    song_hotness (the training target) leads the schema for training data and
    is absent for inference data.
    """
    schema: Dict[str, str] = {SCORE_COL: FLOAT} if is_train_data else {}
    schema.update(_SONG_FIELDS)
    return schema


def to_float(s: pd.Series) -> pd.Series:
    """Float conversion; unparseable and non-finite values become NaN."""
    x = pd.to_numeric(s, errors="coerce")
    # nullable / arrow-backed inputs come back as masked arrays
    x = pd.Series(pd.array(x, dtype="Float64").to_numpy(dtype="float64", na_value=np.nan), index=s.index)
    return x.where(np.isfinite(x))


def to_int(s: pd.Series) -> pd.Series:
    """Integer conversion on pandas Int64; fractional and out-of-range values become NA instead of being truncated."""
    x = to_float(s)
    x = x.where((x == np.round(x)) & (x.abs() < 2.0 ** 63))
    return x.astype("Int64")


def to_string(s: pd.Series) -> pd.Series:
    # JSON arrays / objects (artist_terms etc.) stay JSON text
    if s.dtype == object:
        s = s.map(lambda v: json.dumps(v) if isinstance(v, (list, dict)) else v)
    return s.astype("string")


_CASTS = {FLOAT: to_float, INT: to_int, STRING: to_string}


def _null_column(dtype: str, index: pd.Index) -> pd.Series:
    if dtype == FLOAT:
        return pd.Series(np.nan, index=index, dtype="float64")
    return pd.Series(pd.NA, index=index, dtype=dtype)


def apply_schema(df: pd.DataFrame, is_train_data: bool = True) -> pd.DataFrame:
    """
    Zweck:
    - Bringt ein rohes DataFrame exakt auf das Song-Schema.

    Regeln:
    - fehlende Spalten -> komplett NA
    - zusätzliche Spalten -> verworfen
    - nicht parsebare / nicht endliche Zahlen -> NA (Anzahl wird geloggt)
    - Spaltenreihenfolge = Schema-Reihenfolge
    """
    schema = get_schema(is_train_data)
    out = pd.DataFrame(index=df.index)
    n_coerced = 0

    for col, dtype in schema.items():
        if col not in df.columns:
            out[col] = _null_column(dtype, df.index)
            continue

        src = df[col]
        typed = _CASTS[dtype](src)
        if dtype != STRING:
            n_coerced += int((src.notna() & typed.isna()).sum())
        out[col] = typed

    if n_coerced:
        logger.warning("Coerced %d invalid numeric value(s) to null", n_coerced)

    return out
