# song_popularity/cleaning/core.py
"""
Cleaning & Filtering für Song-Records.

Regeln (Datenvertrag):
- nur Songs mit year > cutoff_year
- keine fehlenden Geo-Koordinaten (artist_latitude / artist_longitude)
- year wird relativ zum Cutoff gespeichert: year - cutoff_year

Verletzende Zeilen werden komplett verworfen, nicht imputiert.
Andere fehlende numerische Werte bleiben unverändert.
"""

from __future__ import annotations

import logging

import pandas as pd

from ..config.settings import PreprocessConfig
from ..core.errors import require_columns
from ..data.schema import GEO_COLS, YEAR_COL

logger = logging.getLogger(__name__)


def clean_songs(df: pd.DataFrame, config: PreprocessConfig = PreprocessConfig()) -> pd.DataFrame:
    """Drops pre-cutoff songs and songs without geolocation, rebases year. Returns a new frame."""
    require_columns(df, [YEAR_COL, *GEO_COLS], stage="clean_songs")

    cutoff = config.cutoff_year
    year = df[YEAR_COL]
    keep = (year > cutoff).fillna(False).astype(bool)
    keep &= df[list(GEO_COLS)].notna().all(axis=1)

    out = df.loc[keep].copy()
    out[YEAR_COL] = out[YEAR_COL] - cutoff
    out = out.reset_index(drop=True)

    logger.info("Cleaning kept %d of %d rows (cutoff_year=%d)", len(out), len(df), cutoff)
    return out
