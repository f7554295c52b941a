# song_popularity/targets/popularity.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Tuple

import pandas as pd

from ..core.errors import EmptyDatasetError, require_columns
from ..data.schema import LABEL_COL, SCORE_COL

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PopularityThreshold:
    """Mean song_hotness of the dataset it was fitted on."""
    mean: float
    n_rows: int


def fit_popularity_threshold(df: pd.DataFrame, score_col: str = SCORE_COL) -> PopularityThreshold:
    require_columns(df, [score_col], stage="fit_popularity_threshold")

    score = pd.to_numeric(df[score_col], errors="coerce").astype("float64")
    valid = score.dropna()
    if valid.empty:
        raise EmptyDatasetError(f"Cannot compute mean {score_col}: {len(df)} rows, none with a score")

    # exact summation, independent of row order
    mean = math.fsum(valid.to_numpy()) / len(valid)
    return PopularityThreshold(mean=mean, n_rows=int(len(valid)))


def apply_popularity_labels(df: pd.DataFrame, threshold: PopularityThreshold, score_col: str = SCORE_COL) -> pd.DataFrame:
    """label = 1 where score >= threshold.mean, else 0 (missing scores get 0)."""
    require_columns(df, [score_col], stage="apply_popularity_labels")

    out = df.copy()
    score = pd.to_numeric(out[score_col], errors="coerce").astype("float64")
    out[LABEL_COL] = (score >= threshold.mean).astype("int64")
    return out


def build_popularity_labels(df: pd.DataFrame, score_col: str = SCORE_COL) -> Tuple[pd.DataFrame, PopularityThreshold]:
    threshold = fit_popularity_threshold(df, score_col)
    out = apply_popularity_labels(df, threshold, score_col)

    n_pos = int(out[LABEL_COL].sum())
    logger.info("Popularity threshold %.6f -> %d of %d songs labeled popular", threshold.mean, n_pos, len(out))
    return out, threshold
