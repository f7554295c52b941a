from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import pandas as pd
from sklearn.preprocessing import StandardScaler

from ..core.errors import EmptyDatasetError, MissingFeatureValueError, SchemaMismatchError
from ..data.schema import LABEL_COL, SCORE_COL

"""
Feature-Vektor (Assembler + Standardisierung).

Zwei Phasen:
1) Assembly: zustandslose Konkatenation aller numerischen Spalten pro Zeile
   (ohne song_hotness und label), in Spaltenreihenfolge.
2) Standardisierung: StandardScaler wird auf dem kompletten Dataset gefittet
   und danach angewendet (Mittelwert 0, Varianz 1 pro Dimension).

Hinweis:
Der Scaler wird standardmäßig auf denselben Daten gefittet, die transformiert
werden. Er wird trotzdem separat zurückgegeben, damit Inferenz-Daten mit den
Trainings-Statistiken transformiert werden können.
"""

logger = logging.getLogger(__name__)

EXCLUDED_COLS = (SCORE_COL, LABEL_COL)


@dataclass
class FeaturizedDataset:
    """
    Attributes
    ----------
    frame:
        Cleaned (and labeled) records the vectors were built from, index 0..n-1.
    feature_names:
        Column names in vector order.
    raw_features:
        Assembled, unscaled feature matrix (n_rows x n_features).
    features:
        Standardized feature matrix; the model trains on this one.
    label:
        Binary label per row, None for inference data.
    scaler:
        Fitted StandardScaler used for `features`.
    """
    frame: pd.DataFrame
    feature_names: List[str]
    raw_features: np.ndarray
    features: np.ndarray
    label: Optional[pd.Series]
    scaler: StandardScaler

    @property
    def n_rows(self) -> int:
        return int(self.features.shape[0])

    @property
    def n_features(self) -> int:
        return len(self.feature_names)


def select_feature_columns(df: pd.DataFrame) -> List[str]:
    return [
        c for c in df.columns
        if c not in EXCLUDED_COLS
        and pd.api.types.is_numeric_dtype(df[c])
        and not pd.api.types.is_bool_dtype(df[c])
    ]


def assemble_feature_vectors(df: pd.DataFrame, columns: List[str]) -> np.ndarray:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise SchemaMismatchError(f"assemble_feature_vectors: missing feature column(s) {missing}")

    block = df[columns]
    null_cols = [c for c in columns if block[c].isna().any()]
    if null_cols:
        raise MissingFeatureValueError(f"Null values in feature column(s) {null_cols}")

    return block.to_numpy(dtype="float64", na_value=np.nan)


def fit_scaler(raw_features: np.ndarray) -> StandardScaler:
    if raw_features.shape[0] == 0:
        raise EmptyDatasetError("Cannot fit StandardScaler on 0 rows")
    return StandardScaler().fit(raw_features)


def apply_scaler(scaler: StandardScaler, raw_features: np.ndarray) -> np.ndarray:
    if scaler.n_features_in_ != raw_features.shape[1]:
        raise SchemaMismatchError(
            f"Scaler was fitted on {scaler.n_features_in_} features, got {raw_features.shape[1]}"
        )
    if raw_features.shape[0] == 0:
        return np.empty((0, raw_features.shape[1]), dtype="float64")
    return scaler.transform(raw_features)


def build_features(df: pd.DataFrame, scaler: Optional[StandardScaler] = None) -> FeaturizedDataset:
    """
    Assembles and standardizes the feature vector.

    Without `scaler` a new one is fitted on `df` itself.
    """
    frame = df.reset_index(drop=True)
    names = select_feature_columns(frame)
    raw = assemble_feature_vectors(frame, names)

    if scaler is None:
        scaler = fit_scaler(raw)
    features = apply_scaler(scaler, raw)

    label = frame[LABEL_COL].astype("int64") if LABEL_COL in frame.columns else None

    logger.info("Assembled %d features for %d rows", len(names), len(frame))
    return FeaturizedDataset(
        frame=frame,
        feature_names=names,
        raw_features=raw,
        features=features,
        label=label,
        scaler=scaler,
    )
