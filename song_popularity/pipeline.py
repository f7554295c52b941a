from __future__ import annotations

import logging
from typing import Optional

import pandas as pd
from sklearn.preprocessing import StandardScaler

from .cleaning.core import clean_songs
from .config.settings import PreprocessConfig, RunConfig, SplitConfig
from .core.errors import DataAccessError
from .core.result import StageResult
from .data.loading import load_csv, load_data_from_folder
from .features.assembler import FeaturizedDataset, build_features
from .models.trainer import PopularityTrainer, predict_dataset
from .targets.popularity import build_popularity_labels

"""
Pipeline-Komposition.

Raw -> Cleaned -> (Labeled) -> Featurized -> Trained -> (Evaluated)

Jede Stufe liefert ein StageResult; die erste Fehlerstufe bricht die Kette ab,
Teilergebnisse werden nie zurückgegeben.
"""

logger = logging.getLogger(__name__)


def _preprocess(df: pd.DataFrame, is_train_data: bool, config: PreprocessConfig,
                scaler: Optional[StandardScaler]) -> FeaturizedDataset:
    cleaned = clean_songs(df, config)
    if is_train_data:
        cleaned, _ = build_popularity_labels(cleaned)
    return build_features(cleaned, scaler=scaler)


def preprocessing(
    df: pd.DataFrame,
    is_train_data: bool = True,
    config: PreprocessConfig = PreprocessConfig(),
    scaler: Optional[StandardScaler] = None,
) -> StageResult[FeaturizedDataset]:
    """
    Cleans, labels (training data only) and featurizes raw song records.

    `scaler` is only meant for inference data; by default the scaler is
    fitted on `df` itself.
    """
    return StageResult.attempt(_preprocess, df, is_train_data, config, scaler)


def fit(
    ds: FeaturizedDataset,
    model_name,
    evaluate: bool = False,
    split: SplitConfig = SplitConfig(),
) -> StageResult:
    """Fits the selected classifier on the train split; the value is the fitted estimator."""
    trainer = PopularityTrainer(split=split)
    return StageResult.attempt(trainer.fit_eval, ds, model_name, evaluate).map(lambda outcome: outcome.model)


def _load(run_config: RunConfig) -> pd.DataFrame:
    if run_config.use_csv:
        if not run_config.csv_path:
            raise DataAccessError("use_csv is set but csv_path is empty")
        return load_csv(run_config.csv_path, is_train_data=True, header=run_config.csv_header)

    if not run_config.folder_path:
        raise DataAccessError("use_csv is off but folder_path is empty")
    return load_data_from_folder(run_config.folder_path, is_train_data=True, header=run_config.csv_header)


def data(run_config: RunConfig) -> StageResult[FeaturizedDataset]:
    """Loads training data from the configured source and preprocesses it."""
    return (
        StageResult.attempt(_load, run_config)
        .and_then(lambda df: preprocessing(df, is_train_data=True, config=run_config.preprocess_config()))
    )


def score_songs(model, df: pd.DataFrame, scaler: StandardScaler,
                config: PreprocessConfig = PreprocessConfig()) -> StageResult[pd.DataFrame]:
    """
    Scores inference records (no song_hotness) with a trained model.

    Uses the training-time scaler so vectors line up with what the model saw.
    """
    return (
        preprocessing(df, is_train_data=False, config=config, scaler=scaler)
        .map(lambda ds: predict_dataset(model, ds))
    )
