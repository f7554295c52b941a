from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

import numpy as np
import pandas as pd
from sklearn.base import ClassifierMixin

from ..config.settings import SplitConfig
from ..core.errors import SchemaMismatchError
from ..data.schema import LABEL_COL
from ..evaluation.metrics import RAW_PREDICTION_COL, evaluate_prediction
from ..features.assembler import FeaturizedDataset
from ..splits import train_test_split_seeded
from .classifiers import ModelName, get_model

"""
Task: Popularity Prediction (binäre Klassifikation).

Ablauf:
- geseedeter 80/20 Split
- Fit nur auf dem Train-Split
- optional: Area under ROC auf Train und Test (nur Logging, Modell bleibt unverändert)
"""

logger = logging.getLogger(__name__)


@dataclass
class TrainingOutcome:
    model: ClassifierMixin
    model_name: ModelName
    n_train: int
    n_test: int
    train_auc: Optional[float] = None
    test_auc: Optional[float] = None
    test_prediction: Optional[pd.DataFrame] = field(default=None, repr=False)


def predict(model: ClassifierMixin, X: np.ndarray, label: Optional[pd.Series] = None) -> pd.DataFrame:
    """
    Scores feature vectors.

    Output columns: rawPrediction (score of the positive class), probability,
    prediction (0/1) and label when labels are given.
    """
    if len(X) == 0:
        pos = np.empty(0, dtype="float64")
        pred = np.empty(0, dtype=int)
    else:
        proba = model.predict_proba(X)
        classes = list(model.classes_)
        pos = proba[:, classes.index(1)] if 1 in classes else np.zeros(len(X))
        pred = model.predict(X).astype(int)

    out = pd.DataFrame({
        RAW_PREDICTION_COL: pos,
        "probability": pos,
        "prediction": pred,
    })
    if label is not None:
        out[LABEL_COL] = np.asarray(label).astype(int)
    return out


def predict_dataset(model: ClassifierMixin, ds: FeaturizedDataset) -> pd.DataFrame:
    return predict(model, ds.features, ds.label)


@dataclass
class PopularityTrainer:
    """
        Trainer für Popularity Prediction.

        Methoden
        --------
        fit_eval(ds, model_name, evaluate):
            Trainiert auf dem Train-Split, reportet optional Area under ROC auf Train und Test.
        """
    split: SplitConfig = field(default_factory=SplitConfig)

    def fit_eval(self, ds: FeaturizedDataset, model_name, evaluate: bool = False) -> TrainingOutcome:
        name = ModelName.parse(model_name)
        if ds.label is None:
            raise SchemaMismatchError(f"fit: dataset has no '{LABEL_COL}' column")

        idx_tr, idx_te = train_test_split_seeded(ds.n_rows, self.split)
        y = ds.label.to_numpy()
        Xtr, ytr = ds.features[idx_tr], y[idx_tr]
        Xte, yte = ds.features[idx_te], y[idx_te]

        logger.info("Fitting with %s...", name.value)
        model = get_model(name, seed=self.split.seed).train(Xtr, ytr)
        logger.info("Fitting complete! [%s]", name.value)

        outcome = TrainingOutcome(model=model, model_name=name, n_train=len(idx_tr), n_test=len(idx_te))

        if evaluate:
            train_prediction = predict(model, Xtr, ytr)
            test_prediction = predict(model, Xte, yte)
            outcome.train_auc = evaluate_prediction(train_prediction)
            outcome.test_auc = evaluate_prediction(test_prediction)
            outcome.test_prediction = test_prediction

            logger.info("Area under ROC on train set: %s", outcome.train_auc)
            logger.info("Area under ROC on test set: %s", outcome.test_auc)

        return outcome
