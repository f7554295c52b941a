from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import numpy as np
import pandas as pd
from sklearn.metrics import average_precision_score, confusion_matrix, f1_score, roc_auc_score

from ..core.errors import EmptyDatasetError, SchemaMismatchError
from ..data.schema import LABEL_COL

"""
Metriken für die binäre Popularitäts-Klassifikation.

Enthält:
- AreaUnderROC als Evaluation-Strategie (Hauptmetrik)
- evaluate_prediction: AUC direkt auf einem Prediction-DataFrame
- binary_metrics: erweiterter Report (PR-AUC, F1, Confusion Matrix)

Hinweis:
Label- und Score-Spalte haben feste Namen ("label", "rawPrediction").
"""

logger = logging.getLogger(__name__)

RAW_PREDICTION_COL = "rawPrediction"


class Evaluation(ABC):
    """
    Abstract base class for evaluation metrics.
    """

    @abstractmethod
    def calculate_score(self, y_true, y_score) -> float:
        """
        Calculate the evaluation score.

        Parameters:
        y_true : array-like, shape (n_samples,)
            True binary labels.
        y_score : array-like, shape (n_samples,)
            Raw model score for the positive class.
        """
        pass


class AreaUnderROC(Evaluation):
    """
    Area under the ROC curve. 0.5 = chance, 1.0 = perfect separation.
    """

    def calculate_score(self, y_true, y_score) -> float:
        y_true = np.asarray(y_true).astype(int)
        y_score = np.asarray(y_score, dtype="float64")

        if len(y_true) == 0:
            raise EmptyDatasetError("Cannot compute area under ROC on 0 predictions")
        if len(np.unique(y_true)) < 2:
            logger.warning("Only one label class in %d predictions, area under ROC is undefined", len(y_true))
            return float("nan")

        auc = float(roc_auc_score(y_true, y_score))
        logger.debug("Calculated area under ROC: %s", auc)
        return auc


def evaluate_prediction(
    prediction: pd.DataFrame,
    label_col: str = LABEL_COL,
    raw_prediction_col: str = RAW_PREDICTION_COL,
) -> float:
    missing = [c for c in (label_col, raw_prediction_col) if c not in prediction.columns]
    if missing:
        raise SchemaMismatchError(f"evaluate_prediction: missing column(s) {missing}")

    return AreaUnderROC().calculate_score(prediction[label_col], prediction[raw_prediction_col])


def binary_metrics(y_true, y_score, threshold: float = 0.5) -> dict:
    y_true = np.asarray(y_true).astype(int)
    y_score = np.asarray(y_score, dtype="float64")
    y_pred = (y_score >= threshold).astype(int)
    two_classes = len(np.unique(y_true)) > 1

    out = {
        "roc_auc": float(roc_auc_score(y_true, y_score)) if two_classes else float("nan"),
        "pr_auc": float(average_precision_score(y_true, y_score)) if two_classes else float("nan"),
        "f1": float(f1_score(y_true, y_pred, zero_division=0)),
        "confusion_matrix": confusion_matrix(y_true, y_pred, labels=[0, 1]).tolist(),
        "n": int(len(y_true)),
    }
    return out
