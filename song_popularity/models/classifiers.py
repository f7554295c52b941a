import logging
from abc import ABC, abstractmethod
from enum import Enum

from sklearn.base import ClassifierMixin
from sklearn.ensemble import RandomForestClassifier
from sklearn.linear_model import LogisticRegression

from ..config.settings import MODEL_NAME_LR, MODEL_NAME_RF, SPLIT_SEED
from ..core.errors import InvalidModelSelectorError


class ModelName(str, Enum):
    """
    Closed set of supported classifier families.
    """
    LOGISTIC_REGRESSION = MODEL_NAME_LR
    RANDOM_FOREST = MODEL_NAME_RF

    @classmethod
    def parse(cls, value) -> "ModelName":
        if isinstance(value, cls):
            return value
        for member in cls:
            if value == member.value:
                return member
        raise InvalidModelSelectorError(
            f"Invalid model name: {value!r} (expected one of {[m.value for m in cls]})"
        )


class Model(ABC):
    """
    Abstract base class for classifier families.
    """

    @abstractmethod
    def train(self, X_train, y_train) -> ClassifierMixin:
        """
        Train the model on the provided data.

        Parameters:
        X_train : array-like, shape (n_samples, n_features)
            Standardized feature vectors.
        y_train : array-like, shape (n_samples,)
            Binary labels.
        """
        pass


class LogisticRegressionModel(Model):
    """
    Logistic Regression classifier, unregularized.
    """

    def __init__(self, max_iter: int = 100):
        self.max_iter = max_iter

    def train(self, X_train, y_train, **kwargs) -> ClassifierMixin:
        model = LogisticRegression(penalty=None, max_iter=self.max_iter, **kwargs)
        model.fit(X_train, y_train)
        logging.info("LogisticRegression trained with coefficients: %s", model.coef_)
        return model


class RandomForestModel(Model):
    """
    Random Forest classifier (20 trees, depth 5).
    """

    def __init__(self, n_estimators: int = 20, max_depth: int = 5, seed: int = SPLIT_SEED):
        self.n_estimators = n_estimators
        self.max_depth = max_depth
        self.seed = seed

    def train(self, X_train, y_train, **kwargs) -> ClassifierMixin:
        model = RandomForestClassifier(
            n_estimators=self.n_estimators,
            max_depth=self.max_depth,
            random_state=self.seed,
            **kwargs,
        )
        model.fit(X_train, y_train)
        logging.info("RandomForestClassifier trained with %d trees", len(model.estimators_))
        return model


def get_model(name, seed: int = SPLIT_SEED) -> Model:
    model_name = ModelName.parse(name)
    if model_name is ModelName.LOGISTIC_REGRESSION:
        return LogisticRegressionModel()
    return RandomForestModel(seed=seed)
