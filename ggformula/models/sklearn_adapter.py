"""
Adapter for fitted scikit-learn estimators and pipelines.

Classifiers with a decision function (logistic regression and other
GLM-like models) report the positive-class probability on the response
scale and the decision function on the link scale. Other classifiers
(trees, forests) report one probability per class and have no link scale.
Regressors report ``predict`` on the response scale only.
"""

from typing import Any, Iterator, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, is_classifier
from sklearn.compose import ColumnTransformer
from sklearn.pipeline import Pipeline

from .base import ModelAdapter, Prediction
from ..core.exceptions import PredictionError


def _encoders(estimator: Any, columns: Optional[Sequence[str]] = None) -> Iterator[Tuple[Any, List[str]]]:
    """Fitted categorical encoders inside ``estimator`` with the columns they encode."""
    if isinstance(estimator, Pipeline):
        for _, step in estimator.steps:
            yield from _encoders(step, columns)
    elif isinstance(estimator, ColumnTransformer):
        for _, transformer, cols in getattr(estimator, "transformers_", []):
            if isinstance(transformer, str):
                continue  # "drop" / "passthrough"
            if callable(cols) or isinstance(cols, slice):
                cols = []
            cols = [cols] if isinstance(cols, str) else list(cols)
            names = [c for c in cols if isinstance(c, str)]
            yield from _encoders(transformer, names if len(names) == len(cols) else None)
    elif hasattr(estimator, "categories_"):
        names = getattr(estimator, "feature_names_in_", None)
        yield estimator, [str(n) for n in names] if names is not None else list(columns or [])


class SklearnModelAdapter(ModelAdapter):
    """Wraps estimators fitted on pandas DataFrames."""

    name = "sklearn"

    @classmethod
    def supports(cls, model: Any) -> bool:
        return isinstance(model, BaseEstimator) and hasattr(model, "predict")

    @property
    def predictor_names(self) -> List[str]:
        names = getattr(self.model, "feature_names_in_", None)
        if names is None:
            raise PredictionError(
                model=self.describe(),
                reason="predictor names are unknown; fit the model on a pandas DataFrame",
            )
        return [str(name) for name in names]

    @property
    def classes(self) -> List[str]:
        return [str(c) for c in getattr(self.model, "classes_", [])]

    @property
    def has_link(self) -> bool:
        return hasattr(self.model, "decision_function")

    def levels(self, variable: str) -> Optional[List[Any]]:
        for encoder, columns in _encoders(self.model):
            if variable in columns:
                return list(encoder.categories_[columns.index(variable)])
        return None

    def describe(self) -> str:
        if isinstance(self.model, Pipeline):
            return f"Pipeline({type(self.model.steps[-1][1]).__name__})"
        return type(self.model).__name__

    def predict(self, new_data: pd.DataFrame, prediction_type: str = "response") -> Prediction:
        self.logger.debug(
            f"Predicting {len(new_data)} rows", model=self.describe(), type=prediction_type
        )
        if prediction_type == "response":
            return self._predict_response(new_data)
        if prediction_type == "link":
            return self._predict_link(new_data)
        raise PredictionError(
            model=self.describe(),
            prediction_type=prediction_type,
            reason="expected 'response' or 'link'",
        )

    def _predict_response(self, new_data: pd.DataFrame) -> Prediction:
        if not is_classifier(self.model):
            values = np.asarray(self.model.predict(new_data), dtype=float)
            return pd.Series(values.ravel(), index=new_data.index)

        if not hasattr(self.model, "predict_proba"):
            raise PredictionError(
                model=self.describe(),
                prediction_type="response",
                reason="classifier has no predict_proba",
            )
        probabilities = np.asarray(self.model.predict_proba(new_data), dtype=float)
        if self.has_link and probabilities.shape[1] == 2:
            return pd.Series(probabilities[:, 1], index=new_data.index)
        return pd.DataFrame(probabilities, columns=self.classes, index=new_data.index)

    def _predict_link(self, new_data: pd.DataFrame) -> Prediction:
        if not self.has_link:
            raise PredictionError(
                model=self.describe(),
                prediction_type="link",
                reason="model has no decision_function",
            )
        scores = np.asarray(self.model.decision_function(new_data), dtype=float)
        if scores.ndim == 1:
            return pd.Series(scores, index=new_data.index)
        return pd.DataFrame(scores, columns=self.classes, index=new_data.index)
