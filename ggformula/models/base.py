"""
Base classes for wrapping fitted models in ggformula.

The effect size calculator never fits models; it asks an adapter for the
model's predictors, categorical levels and predictions.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type, Union

import pandas as pd

from ..core.exceptions import PredictionError
from ..utils.logging import get_logger


logger = get_logger(__name__)

Prediction = Union[pd.Series, pd.DataFrame]


class ModelAdapter(ABC):
    """
    Common interface over fitted models from different libraries.

    Subclasses decide which models they handle through ``supports``.
    """

    name: str = "base"

    def __init__(self, model: Any):
        self.model = model
        self.logger = get_logger(self.__class__.__name__)

    @classmethod
    @abstractmethod
    def supports(cls, model: Any) -> bool:
        """Whether this adapter can wrap ``model``."""

    @property
    @abstractmethod
    def predictor_names(self) -> List[str]:
        """Names of the columns the model predicts from."""

    @abstractmethod
    def predict(self, new_data: pd.DataFrame, prediction_type: str = "response") -> Prediction:
        """
        Predict for each row of ``new_data``.

        Args:
            new_data: One row per prediction, one column per predictor
            prediction_type: "response" or "link"

        Returns:
            Series for single-valued outputs, DataFrame with one column per
            outcome class otherwise; indexed like ``new_data``
        """

    def levels(self, variable: str) -> Optional[List[Any]]:
        """Training levels of a categorical predictor, if the model records them."""
        return None

    def describe(self) -> str:
        return type(self.model).__name__


class AdapterRegistry:
    """
    Registry for model adapters.

    Adapters registered later are tried first, so user adapters can take
    precedence over the built-in ones.
    """

    def __init__(self):
        self._adapters: Dict[str, Type[ModelAdapter]] = {}
        self.logger = get_logger(self.__class__.__name__)

    def register(self, name: str, adapter_class: Type[ModelAdapter]) -> None:
        if not issubclass(adapter_class, ModelAdapter):
            raise TypeError("Adapter class must inherit from ModelAdapter")

        self._adapters.pop(name, None)
        self._adapters[name] = adapter_class
        self.logger.debug(f"Registered adapter: {name} -> {adapter_class.__name__}")

    def get(self, name: str) -> Type[ModelAdapter]:
        if name not in self._adapters:
            raise ValueError(
                f"Adapter '{name}' not registered. Available: {list(self._adapters)}"
            )
        return self._adapters[name]

    def list_adapters(self) -> List[str]:
        return list(self._adapters)

    def wrap(self, model: Any) -> ModelAdapter:
        """Wrap ``model`` with the most recently registered adapter that supports it."""
        if isinstance(model, ModelAdapter):
            return model

        for adapter_class in reversed(list(self._adapters.values())):
            if adapter_class.supports(model):
                return adapter_class(model)

        raise PredictionError(
            model=type(model).__name__,
            reason=f"no registered adapter supports it (available: {self.list_adapters()})",
        )


# Global adapter registry instance
_registry = AdapterRegistry()


def register_adapter(name: str, adapter_class: Type[ModelAdapter]) -> None:
    """Register an adapter with the global registry."""
    _registry.register(name, adapter_class)


def get_adapter(name: str) -> Type[ModelAdapter]:
    """Get an adapter class from the global registry."""
    return _registry.get(name)


def list_adapters() -> List[str]:
    """List adapter names in the global registry."""
    return _registry.list_adapters()


def wrap_model(model: Any) -> ModelAdapter:
    """Wrap a fitted model using the global registry."""
    return _registry.wrap(model)
