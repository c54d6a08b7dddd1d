"""
Model support for ggformula.

Wraps already fitted models so effect sizes can be computed from their
predictions.
"""

from .base import (
    ModelAdapter,
    AdapterRegistry,
    register_adapter,
    get_adapter,
    list_adapters,
    wrap_model,
)
from .sklearn_adapter import SklearnModelAdapter
from .effect_size import EffectSizeResult, effect_size, target_variable

register_adapter(SklearnModelAdapter.name, SklearnModelAdapter)

__all__ = [
    "ModelAdapter",
    "AdapterRegistry",
    "SklearnModelAdapter",
    "register_adapter",
    "get_adapter",
    "list_adapters",
    "wrap_model",
    "EffectSizeResult",
    "effect_size",
    "target_variable",
]
