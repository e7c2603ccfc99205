"""Metric evaluators and the registry that orders and weights them."""

from .base import MetricEvaluator
from .comments import CommentEvaluator
from .complexity import ComplexityEvaluator
from .duplication import DuplicationEvaluator
from .error_handling import ErrorHandlingEvaluator
from .naming import NamingEvaluator
from .registry import (
    DEFAULT_EVALUATORS,
    MetricRegistry,
    RegisteredMetric,
    build_default_registry,
)
from .structure import StructureEvaluator

__all__ = [
    "MetricEvaluator",
    "ComplexityEvaluator",
    "StructureEvaluator",
    "CommentEvaluator",
    "NamingEvaluator",
    "DuplicationEvaluator",
    "ErrorHandlingEvaluator",
    "MetricRegistry",
    "RegisteredMetric",
    "DEFAULT_EVALUATORS",
    "build_default_registry",
]
