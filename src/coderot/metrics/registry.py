"""Metric registry: the single source of truth for which metrics run.

Adding a new metric requires:
1. Subclass MetricEvaluator in its own module under ``coderot.metrics``.
2. Add it to DEFAULT_EVALUATORS below.
The runner, aggregator and formatters pick it up automatically.
"""

import math
from dataclasses import dataclass
from typing import Iterator, List, Mapping, Optional, Sequence, Type

from ..config import AnalysisConfig
from ..exceptions import InvalidConfigError
from ..math import Scoring
from .base import MetricEvaluator
from .comments import CommentEvaluator
from .complexity import ComplexityEvaluator
from .duplication import DuplicationEvaluator
from .error_handling import ErrorHandlingEvaluator
from .naming import NamingEvaluator
from .structure import StructureEvaluator


@dataclass(frozen=True)
class RegisteredMetric:
    evaluator: MetricEvaluator
    weight: float
    display_name: str
    description: str

    @property
    def name(self) -> str:
        return self.evaluator.name

    @classmethod
    def of(cls, evaluator: MetricEvaluator, weight: Optional[float] = None) -> "RegisteredMetric":
        """Register an evaluator with its class defaults."""
        return cls(
            evaluator=evaluator,
            weight=evaluator.default_weight if weight is None else weight,
            display_name=evaluator.display_name,
            description=evaluator.description,
        )


class MetricRegistry:
    """Ordered, read-only set of weighted evaluators.

    Raises:
        InvalidConfigError: On an empty registry, a weight that is not a
            positive finite number, or a repeated metric name.
    """

    def __init__(self, entries: Sequence[RegisteredMetric]):
        entries = tuple(entries)
        if not entries:
            raise InvalidConfigError("metrics", [], "registry needs at least one metric")

        seen = set()
        for entry in entries:
            if not isinstance(entry.weight, (int, float)) or not (
                entry.weight > 0 and math.isfinite(entry.weight)
            ):
                raise InvalidConfigError(
                    f"weights.{entry.name}", entry.weight, "weight must be positive and finite"
                )
            if entry.name in seen:
                raise InvalidConfigError("metrics", entry.name, "duplicate metric name")
            seen.add(entry.name)

        self._entries = entries

    def __iter__(self) -> Iterator[RegisteredMetric]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, name: str) -> RegisteredMetric:
        for entry in self._entries:
            if entry.name == name:
                return entry
        raise KeyError(name)

    @property
    def names(self) -> List[str]:
        return [entry.name for entry in self._entries]

    @property
    def weights(self) -> List[float]:
        return [float(entry.weight) for entry in self._entries]

    @property
    def total_weight(self) -> float:
        return sum(self.weights)

    def weighted_score(self, scores: Mapping[str, float]) -> float:
        """sum(score * weight) / sum(weight) over every registered metric.

        Metrics missing from ``scores`` count as 0.
        """
        return Scoring.weighted_mean([scores.get(name, 0.0) for name in self.names], self.weights)


DEFAULT_EVALUATORS: List[Type[MetricEvaluator]] = [
    ComplexityEvaluator,
    StructureEvaluator,
    CommentEvaluator,
    NamingEvaluator,
    DuplicationEvaluator,
    ErrorHandlingEvaluator,
]


def build_default_registry(config: Optional[AnalysisConfig] = None) -> MetricRegistry:
    """The six built-in metrics with weights from ``config.metric_weights``."""
    config = config or AnalysisConfig()
    known = {cls.name for cls in DEFAULT_EVALUATORS}
    for name, weight in config.metric_weights.items():
        if name not in known:
            raise InvalidConfigError(f"weights.{name}", weight, "unknown metric name")

    return MetricRegistry(
        [
            RegisteredMetric.of(cls(config.thresholds), config.metric_weights.get(cls.name))
            for cls in DEFAULT_EVALUATORS
        ]
    )
