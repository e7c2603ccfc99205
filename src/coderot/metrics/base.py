"""Base class for metric evaluators."""

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from ..models import Evaluation, Issue, IssueCategory
from ..source import ParsedSource


class MetricEvaluator(ABC):
    """One heuristic quality dimension.

    ``evaluate`` must be a pure function of its arguments: evaluators are
    shared by every worker thread and must not keep per-file state.
    """

    name: str
    display_name: str
    description: str
    category: IssueCategory
    default_weight: float

    def prepare(self, sources: Sequence[ParsedSource]) -> Any:
        """Build read-only state spanning all files before evaluation.

        The return value is passed unchanged to every ``evaluate`` call of
        the same run. Most metrics look at one file at a time and need none.
        """
        return None

    @abstractmethod
    def evaluate(self, source: ParsedSource, prepared: Any = None) -> Evaluation:
        ...

    def issue(self, message: str, line: Optional[int] = None) -> Issue:
        return Issue(category=self.category, message=message, metric=self.name, line=line)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
