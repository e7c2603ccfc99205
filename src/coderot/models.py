"""Data models for coderot.

Everything here is immutable once built: evaluators hand back
``Evaluation`` values, the runner freezes them into ``FileAnalysisResult``
records and the aggregator produces exactly one ``AnalysisResult`` per run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional


class IssueCategory(str, Enum):
    """Which quality dimension an issue belongs to."""

    COMPLEXITY = "complexity"
    COMMENT = "comment"
    NAMING = "naming"
    STRUCTURE = "structure"
    DUPLICATION = "duplication"
    ERROR = "error"
    OTHER = "other"


@dataclass(frozen=True)
class Issue:
    """A single finding, tagged by the evaluator that produced it."""

    category: IssueCategory
    message: str
    metric: str = ""
    line: Optional[int] = None

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "message": self.message,
            "metric": self.metric,
            "line": self.line,
        }


@dataclass(frozen=True)
class Evaluation:
    """What one evaluator says about one file."""

    score: float = 0.0
    issues: tuple[Issue, ...] = ()


EMPTY_EVALUATION = Evaluation()


def _readonly(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class MetricResult:
    """Repository-level score for one metric. Score is badness in [0, 1]."""

    name: str
    weight: float
    score: float
    description: str
    display_name: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "display_name": self.display_name or self.name,
            "weight": self.weight,
            "score": self.score,
            "description": self.description,
        }


@dataclass(frozen=True)
class FileAnalysisResult:
    """Per-file outcome: weighted score, per-metric scores and issues."""

    file_path: str
    file_score: float
    issues: tuple[Issue, ...] = ()
    metric_scores: Mapping[str, float] = field(default_factory=dict)
    lines: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "issues", tuple(self.issues))
        object.__setattr__(self, "metric_scores", _readonly(self.metric_scores))

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_path": self.file_path,
            "file_score": self.file_score,
            "lines": self.lines,
            "metric_scores": dict(self.metric_scores),
            "issues": [issue.to_dict() for issue in self.issues],
        }


@dataclass(frozen=True)
class SkippedFile:
    """A file excluded from every aggregate, with the reason."""

    path: str
    reason: str


@dataclass(frozen=True)
class AnalysisResult:
    """The one output record of an analyzer run."""

    total_files: int = 0
    total_lines: int = 0
    metrics: Mapping[str, MetricResult] = field(default_factory=dict)
    files_analyzed: tuple[FileAnalysisResult, ...] = ()
    code_quality_score: float = 0.0
    skipped_files: tuple[SkippedFile, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "metrics", _readonly(self.metrics))
        object.__setattr__(self, "files_analyzed", tuple(self.files_analyzed))
        object.__setattr__(self, "skipped_files", tuple(self.skipped_files))

    @property
    def total_issues(self) -> int:
        return sum(len(f.issues) for f in self.files_analyzed)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_files": self.total_files,
            "total_lines": self.total_lines,
            "code_quality_score": self.code_quality_score,
            "metrics": {name: m.to_dict() for name, m in self.metrics.items()},
            "files_analyzed": [f.to_dict() for f in self.files_analyzed],
            "skipped_files": [{"path": s.path, "reason": s.reason} for s in self.skipped_files],
        }
