"""Fan-in: per-file results to repository metric scores and one total."""

from typing import Sequence

from ..math import Scoring
from ..metrics.registry import MetricRegistry
from ..models import AnalysisResult, FileAnalysisResult, MetricResult, SkippedFile


class ScoreAggregator:
    """Reduce file results with the same weighted-mean law used per file."""

    def __init__(self, registry: MetricRegistry):
        self.registry = registry

    def aggregate(
        self,
        files: Sequence[FileAnalysisResult],
        skipped: Sequence[SkippedFile] = (),
    ) -> AnalysisResult:
        if not files:
            return AnalysisResult(skipped_files=tuple(skipped))

        names = self.registry.names
        rows = [[f.metric_scores.get(name, 0.0) for name in names] for f in files]
        means = Scoring.column_means(rows, len(names))

        metrics = {
            entry.name: MetricResult(
                name=entry.name,
                weight=float(entry.weight),
                score=score,
                description=entry.description,
                display_name=entry.display_name,
            )
            for entry, score in zip(self.registry, means)
        }

        return AnalysisResult(
            total_files=len(files),
            total_lines=sum(f.lines for f in files),
            metrics=metrics,
            files_analyzed=tuple(files),
            code_quality_score=self.registry.weighted_score(dict(zip(names, means))),
            skipped_files=tuple(skipped),
        )
