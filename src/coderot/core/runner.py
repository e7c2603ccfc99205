"""Per-file fan-out: every registered metric on every file."""

import os
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from ..logging_config import get_logger
from ..math import Scoring
from ..metrics.registry import MetricRegistry
from ..models import FileAnalysisResult, Issue, SkippedFile
from ..source import ParsedSource, SourceFile

logger = get_logger(__name__)

FileOutcome = Union[FileAnalysisResult, SkippedFile]

# Below this many files the pool overhead is not worth it
_PARALLEL_MIN_FILES = 10

# Prepared state of a metric whose prepare step failed; it scores 0 everywhere
DISABLED = object()


def _default_workers() -> int:
    return min(32, (os.cpu_count() or 1) + 4)


class FileAnalysisRunner:
    """Evaluate files independently and collect results in input order.

    A failing evaluator only costs its own (file, metric) pair: the pair
    scores 0 with no issues and a warning is logged. Unreadable files, and
    files still evaluating ``timeout_seconds`` after their evaluation
    started, are returned as ``SkippedFile``.
    """

    def __init__(
        self,
        registry: MetricRegistry,
        workers: Optional[int] = None,
        timeout_seconds: float = 30.0,
        min_parallel_files: int = _PARALLEL_MIN_FILES,
    ):
        self.registry = registry
        self.workers = workers or _default_workers()
        self.timeout_seconds = timeout_seconds
        self.min_parallel_files = min_parallel_files

    def analyze_file(
        self, source: ParsedSource, prepared: Optional[Mapping[str, Any]] = None
    ) -> FileAnalysisResult:
        prepared = prepared or {}
        scores = {}
        issues: List[Issue] = []
        for entry in self.registry:
            state = prepared.get(entry.name)
            if state is DISABLED:
                scores[entry.name] = 0.0
                continue
            try:
                evaluation = entry.evaluator.evaluate(source, state)
            except Exception as e:
                logger.warning(f"Metric '{entry.name}' failed on {source.path}: {e}")
                scores[entry.name] = 0.0
                continue
            scores[entry.name] = Scoring.clamp(evaluation.score)
            issues.extend(evaluation.issues)

        return FileAnalysisResult(
            file_path=source.path,
            file_score=self.registry.weighted_score(scores),
            issues=tuple(issues),
            metric_scores=scores,
            lines=source.line_count,
        )

    def run(
        self,
        sources: Sequence[Union[SourceFile, ParsedSource]],
        prepared: Optional[Mapping[str, Any]] = None,
    ) -> List[FileOutcome]:
        """Analyze every file; outcome ``i`` belongs to ``sources[i]``."""
        outcomes: List[Optional[FileOutcome]] = [None] * len(sources)
        pending = []
        for i, source in enumerate(sources):
            if isinstance(source, ParsedSource):
                pending.append((i, source))
            elif source.readable:
                pending.append((i, ParsedSource.from_source(source)))
            else:
                reason = source.error or "unreadable"
                logger.warning(f"Skipping {source.path}: {reason}")
                outcomes[i] = SkippedFile(path=source.path, reason=reason)

        if self.workers == 1 or len(pending) < self.min_parallel_files:
            for i, parsed in pending:
                outcomes[i] = self.analyze_file(parsed, prepared)
        else:
            self._run_pooled(pending, prepared, outcomes)

        return [outcome for outcome in outcomes if outcome is not None]

    def _run_pooled(self, pending, prepared, outcomes) -> None:
        started: Dict[int, float] = {}

        def evaluate(index: int, parsed: ParsedSource) -> FileAnalysisResult:
            started[index] = time.monotonic()
            return self.analyze_file(parsed, prepared)

        executors = []
        try:
            while pending:
                executor = ThreadPoolExecutor(max_workers=self.workers)
                executors.append(executor)
                futures = [(i, parsed, executor.submit(evaluate, i, parsed)) for i, parsed in pending]
                pending = []
                for i, parsed, future in futures:
                    if future.cancelled():
                        continue
                    result = self._await(future, started, i)
                    if result is not None:
                        outcomes[i] = result
                        continue
                    logger.warning(f"Skipping {parsed.path}: timed out after {self.timeout_seconds}s")
                    outcomes[i] = SkippedFile(path=parsed.path, reason="timed out")
                    # The stuck worker is lost; files still queued move to a fresh pool
                    pending.extend(
                        (j, p) for j, p, f in futures if j > i and not f.cancelled() and f.cancel()
                    )
        finally:
            for executor in executors:
                executor.shutdown(wait=False, cancel_futures=True)

    def _await(self, future, started, index) -> Optional[FileAnalysisResult]:
        """Result of one file, or None once it has run longer than the timeout.

        The bound counts from when the file starts evaluating, not from when
        it was queued.
        """
        while True:
            begun = started.get(index)
            if begun is None:
                wait = self.timeout_seconds
            else:
                wait = max(0.0, begun + self.timeout_seconds - time.monotonic())
            try:
                return future.result(timeout=wait)
            except FutureTimeoutError:
                if begun is not None:
                    return None
