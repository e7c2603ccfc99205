"""The Analyzer: prepare, fan out per file, aggregate."""

from enum import Enum
from threading import Lock
from typing import Any, Dict, List, Optional, Sequence

from ..config import AnalysisConfig
from ..exceptions import AnalysisInProgressError
from ..logging_config import get_logger
from ..metrics.registry import MetricRegistry, build_default_registry
from ..models import AnalysisResult, FileAnalysisResult, SkippedFile
from ..source import ParsedSource, SourceFile
from .aggregator import ScoreAggregator
from .runner import DISABLED, FileAnalysisRunner

logger = get_logger(__name__)


class AnalyzerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


class Analyzer:
    """Score a set of source files.

    One run goes IDLE -> RUNNING -> COMPLETED. A completed analyzer can run
    again; calling ``run`` while a run is in progress raises
    ``AnalysisInProgressError``.

    Example:
        >>> analyzer = Analyzer()
        >>> result = analyzer.run([SourceFile("a.py", "x = 1\\n")])
        >>> result.total_files
        1
    """

    def __init__(
        self,
        registry: Optional[MetricRegistry] = None,
        config: Optional[AnalysisConfig] = None,
    ):
        self.config = config or AnalysisConfig()
        self.registry = registry or build_default_registry(self.config)
        self.runner = FileAnalysisRunner(
            self.registry,
            workers=self.config.workers,
            timeout_seconds=self.config.timeout_seconds,
        )
        self.aggregator = ScoreAggregator(self.registry)
        self._state = AnalyzerState.IDLE
        self._state_lock = Lock()

    @property
    def state(self) -> AnalyzerState:
        return self._state

    def run(self, sources: Sequence[SourceFile]) -> AnalysisResult:
        with self._state_lock:
            if self._state is AnalyzerState.RUNNING:
                raise AnalysisInProgressError()
            self._state = AnalyzerState.RUNNING

        try:
            result = self._run(sources)
        except BaseException:
            self._state = AnalyzerState.IDLE
            raise

        self._state = AnalyzerState.COMPLETED
        return result

    def _run(self, sources: Sequence[SourceFile]) -> AnalysisResult:
        inputs: List[Any] = [
            ParsedSource.from_source(s) if s.readable else s for s in sources
        ]
        parsed = [item for item in inputs if isinstance(item, ParsedSource)]
        logger.debug(f"Analyzing {len(parsed)} of {len(sources)} files")

        prepared = self._prepare(parsed)
        outcomes = self.runner.run(inputs, prepared)

        files = [o for o in outcomes if isinstance(o, FileAnalysisResult)]
        skipped = [o for o in outcomes if isinstance(o, SkippedFile)]
        result = self.aggregator.aggregate(files, skipped)

        logger.info(
            f"Analyzed {result.total_files} files ({result.total_lines} lines), "
            f"skipped {len(skipped)}, score {result.code_quality_score:.3f}"
        )
        return result

    def _prepare(self, parsed: Sequence[ParsedSource]) -> Dict[str, Any]:
        """Cross-file state per metric; a failing prepare disables that metric."""
        prepared: Dict[str, Any] = {}
        for entry in self.registry:
            try:
                prepared[entry.name] = entry.evaluator.prepare(parsed)
            except Exception as e:
                logger.warning(f"Metric '{entry.name}' failed to prepare: {e}")
                prepared[entry.name] = DISABLED
        return prepared

