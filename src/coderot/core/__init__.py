"""Analysis engine: runner, aggregator and the Analyzer facade."""

from .aggregator import ScoreAggregator
from .analyzer import Analyzer, AnalyzerState
from .runner import FileAnalysisRunner, FileOutcome

__all__ = ["Analyzer", "AnalyzerState", "FileAnalysisRunner", "FileOutcome", "ScoreAggregator"]
