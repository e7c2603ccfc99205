"""
coderot - heuristic code quality scoring

Scores every source file on six quality dimensions (complexity, nesting,
comments, naming, duplication, error handling) and folds them into one
weighted repository score between 0 (clean) and 1 (rotten).
"""

__version__ = "0.1.0"

from .api import analyze_path
from .core import Analyzer
from .models import AnalysisResult, FileAnalysisResult, Issue, IssueCategory, MetricResult
from .source import SourceFile

__all__ = [
    "analyze_path",  # Main entry point
    "Analyzer",  # Direct engine access with custom registries
    "AnalysisResult",
    "FileAnalysisResult",
    "Issue",
    "IssueCategory",
    "MetricResult",
    "SourceFile",
]
