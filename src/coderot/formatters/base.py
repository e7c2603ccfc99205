"""Base formatter interface for coderot output rendering."""

from abc import ABC, abstractmethod

from ..models import AnalysisResult


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, result: AnalysisResult) -> None:
        """Write the report to its output stream."""

    @abstractmethod
    def format(self, result: AnalysisResult) -> str:
        """Return the report as a string."""
