"""Analysis-related exceptions: heuristic parsing and run state."""

from .base import CodeRotError


class AnalysisError(CodeRotError):
    """Base class for analysis-related errors."""
    pass


class ParsingError(AnalysisError):
    """Raised when a heuristic cannot make sense of file content."""

    def __init__(self, filepath: str, language: str, reason: str):
        super().__init__(
            f"Failed to parse {language} file: {filepath}",
            details={"filepath": str(filepath), "language": language, "reason": reason},
        )
        self.filepath = filepath
        self.language = language
        self.reason = reason


class AnalysisInProgressError(AnalysisError):
    """Raised when run() is called on an analyzer that is already running."""

    def __init__(self) -> None:
        super().__init__("Analyzer is already running")
