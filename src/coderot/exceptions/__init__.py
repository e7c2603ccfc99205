"""Exception hierarchy for coderot."""

from .analysis import (
    AnalysisError,
    AnalysisInProgressError,
    ParsingError,
)
from .base import CodeRotError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
)

__all__ = [
    "CodeRotError",
    "AnalysisError",
    "AnalysisInProgressError",
    "ParsingError",
    "ConfigurationError",
    "InvalidConfigError",
    "InvalidPathError",
]
