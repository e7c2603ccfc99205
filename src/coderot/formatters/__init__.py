"""Report renderers for analysis results."""

from .base import BaseFormatter
from .json_formatter import JsonFormatter
from .levels import QUALITY_LEVELS, QualityLevel, quality_level, score_band
from .rich_formatter import ReportOptions, RichFormatter, shorten_path
from .theme import DEFAULT_THEME, PLAIN_THEME, Theme

__all__ = [
    "BaseFormatter",
    "JsonFormatter",
    "RichFormatter",
    "ReportOptions",
    "QUALITY_LEVELS",
    "QualityLevel",
    "quality_level",
    "score_band",
    "shorten_path",
    "DEFAULT_THEME",
    "PLAIN_THEME",
    "Theme",
]
