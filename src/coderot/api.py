"""Public API for coderot.

Example:
    >>> from coderot import analyze_path
    >>>
    >>> result = analyze_path("/path/to/code")
    >>> result.code_quality_score  # 0.0 (clean) to 1.0 (rotten)
    >>>
    >>> # With overrides
    >>> result = analyze_path("/path/to/code", workers=4, timeout_seconds=10)
"""

from pathlib import Path
from typing import Optional, Union

from .config import AnalysisConfig, load_config
from .core import Analyzer
from .logging_config import get_logger
from .models import AnalysisResult
from .scanning import discover_sources

logger = get_logger(__name__)


def analyze_path(
    root: Union[str, Path] = ".",
    config: Optional[AnalysisConfig] = None,
    config_file: Optional[Path] = None,
    **overrides,
) -> AnalysisResult:
    """Discover the source files under ``root`` and score them.

    Args:
        root: Directory (or single file) to analyze
        config: Ready-made configuration; when given, ``config_file`` and
            ``overrides`` are ignored
        config_file: Optional explicit config file path
        **overrides: Configuration overrides (e.g. workers=4)

    Raises:
        CodeRotError: If configuration or the path is invalid
    """
    if config is None:
        config = load_config(config_file=config_file, **overrides)
    logger.info(f"Starting analysis of {root}")

    sources = discover_sources(Path(root), config)
    return Analyzer(config=config).run(sources)
