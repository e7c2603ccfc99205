"""Configuration loading and management for coderot.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig / ThresholdConfig)
    2. Global config (~/.coderot.toml)
    3. Project config (./coderot.toml)
    4. Explicit config file
    5. Environment variables (CODEROT_* prefix)
    6. Keyword overrides (typically CLI flags)

Example:
    >>> config = load_config(workers=4)
    >>> config.workers
    4
    >>> config.thresholds.complexity_threshold
    10
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import CodeRotError

Verbosity = Literal["quiet", "normal", "verbose"]


@dataclass(frozen=True)
class ThresholdConfig:
    """Heuristic thresholds used by the metric evaluators.

    Every threshold is a soft limit: values at or below it cost nothing,
    values above it are pushed through a saturating curve so the badness
    score stays in [0, 1].

    Attributes:
        Complexity:
            complexity_threshold: Branch count per function considered fine
            complexity_scale: Excess branches at which badness reaches ~63%

        Structure:
            nesting_threshold: Block depth per function considered fine
            nesting_scale: Excess depth at which badness reaches ~63%

        Comments:
            comment_target_ratio: Comment lines per code line to aim for
            comment_min_code_lines: Files smaller than this are not judged

        Naming:
            naming_min_function_length: Shortest acceptable function name
            naming_max_issues: Individual naming issues before summarizing

        Duplication:
            duplication_block_size: Normalized lines per hashed window

        Error handling:
            error_check_window: Lines after a call searched for a check
    """

    # === Complexity ===
    complexity_threshold: int = 10
    complexity_scale: float = 10.0

    # === Structure ===
    nesting_threshold: int = 4
    nesting_scale: float = 3.0

    # === Comments ===
    comment_target_ratio: float = 0.15
    comment_min_code_lines: int = 10

    # === Naming ===
    naming_min_function_length: int = 3
    naming_max_issues: int = 5

    # === Duplication ===
    duplication_block_size: int = 6

    # === Error handling ===
    error_check_window: int = 3

    def __post_init__(self) -> None:
        """Validate threshold configuration."""
        if self.complexity_threshold < 1:
            raise ValueError("complexity_threshold must be at least 1")
        if self.nesting_threshold < 0:
            raise ValueError("nesting_threshold must be non-negative")

        for field_name in ("complexity_scale", "nesting_scale"):
            value = getattr(self, field_name)
            if not value > 0 or math.isinf(value):
                raise ValueError(f"{field_name} must be a positive finite number")

        if not 0.0 < self.comment_target_ratio <= 1.0:
            raise ValueError("comment_target_ratio must be in (0.0, 1.0]")
        if self.comment_min_code_lines < 0:
            raise ValueError("comment_min_code_lines must be non-negative")

        if self.naming_min_function_length < 1:
            raise ValueError("naming_min_function_length must be at least 1")
        if self.naming_max_issues < 0:
            raise ValueError("naming_max_issues must be non-negative")

        if self.duplication_block_size < 2:
            raise ValueError("duplication_block_size must be at least 2")
        if self.error_check_window < 1:
            raise ValueError("error_check_window must be at least 1")


DEFAULT_THRESHOLDS = ThresholdConfig()


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for analysis execution.

    Attributes:
        Performance tuning:
            workers: Number of parallel workers (None = auto-detect)
            timeout_seconds: Longest wait for a single file's evaluation

        Scoring:
            metric_weights: Per-metric weight overrides keyed by metric name

        File filtering:
            exclude_patterns: Glob patterns (relative POSIX paths) to skip
            max_file_size_mb: Maximum file size to analyze (MB)
            allow_hidden_files: Include files and directories starting with .

        Output control:
            verbosity: Logging verbosity level
            log_file: File that receives a DEBUG-level log of the run

        Thresholds:
            thresholds: Nested ThresholdConfig
    """

    # Performance tuning
    workers: Optional[int] = None
    timeout_seconds: float = 30.0

    # Scoring
    metric_weights: dict[str, float] = field(default_factory=dict)

    # File filtering
    exclude_patterns: list[str] = field(
        default_factory=lambda: [
            "vendor/*",
            "node_modules/*",
            "dist/*",
            "build/*",
            "target/*",
            "venv/*",
            "__pycache__/*",
            "*.min.js",
            "*.bundle.js",
            "*.generated.*",
            "*_pb2.py",
        ]
    )
    max_file_size_mb: float = 5.0
    allow_hidden_files: bool = False

    # Output control
    verbosity: Verbosity = "normal"
    log_file: Optional[str] = None

    # Algorithm thresholds (nested config)
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.workers is not None and self.workers < 1:
            raise ValueError("workers must be at least 1")
        if not self.timeout_seconds > 0:
            raise ValueError("timeout_seconds must be positive")
        if self.max_file_size_mb <= 0:
            raise ValueError("max_file_size_mb must be positive")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError(f"verbosity must be quiet, normal or verbose, got {self.verbosity!r}")

        for name, weight in self.metric_weights.items():
            if not isinstance(weight, (int, float)) or not weight > 0 or math.isinf(weight):
                raise ValueError(f"weight for {name!r} must be a positive finite number")

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options keep lower layers.

    Returns:
        Validated AnalysisConfig instance

    Raises:
        CodeRotError: If a config file is invalid or missing

    Example:
        >>> config = load_config(config_file=Path("coderot.toml"))
    """
    merged: dict = {}

    global_config = Path.home() / ".coderot.toml"
    if global_config.exists():
        try:
            _merge_layer(merged, _load_toml_file(global_config))
        except Exception as e:
            raise CodeRotError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / "coderot.toml"
    if project_config.exists():
        try:
            _merge_layer(merged, _load_toml_file(project_config))
        except Exception as e:
            raise CodeRotError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise CodeRotError(f"Config file not found: {config_file}")
        try:
            _merge_layer(merged, _load_toml_file(config_file))
        except Exception as e:
            raise CodeRotError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    # Convert verbosity boolean flags to string
    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    _merge_layer(merged, {k: v for k, v in overrides.items() if v is not None})

    thresholds = merged.pop("thresholds", None)
    if thresholds is not None:
        if isinstance(thresholds, dict):
            try:
                merged["thresholds"] = ThresholdConfig(**thresholds)
            except (TypeError, ValueError) as e:
                raise CodeRotError(f"Invalid [thresholds] config: {e}")
        elif isinstance(thresholds, ThresholdConfig):
            merged["thresholds"] = thresholds

    weights = merged.pop("weights", None)
    if weights is not None:
        merged["metric_weights"] = {**merged.get("metric_weights", {}), **weights}

    try:
        return AnalysisConfig(**merged)
    except (TypeError, ValueError) as e:
        raise CodeRotError(f"Invalid configuration: {e}")


def _merge_layer(merged: dict, layer: dict) -> None:
    """Merge one config layer; nested tables merge key by key."""
    for key, value in layer.items():
        if key in ("thresholds", "weights") and isinstance(value, dict):
            current = merged.get(key)
            if isinstance(current, dict):
                merged[key] = {**current, **value}
                continue
        merged[key] = value


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from CODEROT_* environment variables.

    Supported environment variables:
        CODEROT_WORKERS: int
        CODEROT_TIMEOUT_SECONDS: float
        CODEROT_MAX_FILE_SIZE_MB: float
        CODEROT_ALLOW_HIDDEN_FILES: bool (true/false/1/0)
        CODEROT_VERBOSITY: quiet/normal/verbose
        CODEROT_LOG_FILE: path

    Returns:
        Dict of field_name -> parsed_value for any CODEROT_* vars found.
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"CODEROT_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint, field_name)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise CodeRotError(f"Invalid {env_key}: {e}")

    return result


def _parse_env_value(value: str, type_hint: Any, field_name: str) -> Any:
    """Parse environment variable string to the correct type.

    Returns:
        Parsed value or None if the field can't be set from the environment

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    # Lists, dicts and nested dataclasses are file-only settings
    if origin in (list, dict) or type_hint in (list, dict, ThresholdConfig):
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        CodeRotError: If no TOML parser is available
        Exception: If TOML parsing fails
    """
    try:
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise CodeRotError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
