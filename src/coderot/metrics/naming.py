"""Naming conventions for declared functions and variables."""

import re
from typing import Any, Optional

from ..config import DEFAULT_THRESHOLDS, ThresholdConfig
from ..models import EMPTY_EVALUATION, Evaluation, IssueCategory
from ..source import ParsedSource
from .base import MetricEvaluator

_SCREAMING = re.compile(r"^_*[A-Z][A-Z0-9]*(?:_[A-Z0-9]+)*_*$")
_STYLE_LABELS = {"snake": "snake_case", "camel": "camelCase"}
_STYLES = {
    "snake": re.compile(r"^_*[a-z][a-z0-9_]*$"),
    "camel": re.compile(r"^_*\$?[A-Za-z][A-Za-z0-9]*$"),
}


def matches_style(name: str, style: Optional[str]) -> bool:
    """True when ``name`` follows ``style``; constants pass either style."""
    if style is None or _SCREAMING.match(name):
        return True
    pattern = _STYLES.get(style)
    return pattern is None or bool(pattern.match(name))


class NamingEvaluator(MetricEvaluator):
    name = "naming"
    display_name = "Naming Conventions"
    description = "Function name length, single-letter variables and casing style"
    category = IssueCategory.NAMING
    default_weight = 0.10

    def __init__(self, thresholds: ThresholdConfig = DEFAULT_THRESHOLDS):
        self.min_function_length = thresholds.naming_min_function_length
        self.max_issues = thresholds.naming_max_issues

    def _collect(self, source: ParsedSource):
        """Yield (kind, name, line, only_in_loops) per identifier, first declaration only."""
        profile = source.profile
        seen: dict[str, tuple[str, int]] = {}
        loop_names: set[str] = set()
        other_uses: set[str] = set()

        for line_index, name, _ in source.declarations():
            seen.setdefault(name, ("function", line_index + 1))

        for index, line in enumerate(source.code_lines):
            if not line.strip():
                continue
            loop_spans = []
            for pattern in profile.loop_variable_patterns:
                for match in re.finditer(pattern, line):
                    loop_spans.append(match.span())
                    for part in re.split(r"[\s,()]+", match.group("names")):
                        if part:
                            loop_names.add(part)
                            seen.setdefault(part, ("variable", index + 1))
            for pattern in profile.variable_patterns:
                for match in re.finditer(pattern, line):
                    # `for i := 0` and `for (let i = 0` also read as declarations
                    position = match.start("name")
                    if any(start <= position < end for start, end in loop_spans):
                        continue
                    name = match.group("name")
                    other_uses.add(name)
                    seen.setdefault(name, ("variable", index + 1))

        for name, (kind, line) in seen.items():
            if name == "_" or name in profile.keywords:
                continue
            only_in_loops = name in loop_names and name not in other_uses
            yield kind, name, line, only_in_loops

    def _violation(self, kind: str, name: str, only_in_loops: bool, style: Optional[str]):
        if kind == "function" and len(name.strip("_")) < self.min_function_length:
            return (
                f"Function name '{name}' is shorter than "
                f"{self.min_function_length} characters"
            )
        if kind == "variable" and len(name) == 1 and not only_in_loops:
            return f"Single-letter variable '{name}' outside a loop header"
        if not matches_style(name, style):
            label = _STYLE_LABELS.get(style, style)
            return f"{kind.capitalize()} '{name}' does not follow {label} naming"
        return None

    def evaluate(self, source: ParsedSource, prepared: Any = None) -> Evaluation:
        style = source.profile.naming_style
        identifiers = list(self._collect(source))
        if not identifiers:
            return EMPTY_EVALUATION

        violations = []
        for kind, name, line, only_in_loops in identifiers:
            message = self._violation(kind, name, only_in_loops, style)
            if message is not None:
                violations.append((message, line))

        if not violations:
            return EMPTY_EVALUATION

        issues = [self.issue(message, line) for message, line in violations[: self.max_issues]]
        remaining = len(violations) - self.max_issues
        if remaining > 0:
            issues.append(self.issue(f"{remaining} more naming violations"))

        return Evaluation(score=len(violations) / len(identifiers), issues=tuple(issues))
