"""Cyclomatic complexity per function unit."""

import re
from functools import lru_cache
from typing import Any

from ..config import DEFAULT_THRESHOLDS, ThresholdConfig
from ..languages import LanguageProfile
from ..math import Scoring
from ..models import EMPTY_EVALUATION, Evaluation, IssueCategory
from ..source import FunctionUnit, ParsedSource
from .base import MetricEvaluator


@lru_cache(maxsize=None)
def _branch_pattern(profile: LanguageProfile) -> re.Pattern:
    parts = []
    if profile.branch_keywords:
        parts.append(r"\b(?:" + "|".join(map(re.escape, profile.branch_keywords)) + r")\b")
    parts.extend(profile.branch_operators)
    if not parts:
        return re.compile(r"(?!x)x")
    return re.compile("|".join(parts))


def function_complexity(unit: FunctionUnit, profile: LanguageProfile) -> int:
    """1 + number of branch points in the unit's code."""
    pattern = _branch_pattern(profile)
    return 1 + sum(len(pattern.findall(line)) for line in unit.lines)


class ComplexityEvaluator(MetricEvaluator):
    name = "complexity"
    display_name = "Cyclomatic Complexity"
    description = "Branching constructs per function (conditionals, loops, case arms, boolean chains)"
    category = IssueCategory.COMPLEXITY
    default_weight = 0.30

    def __init__(self, thresholds: ThresholdConfig = DEFAULT_THRESHOLDS):
        self.threshold = thresholds.complexity_threshold
        self.scale = thresholds.complexity_scale

    def evaluate(self, source: ParsedSource, prepared: Any = None) -> Evaluation:
        units = source.functions
        if not units:
            return EMPTY_EVALUATION

        badness = []
        issues = []
        for unit in units:
            value = function_complexity(unit, source.profile)
            badness.append(Scoring.saturate(value - self.threshold, self.scale))
            if value > self.threshold:
                issues.append(
                    self.issue(
                        f"Function '{unit.name}' has cyclomatic complexity {value} "
                        f"(threshold {self.threshold})",
                        unit.start_line,
                    )
                )

        return Evaluation(score=sum(badness) / len(badness), issues=tuple(issues))
