"""Block nesting depth per function unit."""

from typing import Any

from ..config import DEFAULT_THRESHOLDS, ThresholdConfig
from ..math import Scoring
from ..models import EMPTY_EVALUATION, Evaluation, IssueCategory
from ..source import FunctionUnit, ParsedSource, indent_width
from .base import MetricEvaluator


def brace_depth(unit: FunctionUnit) -> int:
    """Deepest brace nesting inside the function's own block."""
    depth = 0
    deepest = 0
    for line in unit.lines:
        for ch in line:
            if ch == "{":
                depth += 1
                deepest = max(deepest, depth)
            elif ch == "}":
                depth -= 1
    return max(0, deepest - 1)


def indent_depth(unit: FunctionUnit) -> int:
    """Deepest stack of block-opening lines (ending in ':') in the body."""
    stack: list[int] = []
    deepest = 0
    for line in unit.body:
        stripped = line.strip()
        if not stripped:
            continue
        width = indent_width(line)
        while stack and stack[-1] >= width:
            stack.pop()
        if stripped.endswith(":"):
            stack.append(width)
            deepest = max(deepest, len(stack))
    return deepest


class StructureEvaluator(MetricEvaluator):
    name = "structure"
    display_name = "Code Structure"
    description = "Maximum block nesting depth per function"
    category = IssueCategory.STRUCTURE
    default_weight = 0.15

    def __init__(self, thresholds: ThresholdConfig = DEFAULT_THRESHOLDS):
        self.threshold = thresholds.nesting_threshold
        self.scale = thresholds.nesting_scale

    def evaluate(self, source: ParsedSource, prepared: Any = None) -> Evaluation:
        units = source.functions
        if not units:
            return EMPTY_EVALUATION

        measure = indent_depth if source.profile.block_mode == "indent" else brace_depth
        badness = []
        issues = []
        for unit in units:
            depth = measure(unit)
            badness.append(Scoring.saturate(depth - self.threshold, self.scale))
            if depth > self.threshold:
                issues.append(
                    self.issue(
                        f"Function '{unit.name}' nests blocks {depth} levels deep "
                        f"(threshold {self.threshold})",
                        unit.start_line,
                    )
                )

        return Evaluation(score=sum(badness) / len(badness), issues=tuple(issues))
