"""Comment density: comment-bearing lines per line of code."""

from typing import Any

from ..config import DEFAULT_THRESHOLDS, ThresholdConfig
from ..math import Scoring
from ..models import EMPTY_EVALUATION, Evaluation, IssueCategory
from ..source import ParsedSource
from .base import MetricEvaluator


class CommentEvaluator(MetricEvaluator):
    name = "comments"
    display_name = "Comment Coverage"
    description = "Ratio of comment lines to code lines against a target ratio"
    category = IssueCategory.COMMENT
    default_weight = 0.15

    def __init__(self, thresholds: ThresholdConfig = DEFAULT_THRESHOLDS):
        self.target = thresholds.comment_target_ratio
        self.min_code_lines = thresholds.comment_min_code_lines

    def evaluate(self, source: ParsedSource, prepared: Any = None) -> Evaluation:
        code_lines = source.code_line_count
        if code_lines == 0 or code_lines < self.min_code_lines:
            return EMPTY_EVALUATION

        comment_lines = len(source.comment_lines)
        ratio = comment_lines / code_lines
        if ratio >= self.target:
            return EMPTY_EVALUATION

        score = Scoring.clamp((self.target - ratio) / self.target)
        issue = self.issue(
            f"Comment ratio {ratio:.1%} is below target {self.target:.0%} "
            f"({comment_lines} comment lines for {code_lines} lines of code)"
        )
        return Evaluation(score=score, issues=(issue,))
