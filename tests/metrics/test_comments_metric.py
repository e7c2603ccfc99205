"""Tests for the comment density evaluator."""

import pytest

from coderot.config import ThresholdConfig
from coderot.metrics.comments import CommentEvaluator
from coderot.models import IssueCategory


def _module(code_lines: int, comment_lines: int = 0) -> str:
    lines = [f"# note {i}" for i in range(comment_lines)]
    lines += [f"value_{i} = {i}" for i in range(code_lines)]
    return "\n".join(lines) + "\n"


class TestCommentEvaluator:
    def test_uncommented_file_scores_maximum(self, parse_code):
        result = CommentEvaluator().evaluate(parse_code("bare.py", _module(100)))

        assert result.score == pytest.approx(1.0)
        assert len(result.issues) == 1
        issue = result.issues[0]
        assert issue.category is IssueCategory.COMMENT
        assert "below target" in issue.message

    def test_well_commented_file_scores_zero(self, parse_code):
        result = CommentEvaluator().evaluate(parse_code("good.py", _module(10, 5)))
        assert result.score == 0.0
        assert result.issues == ()

    def test_partial_coverage(self, parse_code):
        # 20 code lines, 1 comment line: ratio 0.05 against target 0.15
        result = CommentEvaluator().evaluate(parse_code("some.py", _module(20, 1)))
        assert result.score == pytest.approx((0.15 - 0.05) / 0.15)

    def test_small_files_are_not_judged(self, parse_code):
        result = CommentEvaluator().evaluate(parse_code("tiny.py", _module(5)))
        assert result.score == 0.0
        assert result.issues == ()

    def test_empty_file(self, parse_code):
        assert CommentEvaluator().evaluate(parse_code("empty.py", "")).score == 0.0

    def test_monotonic_in_missing_comments(self, parse_code):
        evaluator = CommentEvaluator()
        scores = [evaluator.evaluate(parse_code("m.py", _module(20, n))).score for n in (3, 2, 1, 0)]
        assert scores == sorted(scores)

    def test_custom_target(self, parse_code):
        evaluator = CommentEvaluator(ThresholdConfig(comment_target_ratio=0.5))
        result = evaluator.evaluate(parse_code("half.py", _module(20, 5)))
        assert result.score == pytest.approx((0.5 - 0.25) / 0.5)
