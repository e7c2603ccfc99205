"""Tests for the cyclomatic complexity evaluator."""

import math

import pytest

from coderot.config import ThresholdConfig
from coderot.metrics.complexity import ComplexityEvaluator, function_complexity
from coderot.models import IssueCategory


def _branchy(count: int) -> str:
    lines = ["def branchy(x):"]
    for i in range(count):
        lines.append(f"    if x == {i}:")
        lines.append(f"        return {i}")
    lines.append("    return -1")
    return "\n".join(lines) + "\n"


class TestFunctionComplexity:
    def test_counts_keywords_and_boolean_operators(self, parse_code):
        source = parse_code(
            "check.py",
            """\
            def check(a, b):
                if a and b:
                    return 1
                elif a or b:
                    return 2
                for i in range(3):
                    pass
                return 0
            """,
        )
        (unit,) = source.functions
        assert function_complexity(unit, source.profile) == 6

    def test_javascript_operators(self, parse_code):
        source = parse_code("f.js", "function pick(a, b, c) { return a && b || c ? 1 : 2; }\n")
        (unit,) = source.functions
        assert function_complexity(unit, source.profile) == 4

    def test_keywords_in_strings_and_comments_ignored(self, parse_code):
        source = parse_code(
            "quiet.py",
            """\
            def quiet():
                # if this or that
                return "if and or while"
            """,
        )
        (unit,) = source.functions
        assert function_complexity(unit, source.profile) == 1


class TestComplexityEvaluator:
    def test_simple_function_scores_zero(self, parse_code):
        source = parse_code("simple.py", "def simple(x):\n    return x + 1\n")
        result = ComplexityEvaluator().evaluate(source)
        assert result.score == 0.0
        assert result.issues == ()

    def test_no_functions_scores_zero(self, parse_code):
        source = parse_code("consts.py", "A = 1\nB = 2\n")
        assert ComplexityEvaluator().evaluate(source).score == 0.0

    def test_function_over_threshold(self, parse_code):
        source = parse_code("branchy.py", _branchy(15))
        result = ComplexityEvaluator().evaluate(source)

        assert result.score == pytest.approx(1 - math.exp(-0.6))
        assert len(result.issues) == 1
        issue = result.issues[0]
        assert issue.category is IssueCategory.COMPLEXITY
        assert issue.metric == "complexity"
        assert "'branchy'" in issue.message
        assert "16" in issue.message
        assert issue.line == 1

    def test_score_is_mean_over_functions(self, parse_code):
        code = _branchy(15) + "\n\ndef simple(x):\n    return x\n"
        result = ComplexityEvaluator().evaluate(parse_code("mixed.py", code))
        assert result.score == pytest.approx((1 - math.exp(-0.6)) / 2)

    def test_threshold_is_configurable(self, parse_code):
        source = parse_code("branchy.py", _branchy(3))
        strict = ComplexityEvaluator(ThresholdConfig(complexity_threshold=2))
        assert strict.evaluate(source).score > 0
        assert ComplexityEvaluator().evaluate(source).score == 0

    def test_monotonic_in_branch_count(self, parse_code):
        evaluator = ComplexityEvaluator()
        scores = [
            evaluator.evaluate(parse_code("b.py", _branchy(n))).score for n in (5, 12, 16, 30, 80)
        ]
        assert scores == sorted(scores)
        assert all(0.0 <= s < 1.0 for s in scores)
