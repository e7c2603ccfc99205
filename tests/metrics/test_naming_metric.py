"""Tests for the naming convention evaluator."""

import pytest

from coderot.config import ThresholdConfig
from coderot.metrics.naming import NamingEvaluator, matches_style
from coderot.models import IssueCategory


class TestMatchesStyle:
    @pytest.mark.parametrize(
        "name, style, expected",
        [
            ("load_settings", "snake", True),
            ("_private_helper", "snake", True),
            ("loadSettings", "snake", False),
            ("MAX_SIZE", "snake", True),
            ("loadSettings", "camel", True),
            ("LoadSettings", "camel", True),
            ("load_settings", "camel", False),
            ("MAX_SIZE", "camel", True),
            ("Whatever_Goes", None, True),
        ],
    )
    def test_styles(self, name, style, expected):
        assert matches_style(name, style) is expected


class TestNamingEvaluator:
    def test_reports_each_rule(self, parse_code):
        source = parse_code(
            "names.py",
            """\
            def ab():
                pass

            def good_name():
                x = 1
                for i in range(3):
                    pass
                camelValue = 2
                return x
            """,
        )
        result = NamingEvaluator().evaluate(source)

        messages = [issue.message for issue in result.issues]
        assert messages == [
            "Function name 'ab' is shorter than 3 characters",
            "Single-letter variable 'x' outside a loop header",
            "Variable 'camelValue' does not follow snake_case naming",
        ]
        assert all(issue.category is IssueCategory.NAMING for issue in result.issues)
        # ab, good_name, x, i, camelValue
        assert result.score == pytest.approx(3 / 5)

    def test_clean_names_score_zero(self, parse_code):
        source = parse_code(
            "clean.py",
            """\
            MAX_RETRIES = 3

            def fetch_page(url):
                attempts = 0
                for _ in range(MAX_RETRIES):
                    attempts += 1
                return attempts
            """,
        )
        result = NamingEvaluator().evaluate(source)
        assert result.score == 0.0
        assert result.issues == ()

    def test_issue_cap_adds_summary(self, parse_code):
        source = parse_code("letters.py", "a = 1\nb = 2\nc = 3\nd = 4\ne = 5\n")
        result = NamingEvaluator(ThresholdConfig(naming_max_issues=2)).evaluate(source)

        assert result.score == pytest.approx(1.0)
        assert len(result.issues) == 3
        assert result.issues[-1].message == "3 more naming violations"

    def test_go_uses_camel_case(self, parse_code):
        source = parse_code(
            "main.go",
            """\
            package main

            func parseConfig(path string) error {
            \tfile_name := path
            \tretryCount := 3
            \treturn nil
            }
            """,
        )
        result = NamingEvaluator().evaluate(source)
        assert [issue.message for issue in result.issues] == [
            "Variable 'file_name' does not follow camelCase naming"
        ]

    def test_nothing_declared(self, parse_code):
        assert NamingEvaluator().evaluate(parse_code("empty.py", "")).score == 0.0

    @pytest.mark.parametrize(
        "path, code",
        [
            (
                "sum.go",
                """\
                func sumAll(n int) int {
                \ttotal := 0
                \tfor i := 0; i < n; i++ {
                \t\ttotal += i
                \t}
                \tfor key, value := range weights {
                \t\ttotal += key * value
                \t}
                \treturn total
                }
                """,
            ),
            (
                "sum.js",
                """\
                function sumAll(n) {
                  let total = 0;
                  for (let i = 0; i < n; i++) {
                    total += i;
                  }
                  return total;
                }
                """,
            ),
        ],
    )
    def test_counted_loop_variables_are_allowed(self, parse_code, path, code):
        result = NamingEvaluator().evaluate(parse_code(path, code))
        assert result.issues == ()
        assert result.score == 0.0

    def test_single_letter_next_to_loop_is_still_flagged(self, parse_code):
        source = parse_code(
            "mix.go",
            """\
            func scaleAll(n int) int {
            \tx := n * 2
            \tfor i := 0; i < x; i++ {
            \t\tn += i
            \t}
            \treturn n
            }
            """,
        )
        result = NamingEvaluator().evaluate(source)
        assert [issue.message for issue in result.issues] == [
            "Single-letter variable 'x' outside a loop header"
        ]
