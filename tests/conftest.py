"""Shared test fixtures for coderot tests."""

import textwrap

import pytest

from coderot.metrics.base import MetricEvaluator
from coderot.models import Evaluation, IssueCategory
from coderot.source import ParsedSource, SourceFile


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


def parse(path: str, code: str) -> ParsedSource:
    """ParsedSource from dedented code; the language follows the extension."""
    return ParsedSource.from_source(SourceFile(path=path, content=textwrap.dedent(code)))


class FixedEvaluator(MetricEvaluator):
    """Evaluator returning a fixed score, for engine tests."""

    category = IssueCategory.OTHER
    description = "fixed score"
    default_weight = 1.0

    def __init__(self, name, score=0.0, issues=0):
        self.name = name
        self.display_name = name.title()
        self.score = score
        self.issue_count = issues

    def evaluate(self, source, prepared=None):
        issues = tuple(self.issue(f"{self.name} issue {i}") for i in range(self.issue_count))
        return Evaluation(score=self.score, issues=issues)


class FailingEvaluator(MetricEvaluator):
    """Evaluator that raises on files whose path contains ``fail_on``."""

    category = IssueCategory.OTHER
    description = "always broken"
    default_weight = 1.0

    def __init__(self, name="broken", fail_on=""):
        self.name = name
        self.display_name = name.title()
        self.fail_on = fail_on

    def evaluate(self, source, prepared=None):
        if self.fail_on in source.path:
            raise RuntimeError("evaluator exploded")
        return Evaluation(score=1.0, issues=(self.issue("still here"),))


@pytest.fixture
def python_sources():
    """A small mixed-quality Python project as SourceFile records."""
    clean = textwrap.dedent(
        '''\
        """Helpers for reading settings."""


        def load_settings(path):
            # Read the whole file; callers handle parsing
            try:
                with open(path) as handle:
                    return handle.read()
            except OSError as exc:
                raise RuntimeError(str(exc))
        '''
    )
    messy = textwrap.dedent(
        """\
        def f(a, b):
            x = open(a)
            if a:
                if b:
                    if a and b:
                        if a or b:
                            if x:
                                return 1
            return 0
        """
    )
    return [
        SourceFile(path="pkg/clean.py", content=clean),
        SourceFile(path="pkg/messy.py", content=messy),
    ]


@pytest.fixture
def parse_code():
    """Factory: parse_code(path, code) -> ParsedSource."""
    return parse


@pytest.fixture
def fixed_evaluator():
    """The FixedEvaluator class."""
    return FixedEvaluator


@pytest.fixture
def failing_evaluator():
    """The FailingEvaluator class."""
    return FailingEvaluator
