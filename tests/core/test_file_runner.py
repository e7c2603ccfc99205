"""Tests for the per-file runner."""

import threading

import pytest

from coderot.core.runner import FileAnalysisRunner
from coderot.metrics.base import MetricEvaluator
from coderot.metrics.registry import MetricRegistry, RegisteredMetric
from coderot.models import Evaluation, FileAnalysisResult, IssueCategory, SkippedFile
from coderot.source import SourceFile


def _registry(*evaluators_and_weights):
    return MetricRegistry([RegisteredMetric.of(e, w) for e, w in evaluators_and_weights])


class SlowEvaluator(MetricEvaluator):
    """Blocks on files named slow* until released."""

    name = "slow"
    display_name = "Slow"
    description = "waits"
    category = IssueCategory.OTHER
    default_weight = 1.0

    def __init__(self):
        self.release = threading.Event()

    def evaluate(self, source, prepared=None):
        if "slow" in source.path:
            self.release.wait(5)
        return Evaluation(score=0.5)


class TestFileAnalysisRunner:
    def test_file_score_is_weighted_mean(self, fixed_evaluator):
        registry = _registry(
            (fixed_evaluator("a", 0.10), 1.0),
            (fixed_evaluator("b", 0.50), 2.0),
            (fixed_evaluator("c", 0.90), 1.0),
        )
        (result,) = FileAnalysisRunner(registry).run([SourceFile("one.py", "x = 1\n")])

        assert isinstance(result, FileAnalysisResult)
        assert result.file_score == pytest.approx(0.5)
        assert dict(result.metric_scores) == {"a": 0.10, "b": 0.50, "c": 0.90}
        assert result.lines == 1

    def test_issues_follow_registry_order(self, fixed_evaluator):
        registry = _registry(
            (fixed_evaluator("b", 0.1, issues=2), 1.0),
            (fixed_evaluator("a", 0.1, issues=1), 1.0),
        )
        (result,) = FileAnalysisRunner(registry).run([SourceFile("one.py", "x = 1\n")])
        assert [issue.message for issue in result.issues] == [
            "b issue 0",
            "b issue 1",
            "a issue 0",
        ]

    def test_scores_are_clamped(self, fixed_evaluator):
        registry = _registry(
            (fixed_evaluator("high", 3.0), 1.0), (fixed_evaluator("low", -2.0), 1.0)
        )
        (result,) = FileAnalysisRunner(registry).run([SourceFile("one.py", "x = 1\n")])
        assert dict(result.metric_scores) == {"high": 1.0, "low": 0.0}

    def test_unreadable_file_is_skipped(self, fixed_evaluator):
        registry = _registry((fixed_evaluator("a", 0.5), 1.0))
        outcomes = FileAnalysisRunner(registry).run(
            [SourceFile("gone.py", error="permission denied"), SourceFile("ok.py", "x = 1\n")]
        )
        assert outcomes[0] == SkippedFile(path="gone.py", reason="permission denied")
        assert outcomes[1].file_path == "ok.py"

    def test_failing_evaluator_only_zeroes_its_pair(self, fixed_evaluator, failing_evaluator):
        registry = _registry(
            (fixed_evaluator("steady", 0.4, issues=1), 1.0),
            (failing_evaluator("broken", fail_on="bad"), 1.0),
        )
        bad, good = FileAnalysisRunner(registry).run(
            [SourceFile("bad.py", "x = 1\n"), SourceFile("good.py", "x = 1\n")]
        )

        assert dict(bad.metric_scores) == {"steady": 0.4, "broken": 0.0}
        assert [issue.metric for issue in bad.issues] == ["steady"]
        assert dict(good.metric_scores) == {"steady": 0.4, "broken": 1.0}

    def test_parallel_results_keep_input_order(self, fixed_evaluator):
        registry = _registry((fixed_evaluator("a", 0.2), 1.0))
        sources = [SourceFile(f"f{i:02d}.py", "x = 1\n" * (i + 1)) for i in range(25)]
        runner = FileAnalysisRunner(registry, workers=4, min_parallel_files=1)

        outcomes = runner.run(sources)

        assert [o.file_path for o in outcomes] == [s.path for s in sources]
        assert [o.lines for o in outcomes] == list(range(1, 26))

    def test_timed_out_file_is_skipped(self):
        slow = SlowEvaluator()
        registry = _registry((slow, 1.0))
        runner = FileAnalysisRunner(registry, workers=2, timeout_seconds=0.2, min_parallel_files=1)
        try:
            outcomes = runner.run(
                [SourceFile("slow.py", "x = 1\n"), SourceFile("fast.py", "x = 1\n")]
            )
        finally:
            slow.release.set()

        assert outcomes[0] == SkippedFile(path="slow.py", reason="timed out")
        assert outcomes[1].file_path == "fast.py"

    def test_empty_input(self, fixed_evaluator):
        assert FileAnalysisRunner(_registry((fixed_evaluator("a"), 1.0))).run([]) == []

    def test_queued_files_survive_stuck_workers(self):
        slow = SlowEvaluator()
        registry = _registry((slow, 1.0))
        runner = FileAnalysisRunner(registry, workers=2, timeout_seconds=0.2, min_parallel_files=1)
        paths = ["slow1.py", "slow2.py", "fast0.py", "fast1.py", "fast2.py"]
        try:
            outcomes = runner.run([SourceFile(path, "x = 1\n") for path in paths])
        finally:
            slow.release.set()

        assert outcomes[:2] == [
            SkippedFile(path="slow1.py", reason="timed out"),
            SkippedFile(path="slow2.py", reason="timed out"),
        ]
        assert all(isinstance(outcome, FileAnalysisResult) for outcome in outcomes[2:])
        assert [outcome.file_path for outcome in outcomes[2:]] == paths[2:]
