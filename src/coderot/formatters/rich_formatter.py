"""Rich terminal formatter for coderot."""

from collections import Counter
from dataclasses import dataclass
from typing import List, Optional

from rich.console import Console
from rich.text import Text

from ..models import AnalysisResult, FileAnalysisResult, IssueCategory, MetricResult
from .base import BaseFormatter
from .levels import QualityLevel, quality_level, score_band
from .theme import DEFAULT_THEME, Theme

_DIVIDER_WIDTH = 80
_MAX_PATH_WIDTH = 60
_INDENT = "     "

SCORE_COMMENTS = {
    0: "Spotless, as if freshly written",
    10: "Very tidy, only cosmetic nits",
    20: "Pretty good, a little dust here and there",
    30: "Fine on the surface, some smells underneath",
    40: "Starting to smell, worth a cleanup sprint",
    50: "Half rotten, every change costs extra",
    60: "Rot is spreading, plan a serious refactor",
    70: "Badly rotten, new features will hurt",
    80: "Nearly unmaintainable",
    90: "Beyond repair, consider starting over",
}

METRIC_COMMENTS = {
    "complexity": {
        "good": "Control flow is easy to follow",
        "medium": "Some functions branch more than they should",
        "bad": "Branching mazes, split these functions up",
    },
    "structure": {
        "good": "Flat, well-structured blocks",
        "medium": "Nesting is getting deep in places",
        "bad": "Deeply nested code, use early returns",
    },
    "comments": {
        "good": "Well commented",
        "medium": "Comments are thin in places",
        "bad": "Hardly any comments at all",
    },
    "naming": {
        "good": "Names are clear and consistent",
        "medium": "Some names are cryptic or inconsistent",
        "bad": "Naming is a guessing game",
    },
    "duplication": {
        "good": "Little to no copy-paste",
        "medium": "Some copy-paste worth extracting",
        "bad": "Copy-paste everywhere, extract shared code",
    },
    "error_handling": {
        "good": "Failures are handled properly",
        "medium": "Some errors slip through unchecked",
        "bad": "Errors are ignored almost everywhere",
    },
}

DEFAULT_METRIC_COMMENTS = {
    "good": "Looking healthy",
    "medium": "Could be better",
    "bad": "Needs serious attention",
}

CATEGORY_LABELS = {
    IssueCategory.COMPLEXITY: "Complexity",
    IssueCategory.COMMENT: "Comments",
    IssueCategory.NAMING: "Naming",
    IssueCategory.STRUCTURE: "Structure",
    IssueCategory.DUPLICATION: "Duplication",
    IssueCategory.ERROR: "Error handling",
    IssueCategory.OTHER: "Other",
}

ADVICE = {
    "good": "Keep it up: the codebase is in good shape.",
    "moderate": "Schedule some cleanup before the rot spreads further.",
    "bad": "Refactor the worst files first; they drag the whole score down.",
}


@dataclass(frozen=True)
class ReportOptions:
    verbose: bool = False
    top_files: int = 3
    max_issues: int = 3
    summary_only: bool = False


def shorten_path(path: str) -> str:
    """Keep only the last three components of a long path."""
    parts = path.split("/")
    if len(parts) <= 4:
        return path
    return "./" + "/".join(parts[-3:])


def score_comment(score: float) -> str:
    band = min(90, int(score * 100) // 10 * 10)
    return SCORE_COMMENTS[max(0, band)]


def metric_comment(name: str, display_score: float) -> str:
    return METRIC_COMMENTS.get(name, DEFAULT_METRIC_COMMENTS)[score_band(display_score)]


def _percent(score: float) -> float:
    return round(score * 10000) / 100


class RichFormatter(BaseFormatter):
    """Console report: overall score, metric breakdown, worst files, advice."""

    def __init__(
        self,
        theme: Theme = DEFAULT_THEME,
        options: Optional[ReportOptions] = None,
        console: Optional[Console] = None,
    ):
        self.theme = theme
        self.options = options or ReportOptions()
        self.console = console or Console()

    def render(self, result: AnalysisResult) -> None:
        level = quality_level(result.code_quality_score)

        self._print_header(result, level)
        if not self.options.summary_only:
            self._print_metrics(result)
            self._print_files(result)
        self._print_conclusion(level)
        if self.options.verbose:
            self._print_statistics(result)
        self._divider()
        self.console.print()

    def format(self, result: AnalysisResult) -> str:
        with self.console.capture() as capture:
            self.render(result)
        return capture.get()

    # -- private helpers --

    def _line(self, *parts) -> None:
        self.console.print(Text.assemble(*parts))

    def _divider(self) -> None:
        self.console.print()
        self._line(("─" * _DIVIDER_WIDTH, self.theme.divider))

    def _section(self, title: str) -> None:
        self.console.print()
        self._line((f"◆ {title}", self.theme.section))
        self.console.print()

    def _print_header(self, result: AnalysisResult, level: QualityLevel) -> None:
        theme = self.theme
        score = result.code_quality_score
        band = score_band(_percent(score))

        self._divider()
        self.console.print()
        self._line((f"  {level.emoji} Code Rot Report {level.emoji}", theme.title))
        self._divider()
        self.console.print()
        self._line(
            (f"  Overall score: {_percent(score):.2f}/100", theme.score),
            " - ",
            (score_comment(score), theme.band_style(band)),
        )
        self._line(
            (f"  Quality level: {level.label}", theme.detail),
            (f" - {level.description}", theme.detail),
        )

    def _sorted_metrics(self, result: AnalysisResult) -> List[MetricResult]:
        return sorted(result.metrics.values(), key=lambda m: m.score)

    def _print_metrics(self, result: AnalysisResult) -> None:
        theme = self.theme
        self._section("Metric breakdown")
        metrics = self._sorted_metrics(result)
        if not metrics:
            self._line(("  No metrics computed", theme.detail))
            return

        labels = [m.display_name or m.name for m in metrics]
        width = max(len(label) for label in labels) + 2
        for metric, label in zip(metrics, labels):
            display = _percent(metric.score)
            band = score_band(display)
            self._line(
                (f"  {theme.status_marks[band]} {label:<{width}}", theme.band_style(band)),
                (f"{display:.2f}".ljust(8), theme.metric),
                (f"  {metric_comment(metric.name, display)}", theme.detail),
            )

        self.console.print()
        terms = " + ".join(f"{_percent(m.score):.2f}×{m.weight:.2f}" for m in metrics)
        total_weight = sum(m.weight for m in metrics)
        self._line(
            (
                f"  Score: ({terms}) ÷ {total_weight:.2f} = "
                f"{_percent(result.code_quality_score):.2f}",
                theme.info,
            )
        )

    def _sorted_files(self, result: AnalysisResult) -> List[FileAnalysisResult]:
        return sorted(result.files_analyzed, key=lambda f: f.file_score, reverse=True)

    def _print_files(self, result: AnalysisResult) -> None:
        theme = self.theme
        verbose = self.options.verbose
        self._section("All files" if verbose else "Worst files")

        files = self._sorted_files(result)
        if not files:
            self._line(("  🎉 No files analyzed", theme.success))
            return

        shown = files if verbose else files[: max(0, self.options.top_files)]
        path_width = min(max(len(shorten_path(f.file_path)) for f in shown), _MAX_PATH_WIDTH)

        for rank, f in enumerate(shown, start=1):
            display = _percent(f.file_score)
            self._line(
                "  ",
                (f"{rank}. ", theme.number),
                (shorten_path(f.file_path).ljust(path_width + 2), theme.file),
                (f"({display:.2f}/100)", theme.band_style(score_band(display))),
            )
            self._print_category_counts(f)
            self.console.print()
            self._print_issues(f)
            if rank < len(shown):
                self.console.print()

    def _print_category_counts(self, f: FileAnalysisResult) -> None:
        counts = Counter(issue.category for issue in f.issues)
        entries = [c for c in IssueCategory if counts[c]]
        if not entries:
            return
        per_line = 3 if len(entries) > 2 else len(entries)
        for start in range(0, len(entries), per_line):
            parts: list = [_INDENT]
            for i, category in enumerate(entries[start : start + per_line]):
                if i:
                    parts.append("   ")
                parts.append(
                    (
                        f"{self.theme.icon(category)}{CATEGORY_LABELS[category]}:",
                        self.theme.category_style(category),
                    )
                )
                parts.append((f" {counts[category]}", self.theme.number))
            self._line(*parts)

    def _print_issues(self, f: FileAnalysisResult) -> None:
        theme = self.theme
        if not f.issues:
            self._line((f"{_INDENT}{theme.status_marks['good']} No issues found", theme.success))
            return

        limit = len(f.issues) if self.options.verbose else max(0, self.options.max_issues)
        for issue in f.issues[:limit]:
            self._line(
                _INDENT,
                (f"{theme.icon(issue.category)}{issue.message}", theme.category_style(issue.category)),
            )
        hidden = len(f.issues) - limit
        if hidden > 0:
            self._line((f"{_INDENT}🔍 {hidden} more issues", theme.warning))

    def _print_conclusion(self, level: QualityLevel) -> None:
        theme = self.theme
        self._section("Conclusion")
        self._line(
            f"  {level.emoji} ",
            (level.label, theme.detail),
            (f" - {level.description}", theme.detail),
        )
        self.console.print()
        if level.min_score < 30:
            self._line(("  " + ADVICE["good"], theme.success))
        elif level.min_score < 60:
            self._line(("  " + ADVICE["moderate"], theme.warning))
        else:
            self._line(("  " + ADVICE["bad"], theme.danger))

    def _print_statistics(self, result: AnalysisResult) -> None:
        theme = self.theme
        self._section("Statistics")
        self._line(("  📊 Totals", theme.header))
        for label, value in (
            ("Files", result.total_files),
            ("Lines", result.total_lines),
            ("Issues", result.total_issues),
            ("Skipped", len(result.skipped_files)),
        ):
            self._line((f"    {label:<15} {value}", theme.detail))

        self.console.print()
        self._line(("  🔍 Metrics", theme.header))
        for metric in self._sorted_metrics(result):
            display = _percent(metric.score)
            self.console.print()
            self._line(
                (f"    [{metric.display_name or metric.name}]", theme.metric),
                (f" (weight {metric.weight:.2f})", theme.info),
            )
            self._line((f"      {metric.description}", theme.detail))
            self._line(
                "      Score: ",
                (f"{display:.2f}/100", theme.band_style(score_band(display))),
            )
