"""Error-handling coverage of fallible call sites.

Two families of languages are covered:

* exception style: a fallible call is handled when it sits inside a ``try``
  block with at least one handler that does something. Inside a try whose
  handlers only swallow (``pass``, ``...``, empty braces) it counts as
  discarded. Outside any try it is handled only when the enclosing function
  declares that it propagates (``throws`` in Java).
* return-value style: the variable receiving the error must be tested by a
  check within ``error_check_window`` lines of the call.

Discard patterns (``_ =`` in Go, ``.unwrap()`` in Rust) are always
unhandled; propagation patterns (``?`` in Rust) are always handled.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..config import DEFAULT_THRESHOLDS, ThresholdConfig
from ..exceptions import ParsingError
from ..models import EMPTY_EVALUATION, Evaluation, IssueCategory
from ..source import (
    ParsedSource,
    brace_block_span,
    indent_block_end,
    indent_width,
    line_index_at,
    newline_offsets,
)
from .base import MetricEvaluator


class SiteStatus(Enum):
    HANDLED = "handled"
    DISCARDED = "discarded"
    UNCHECKED = "unchecked"


@dataclass(frozen=True)
class CallSite:
    call: str
    line: int
    status: SiteStatus


@dataclass(frozen=True)
class TryBlock:
    """0-based line range guarded by a try and whether its handlers act."""

    first: int
    last: int
    swallows: bool


def _statements(body: str) -> list[str]:
    return [s.strip() for s in re.split(r"[;\n]", body) if s.strip()]


def indent_try_blocks(source: ParsedSource) -> list[TryBlock]:
    profile = source.profile
    code = list(source.code_lines)
    handler_re = re.compile(profile.handler_pattern or r"(?!x)x")
    blocks = []
    for i, line in enumerate(code):
        if not re.match(profile.try_pattern, line):
            continue
        end = indent_block_end(code, i)
        base = indent_width(line)

        actions = []
        j = end + 1
        while j < len(code):
            if not code[j].strip():
                j += 1
                continue
            match = handler_re.match(code[j])
            if match is None or indent_width(code[j]) != base:
                break
            handler_end = indent_block_end(code, j)
            if code[j].strip().startswith("except"):
                body = [code[j][match.end() :]] + code[j + 1 : handler_end + 1]
                statements = _statements("\n".join(body))
                actions.append(
                    bool(statements)
                    and not all(s in profile.swallow_statements for s in statements)
                )
            j = handler_end + 1

        if actions:
            blocks.append(TryBlock(first=i, last=end, swallows=not any(actions)))
    return blocks


def brace_try_blocks(source: ParsedSource) -> list[TryBlock]:
    """Try blocks of a brace language.

    Raises:
        ParsingError: If a try or handler block never closes.
    """
    profile = source.profile
    text = "\n".join(source.code_lines)
    offsets = newline_offsets(text)
    handler_re = re.compile(r"\s*(?:" + (profile.handler_pattern or r"(?!x)x") + ")")
    blocks = []
    for match in re.finditer(profile.try_pattern, text):
        try:
            span = brace_block_span(text, match.end() - 1)
            if span is None:
                continue

            actions = []
            position = span[1] + 1
            while True:
                handler = handler_re.match(text, position)
                if handler is None:
                    break
                handler_span = brace_block_span(text, handler.end() - 1)
                if handler_span is None:
                    break
                if handler.group(0).strip().startswith("catch"):
                    statements = _statements(text[handler_span[0] + 1 : handler_span[1]])
                    actions.append(
                        bool(statements)
                        and not all(s in profile.swallow_statements for s in statements)
                    )
                position = handler_span[1] + 1
        except ValueError:
            line = line_index_at(offsets, match.start()) + 1
            raise ParsingError(source.path, profile.name, f"unbalanced try block at line {line}")

        if actions:
            blocks.append(
                TryBlock(
                    first=line_index_at(offsets, span[0]),
                    last=line_index_at(offsets, span[1]),
                    swallows=not any(actions),
                )
            )
    return blocks


def _innermost(blocks: list[TryBlock], index: int) -> Optional[TryBlock]:
    best = None
    for block in blocks:
        if block.first <= index <= block.last and (best is None or block.first >= best.first):
            best = block
    return best


def _call_text(match: re.Match) -> str:
    return " ".join(match.group("call").split())


class ErrorHandlingEvaluator(MetricEvaluator):
    name = "error_handling"
    display_name = "Error Handling"
    description = "Fallible calls whose failure is checked, caught or propagated"
    category = IssueCategory.ERROR
    default_weight = 0.15

    def __init__(self, thresholds: ThresholdConfig = DEFAULT_THRESHOLDS):
        self.window = thresholds.error_check_window

    def find_sites(self, source: ParsedSource) -> list[CallSite]:
        """Every fallible call site with its handling status, in line order."""
        profile = source.profile
        code = source.code_lines

        blocks: list[TryBlock] = []
        if profile.error_style == "exception" and profile.try_pattern:
            if profile.block_mode == "indent":
                blocks = indent_try_blocks(source)
            else:
                blocks = brace_try_blocks(source)

        sites = []
        for index, line in enumerate(code):
            if not line.strip():
                continue

            discarded = [m for p in profile.discard_patterns for m in re.finditer(p, line)]
            if discarded:
                sites.extend(
                    CallSite(_call_text(m), index + 1, SiteStatus.DISCARDED) for m in discarded
                )
                continue

            propagated = [m for p in profile.propagated_patterns for m in re.finditer(p, line)]
            if propagated:
                sites.extend(
                    CallSite(_call_text(m), index + 1, SiteStatus.HANDLED) for m in propagated
                )
                continue

            if any(re.search(p, line) for p in profile.function_patterns):
                continue

            for pattern in profile.fallible_patterns:
                for match in re.finditer(pattern, line):
                    if profile.error_style == "exception":
                        status = self._exception_status(source, blocks, index)
                    else:
                        status = self._return_value_status(source, match, index)
                    sites.append(CallSite(_call_text(match), index + 1, status))
        return sites

    def _exception_status(
        self, source: ParsedSource, blocks: list[TryBlock], index: int
    ) -> SiteStatus:
        block = _innermost(blocks, index)
        if block is not None:
            return SiteStatus.DISCARDED if block.swallows else SiteStatus.HANDLED

        header_pattern = source.profile.propagation_header_pattern
        if header_pattern:
            unit = source.enclosing_function(index + 1)
            if unit is not None:
                header = "\n".join(unit.lines[: unit.header_lines])
                if re.search(header_pattern, header):
                    return SiteStatus.HANDLED
        return SiteStatus.UNCHECKED

    def _return_value_status(self, source: ParsedSource, match: re.Match, index: int) -> SiteStatus:
        var = match.groupdict().get("var")
        if not var:
            return SiteStatus.UNCHECKED
        check = re.compile(source.profile.check_template.format(var=re.escape(var)))
        last = min(len(source.code_lines), index + self.window + 1)
        for line in source.code_lines[index:last]:
            if check.search(line):
                return SiteStatus.HANDLED
        return SiteStatus.UNCHECKED

    def evaluate(self, source: ParsedSource, prepared: Any = None) -> Evaluation:
        sites = self.find_sites(source)
        if not sites:
            return EMPTY_EVALUATION

        issues = []
        for site in sites:
            if site.status is SiteStatus.DISCARDED:
                issues.append(
                    self.issue(f"Error from '{site.call}' is discarded (line {site.line})", site.line)
                )
            elif site.status is SiteStatus.UNCHECKED:
                issues.append(
                    self.issue(f"Unchecked error from '{site.call}' (line {site.line})", site.line)
                )

        return Evaluation(score=len(issues) / len(sites), issues=tuple(issues))
