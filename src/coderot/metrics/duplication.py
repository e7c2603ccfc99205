"""Copy-paste detection with hashed sliding windows of normalized lines.

Each file is reduced to its normalized lines (comments and strings already
stripped, whitespace collapsed, punctuation-only and import lines dropped).
Every window of ``block_size`` consecutive normalized lines is hashed; a
window whose hash occurs at two or more locations, in the same file or
another one, marks all of its lines as duplicated.
"""

import hashlib
import re
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from ..config import DEFAULT_THRESHOLDS, ThresholdConfig
from ..models import EMPTY_EVALUATION, Evaluation, IssueCategory
from ..source import ParsedSource
from .base import MetricEvaluator

_WHITESPACE = re.compile(r"\s+")
_HAS_WORD = re.compile(r"[A-Za-z0-9]")
_BOILERPLATE = re.compile(r"^(?:import|from|package|using|#include|#import|require)\b")

_MAX_LOCATIONS_SHOWN = 3


def normalize_lines(source: ParsedSource) -> list[tuple[int, str]]:
    """(1-based line number, normalized text) for each line worth comparing."""
    normalized = []
    for index, line in enumerate(source.code_lines):
        text = _WHITESPACE.sub(" ", line).strip()
        if not text or not _HAS_WORD.search(text) or _BOILERPLATE.match(text):
            continue
        normalized.append((index + 1, text))
    return normalized


@dataclass(frozen=True)
class _FileWindows:
    """Hashes of every window of one file plus the line numbers they cover."""

    line_numbers: tuple[int, ...]
    hashes: tuple[str, ...]


@dataclass
class DuplicationIndex:
    """Read-only (once built) map from window hash to every location."""

    block_size: int
    locations: dict[str, list[tuple[str, int]]] = field(default_factory=dict)
    files: dict[str, _FileWindows] = field(default_factory=dict)

    def add(self, source: ParsedSource) -> None:
        normalized = normalize_lines(source)
        line_numbers = tuple(number for number, _ in normalized)
        texts = [text for _, text in normalized]
        hashes = []
        for start in range(len(texts) - self.block_size + 1):
            window = "\n".join(texts[start : start + self.block_size])
            digest = hashlib.sha1(window.encode("utf-8")).hexdigest()
            hashes.append(digest)
            self.locations.setdefault(digest, []).append((source.path, line_numbers[start]))
        self.files[source.path] = _FileWindows(line_numbers=line_numbers, hashes=tuple(hashes))

    def occurrences(self, digest: str) -> int:
        return len(self.locations.get(digest, ()))


def build_index(sources: Sequence[ParsedSource], block_size: int) -> DuplicationIndex:
    index = DuplicationIndex(block_size=block_size)
    for source in sources:
        index.add(source)
    return index


class DuplicationEvaluator(MetricEvaluator):
    name = "duplication"
    display_name = "Code Duplication"
    description = "Share of lines inside blocks repeated within or across files"
    category = IssueCategory.DUPLICATION
    default_weight = 0.15

    def __init__(self, thresholds: ThresholdConfig = DEFAULT_THRESHOLDS):
        self.block_size = thresholds.duplication_block_size

    def prepare(self, sources: Sequence[ParsedSource]) -> DuplicationIndex:
        return build_index(sources, self.block_size)

    def evaluate(self, source: ParsedSource, prepared: Any = None) -> Evaluation:
        index: Optional[DuplicationIndex] = prepared
        if index is None or source.path not in index.files:
            index = build_index([source], self.block_size)

        windows = index.files[source.path]
        if not windows.line_numbers:
            return EMPTY_EVALUATION

        duplicated: set[int] = set()
        blocks: list[list[int]] = []  # [first window, last window]
        for start, digest in enumerate(windows.hashes):
            if index.occurrences(digest) < 2:
                continue
            duplicated.update(range(start, start + self.block_size))
            if blocks and start <= blocks[-1][1] + self.block_size:
                blocks[-1][1] = start
            else:
                blocks.append([start, start])

        if not duplicated:
            return EMPTY_EVALUATION

        issues = tuple(self._block_issue(source.path, windows, index, a, b) for a, b in blocks)
        return Evaluation(score=len(duplicated) / len(windows.line_numbers), issues=issues)

    def _block_issue(self, path, windows, index, first, last):
        numbers = windows.line_numbers
        start_line = numbers[first]
        end_line = numbers[last + self.block_size - 1]
        own = numbers[first]
        others = [
            f"{other_path}:{line}"
            for other_path, line in index.locations[windows.hashes[first]]
            if not (other_path == path and line == own)
        ]
        where = ", ".join(others[:_MAX_LOCATIONS_SHOWN])
        if len(others) > _MAX_LOCATIONS_SHOWN:
            where += f" and {len(others) - _MAX_LOCATIONS_SHOWN} more"
        return self.issue(
            f"Duplicated block at lines {start_line}-{end_line} also appears at {where}",
            start_line,
        )
