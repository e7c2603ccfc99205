"""Source files as seen by the metric evaluators.

``SourceFile`` is the input contract handed over by file discovery: a path
plus either its decoded content or the reason it could not be read.
``ParsedSource`` derives everything the evaluators share from that content
(comment-free code lines, comment line numbers, function units) so each file
is lexed once no matter how many metrics look at it.

All heuristics here are line-preserving: stripped code keeps the original
line numbering, so every issue can point at a real line.
"""

from __future__ import annotations

import re
from bisect import bisect_right
from dataclasses import dataclass, field
from functools import cached_property
from typing import Optional

from .exceptions import ParsingError
from .languages import LanguageProfile, profile_for_path


@dataclass(frozen=True)
class SourceFile:
    """One input file. ``content is None`` means it could not be read."""

    path: str
    content: Optional[str] = None
    error: Optional[str] = None

    @property
    def readable(self) -> bool:
        return self.content is not None


@dataclass(frozen=True)
class FunctionUnit:
    """A function or method body located by the profile's patterns.

    ``lines`` holds the stripped code lines from the header line through the
    closing line (inclusive); ``start_line`` is 1-based. The first
    ``header_lines`` of them are the declaration itself.
    """

    name: str
    start_line: int
    end_line: int
    lines: tuple[str, ...]
    header_lines: int = 1

    @property
    def body(self) -> tuple[str, ...]:
        return self.lines[self.header_lines :]


def newline_offsets(text: str) -> list[int]:
    """Character offsets of every newline in ``text``."""
    return [m.start() for m in re.finditer("\n", text)]


def line_index_at(offsets: list[int], position: int) -> int:
    """0-based line index of a character position."""
    return bisect_right(offsets, position - 1)


def _lexer(profile: LanguageProfile) -> re.Pattern:
    parts = []
    for open_, close in profile.block_comments:
        parts.append(f"(?P<bc{len(parts)}>{re.escape(open_)}.*?{re.escape(close)})")
    for prefix in profile.line_comments:
        parts.append(f"(?P<lc{len(parts)}>{re.escape(prefix)}[^\\n]*)")
    for pattern in profile.string_patterns:
        parts.append(f"(?P<st{len(parts)}>{pattern})")
    if not parts:
        return re.compile(r"(?!x)x")
    return re.compile("|".join(parts), re.DOTALL)


_LEXER_CACHE: dict[str, re.Pattern] = {}


def _lexer_for(profile: LanguageProfile) -> re.Pattern:
    lexer = _LEXER_CACHE.get(profile.name)
    if lexer is None:
        lexer = _LEXER_CACHE.setdefault(profile.name, _lexer(profile))
    return lexer


def strip_source(content: str, profile: LanguageProfile) -> tuple[list[str], frozenset[int]]:
    """Blank comments and string contents, keeping line numbers intact.

    Returns:
        (code_lines, comment_lines) where ``comment_lines`` holds the 1-based
        numbers of every line that carries comment text.
    """
    comment_lines: set[int] = set()
    offsets = newline_offsets(content)

    def replace(match: re.Match) -> str:
        text = match.group(0)
        newlines = text.count("\n")
        if match.lastgroup and match.lastgroup.startswith("st"):
            return '""' + "\n" * newlines
        first = line_index_at(offsets, match.start()) + 1
        comment_lines.update(range(first, first + newlines + 1))
        return "\n" * newlines

    code = _lexer_for(profile).sub(replace, content)
    return code.split("\n"), frozenset(comment_lines)


def indent_width(line: str) -> int:
    """Indentation of a line with tabs counted as four columns."""
    expanded = line.expandtabs(4)
    return len(expanded) - len(expanded.lstrip())


def indent_block_end(lines: list[str], start: int, body_from: Optional[int] = None) -> int:
    """Index of the last line belonging to the block opened at ``start``.

    The block is every line after ``body_from`` (default ``start``) indented
    deeper than ``start``; blank lines inside it are included, trailing ones
    are not.
    """
    base = indent_width(lines[start])
    first = start if body_from is None else body_from
    end = first
    for i in range(first + 1, len(lines)):
        if not lines[i].strip():
            continue
        if indent_width(lines[i]) <= base:
            break
        end = i
    return end


_TYPE_LITERAL = re.compile(r"\b(?:interface|struct)\s*$")


def _matching_brace(text: str, open_index: int) -> int:
    depth = 0
    for i in range(open_index, len(text)):
        ch = text[i]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    raise ValueError("unbalanced braces")


def brace_block_span(text: str, start: int) -> Optional[tuple[int, int]]:
    """Find the brace block that follows ``start`` in ``text``.

    Braces inside parentheses (parameter lists, default values) and type
    literals such as Go's ``interface{}`` in a result type are not the body.

    Returns (open_index, close_index) or None when a ';' comes before any
    '{' (a declaration without a body).

    Raises:
        ValueError: If the braces never balance.
    """
    parens = 0
    i = start
    while i < len(text):
        ch = text[i]
        if ch == "(":
            parens += 1
        elif ch == ")":
            parens = max(0, parens - 1)
        elif parens == 0:
            if ch == ";":
                return None
            if ch == "{":
                close_index = _matching_brace(text, i)
                if not _TYPE_LITERAL.search(text[max(start, i - 16) : i]):
                    return i, close_index
                i = close_index
        i += 1
    return None


_MAX_HEADER_LINES = 50


def _indent_header_end(lines: list[str], start: int) -> int:
    """Last line of a declaration that may wrap over several lines."""
    depth = 0
    for i in range(start, min(len(lines), start + _MAX_HEADER_LINES)):
        line = lines[i]
        depth += line.count("(") + line.count("[") - line.count(")") - line.count("]")
        if depth <= 0:
            return i
    return start


@dataclass(frozen=True)
class ParsedSource:
    """A readable source file plus the lexed views evaluators share."""

    path: str
    content: str
    profile: LanguageProfile
    lines: tuple[str, ...] = field(init=False)
    code_lines: tuple[str, ...] = field(init=False)
    comment_lines: frozenset[int] = field(init=False)

    def __post_init__(self) -> None:
        code_lines, comment_lines = strip_source(self.content, self.profile)
        object.__setattr__(self, "lines", tuple(self.content.split("\n")))
        object.__setattr__(self, "code_lines", tuple(code_lines))
        object.__setattr__(self, "comment_lines", comment_lines)

    @classmethod
    def from_source(cls, source: SourceFile) -> "ParsedSource":
        if source.content is None:
            raise ValueError(f"{source.path} has no content")
        return cls(path=source.path, content=source.content, profile=profile_for_path(source.path))

    @property
    def line_count(self) -> int:
        """Physical lines, not counting the empty tail after a final newline."""
        if not self.content:
            return 0
        count = len(self.lines)
        if self.content.endswith("\n"):
            count -= 1
        return count

    @property
    def code_line_count(self) -> int:
        return sum(1 for line in self.code_lines if line.strip())

    @cached_property
    def functions(self) -> tuple[FunctionUnit, ...]:
        """Function units in declaration order.

        Raises:
            ParsingError: If a brace-delimited body never closes.
        """
        if self.profile.block_mode == "indent":
            return self._indent_functions()
        return self._brace_functions()

    def declarations(self) -> list[tuple[int, str, int]]:
        """(line_index, name, char_offset) for each function declaration.

        At most one declaration per line; no body matching, so this never
        fails on malformed code.
        """
        text = "\n".join(self.code_lines)
        found: dict[int, tuple[int, str, int]] = {}
        offsets = newline_offsets(text)
        for pattern in self.profile.function_patterns:
            for match in re.finditer(pattern, text, re.MULTILINE):
                line_index = line_index_at(offsets, match.start())
                if line_index not in found:
                    found[line_index] = (line_index, match.group("name"), match.start())
        return [found[k] for k in sorted(found)]

    def _indent_functions(self) -> tuple[FunctionUnit, ...]:
        code = list(self.code_lines)
        units = []
        for line_index, name, _ in self.declarations():
            header_end = _indent_header_end(code, line_index)
            end = indent_block_end(code, line_index, body_from=header_end)
            units.append(
                FunctionUnit(
                    name=name,
                    start_line=line_index + 1,
                    end_line=end + 1,
                    lines=tuple(code[line_index : end + 1]),
                    header_lines=header_end - line_index + 1,
                )
            )
        return tuple(units)

    def _brace_functions(self) -> tuple[FunctionUnit, ...]:
        text = "\n".join(self.code_lines)
        offsets = newline_offsets(text)
        code = list(self.code_lines)
        units = []
        for line_index, name, offset in self.declarations():
            try:
                span = brace_block_span(text, offset)
            except ValueError:
                raise ParsingError(
                    self.path, self.profile.name, f"unbalanced braces in function {name!r}"
                )
            if span is None:
                continue
            open_index = line_index_at(offsets, span[0])
            end_index = line_index_at(offsets, span[1])
            units.append(
                FunctionUnit(
                    name=name,
                    start_line=line_index + 1,
                    end_line=end_index + 1,
                    lines=tuple(code[line_index : end_index + 1]),
                    header_lines=open_index - line_index + 1,
                )
            )
        return tuple(units)

    def enclosing_function(self, line: int) -> Optional[FunctionUnit]:
        """Innermost function unit containing a 1-based line, if any."""
        best: Optional[FunctionUnit] = None
        for unit in self.functions:
            if unit.start_line <= line <= unit.end_line:
                if best is None or unit.start_line >= best.start_line:
                    best = unit
        return best
