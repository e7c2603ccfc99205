"""Language profiles: the single source of truth for all language patterns.

Adding a new language:
  1. Add a LanguageProfile entry to PROFILES below.
  2. That's it. Every metric evaluator picks it up through the profile.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Optional


@dataclass(frozen=True)
class LanguageProfile:
    """Everything the metric evaluators need to know about a language."""

    name: str
    extensions: tuple[str, ...]

    # Comment syntax. Line comments run to end of line; block comments are
    # (open, close) delimiter pairs.
    line_comments: tuple[str, ...] = ()
    block_comments: tuple[tuple[str, str], ...] = ()

    # String literal regexes. Contents are blanked before pattern matching.
    string_patterns: tuple[str, ...] = ()

    # Function declaration regexes. Each must define a ``name`` group.
    function_patterns: tuple[str, ...] = ()

    # "brace" (blocks delimited by {}) or "indent" (blocks opened by ':').
    block_mode: str = "brace"

    # Branching keywords (word-boundary matched) and operator regexes.
    branch_keywords: tuple[str, ...] = ()
    branch_operators: tuple[str, ...] = ()

    # Variable declaration regexes with a ``name`` group.
    variable_patterns: tuple[str, ...] = ()
    # Loop header regexes with a ``names`` group (comma separated targets).
    loop_variable_patterns: tuple[str, ...] = ()
    # "snake", "camel" or None (no casing rule).
    naming_style: Optional[str] = None

    # Error handling. "exception": calls are handled inside a try block;
    # "return_value": the assigned result must be tested by an if.
    error_style: str = "exception"
    # Fallible call regexes with a ``call`` group and optional ``var`` group.
    fallible_patterns: tuple[str, ...] = ()
    # Call sites whose failure signal is thrown away (``call`` group).
    discard_patterns: tuple[str, ...] = ()
    # Call sites that explicitly propagate failure (``call`` group).
    propagated_patterns: tuple[str, ...] = ()
    # Matched against the enclosing function header; a match means the
    # function declares that it propagates failures.
    propagation_header_pattern: Optional[str] = None
    try_pattern: Optional[str] = None
    handler_pattern: Optional[str] = None
    # Handler bodies made only of these statements swallow the error.
    swallow_statements: tuple[str, ...] = ()
    # Template for a check of an assigned variable; ``{var}`` is substituted.
    check_template: str = r"\bif\b.*\b{var}\b"

    keywords: frozenset[str] = field(default_factory=frozenset)


# ── Re-usable building blocks ──────────────────────────────────────

_C_BLOCK = ("/*", "*/")
_DOUBLE_QUOTE_STR = r'"(?:\\.|[^"\\\n])*"'
_SINGLE_QUOTE_STR = r"'(?:\\.|[^'\\\n])*'"
_BACKTICK_STR = r"`(?:\\.|[^`\\])*`"

_C_LOOP_VARS = r"\bfor\s*\(\s*(?:[\w<>\[\]]+\s+)?(?P<names>\w+)\s*[=:]"
_C_OPERATORS = (r"&&", r"\|\|", r"\?(?![.?:])")

_COMMON_KEYWORDS = frozenset(
    {
        "if", "else", "for", "while", "do", "switch", "case", "default", "break",
        "continue", "return", "try", "catch", "finally", "throw", "new", "class",
        "struct", "import", "package", "const", "var", "let", "func", "function",
        "def", "in", "is", "not", "and", "or", "as", "with", "pass", "yield",
        "async", "await", "static", "public", "private", "protected", "void",
        "self", "this", "super", "true", "false", "null", "nil", "None", "True",
        "False", "range", "fn", "mut", "pub", "impl", "match", "loop", "use",
        "type", "interface", "enum", "typeof", "sizeof", "goto", "elif",
        "except", "raise", "lambda", "global", "nonlocal", "del", "assert",
    }
)


# ── Language definitions ───────────────────────────────────────────

PROFILES: dict[str, LanguageProfile] = {
    "python": LanguageProfile(
        name="python",
        extensions=(".py", ".pyw"),
        line_comments=("#",),
        block_comments=(('"""', '"""'), ("'''", "'''")),
        string_patterns=(_DOUBLE_QUOTE_STR, _SINGLE_QUOTE_STR),
        function_patterns=(r"^[ \t]*(?:async[ \t]+)?def[ \t]+(?P<name>\w+)[ \t]*\(",),
        block_mode="indent",
        branch_keywords=("if", "elif", "for", "while", "except", "case", "and", "or"),
        branch_operators=(),
        variable_patterns=(
            r"^[ \t]*(?P<name>[A-Za-z_]\w*)[ \t]*(?::[^=\n]+)?=(?!=)",
            r"^[ \t]*with\b.*\bas[ \t]+(?P<name>[A-Za-z_]\w*)",
        ),
        loop_variable_patterns=(r"\bfor\s+(?P<names>[\w\s,()]+?)\s+in\b",),
        naming_style="snake",
        error_style="exception",
        fallible_patterns=(
            r"\b(?P<call>open|json\.loads?|int|float|urlopen|"
            r"requests\.(?:get|post|put|patch|delete|request)|"
            r"subprocess\.(?:run|call|check_call|check_output|Popen)|"
            r"os\.(?:remove|rename|makedirs|mkdir|rmdir|unlink)|"
            r"shutil\.(?:copy\w*|move|rmtree))\s*\(",
        ),
        discard_patterns=(r"\b(?:contextlib\.)?(?P<call>suppress)\s*\(",),
        try_pattern=r"^[ \t]*try[ \t]*:",
        handler_pattern=r"^[ \t]*(?:except\b[^\n]*|finally[ \t]*):",
        swallow_statements=("pass", "..."),
        keywords=_COMMON_KEYWORDS,
    ),
    "go": LanguageProfile(
        name="go",
        extensions=(".go",),
        line_comments=("//",),
        block_comments=(_C_BLOCK,),
        string_patterns=(_BACKTICK_STR, _DOUBLE_QUOTE_STR, _SINGLE_QUOTE_STR),
        function_patterns=(
            r"^[ \t]*func[ \t]+(?:\([^)]*\)[ \t]*)?(?P<name>\w+)[ \t]*(?:\[[^\]]*\][ \t]*)?\(",
        ),
        block_mode="brace",
        branch_keywords=("if", "for", "case", "select"),
        branch_operators=(r"&&", r"\|\|"),
        variable_patterns=(
            r"\bvar\s+(?P<name>[A-Za-z_]\w*)",
            r"(?:^|[^\w.])(?P<name>[A-Za-z_]\w*)\s*(?:,\s*[A-Za-z_]\w*\s*)*:=",
        ),
        loop_variable_patterns=(r"\bfor\s+(?P<names>[\w\s,]+?)\s*:=",),
        naming_style="camel",
        error_style="return_value",
        fallible_patterns=(r"\b(?P<var>err)\s*:?=\s*(?P<call>[A-Za-z_][\w.]*)\(",),
        discard_patterns=(
            r",\s*_\s*:?=\s*(?P<call>[A-Za-z_][\w.]*)\(",
            r"^\s*_\s*=\s*(?P<call>[A-Za-z_][\w.]*)\(",
        ),
        keywords=_COMMON_KEYWORDS,
    ),
    "javascript": LanguageProfile(
        name="javascript",
        extensions=(".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx"),
        line_comments=("//",),
        block_comments=(_C_BLOCK,),
        string_patterns=(_BACKTICK_STR, _DOUBLE_QUOTE_STR, _SINGLE_QUOTE_STR),
        function_patterns=(
            r"\bfunction\s*\*?\s*(?P<name>\w+)\s*\(",
            r"\b(?:const|let|var)\s+(?P<name>\w+)\s*=\s*(?:async\s+)?"
            r"(?:function\b|\([^)]*\)\s*(?::\s*[\w<>\[\]]+\s*)?=>|\w+\s*=>)",
            r"^[ \t]*(?:(?:public|private|protected|static|async|get|set)\s+)*"
            r"(?P<name>(?!if\b|for\b|while\b|switch\b|catch\b|return\b|function\b)\w+)"
            r"\s*\([^)]*\)\s*(?::\s*[\w<>\[\]| ]+)?\s*\{",
        ),
        block_mode="brace",
        branch_keywords=("if", "for", "while", "case", "catch"),
        branch_operators=_C_OPERATORS,
        variable_patterns=(r"\b(?:const|let|var)\s+(?P<name>[A-Za-z_$][\w$]*)",),
        loop_variable_patterns=(
            r"\bfor\s*\(\s*(?:let|const|var)\s+(?P<names>[\w$]+)",
        ),
        naming_style="camel",
        error_style="exception",
        fallible_patterns=(
            r"\b(?P<call>JSON\.parse|fetch|axios\.\w+|fs\.\w+Sync|await\s+[\w.]+)\s*\(",
        ),
        discard_patterns=(r"\.(?P<call>catch)\(\s*\(\s*\w*\s*\)\s*=>\s*\{\s*\}\s*\)",),
        try_pattern=r"\btry\s*\{",
        handler_pattern=r"\b(?:catch\s*(?:\([^)]*\))?|finally)\s*\{",
        keywords=_COMMON_KEYWORDS,
    ),
    "java": LanguageProfile(
        name="java",
        extensions=(".java", ".cs"),
        line_comments=("//",),
        block_comments=(_C_BLOCK,),
        string_patterns=(_DOUBLE_QUOTE_STR, _SINGLE_QUOTE_STR),
        function_patterns=(
            r"^[ \t]*(?:(?:public|private|protected|static|final|abstract|synchronized|native|override)\s+)*"
            r"[\w<>\[\],.?]+\s+(?P<name>(?!if\b|for\b|while\b|switch\b|catch\b|return\b|new\b|else\b)\w+)"
            r"\s*\([^;{]*\)\s*(?:throws\s+[\w.,\s]+)?\{",
        ),
        block_mode="brace",
        branch_keywords=("if", "for", "while", "case", "catch"),
        branch_operators=_C_OPERATORS,
        variable_patterns=(
            r"^[ \t]*(?:final\s+)?(?:[A-Z]\w*|int|long|double|float|boolean|char|byte|short|var)"
            r"(?:<[^>]*>)?(?:\[\])*\s+(?P<name>[A-Za-z_]\w*)\s*[=;]",
        ),
        loop_variable_patterns=(_C_LOOP_VARS,),
        naming_style="camel",
        error_style="exception",
        fallible_patterns=(
            r"\b(?P<call>new\s+(?:FileInputStream|FileReader|FileOutputStream|FileWriter|Socket|URL)|"
            r"Files\.\w+|Integer\.parseInt|Long\.parseLong|Double\.parseDouble|"
            r"Class\.forName|Thread\.sleep)\s*\(",
        ),
        propagation_header_pattern=r"\)\s*throws\s+\w",
        try_pattern=r"\btry\s*(?:\((?:[^()]|\([^()]*\))*\)\s*)?\{",
        handler_pattern=r"\b(?:catch\s*\([^)]*\)|finally)\s*\{",
        keywords=_COMMON_KEYWORDS,
    ),
    "c": LanguageProfile(
        name="c",
        extensions=(".c", ".h", ".cpp", ".cc", ".cxx", ".hpp", ".hxx"),
        line_comments=("//",),
        block_comments=(_C_BLOCK,),
        string_patterns=(_DOUBLE_QUOTE_STR, _SINGLE_QUOTE_STR),
        function_patterns=(
            r"^(?:[\w*&:<>]+[ \t*&]+)+(?P<name>(?!if\b|for\b|while\b|switch\b|return\b|else\b)\w+)"
            r"\s*\([^;{]*\)\s*(?:const\s*)?\{",
        ),
        block_mode="brace",
        branch_keywords=("if", "for", "while", "case"),
        branch_operators=_C_OPERATORS,
        variable_patterns=(
            r"^[ \t]*(?:const\s+|static\s+|unsigned\s+)*(?:int|long|short|char|float|double|size_t|bool|"
            r"auto|[A-Z]\w*|\w+_t)\s*\**\s*(?P<name>[A-Za-z_]\w*)\s*(?:\[[^\]]*\])?\s*[=;]",
        ),
        loop_variable_patterns=(_C_LOOP_VARS,),
        naming_style="snake",
        error_style="return_value",
        fallible_patterns=(
            r"(?P<var>\b[A-Za-z_]\w*)\s*=\s*(?:\([^)]*\)\s*)?"
            r"(?P<call>malloc|calloc|realloc|fopen|fdopen|strdup|socket|mmap)\s*\(",
        ),
        discard_patterns=(r"^\s*(?:\(void\)\s*)?(?P<call>malloc|calloc|realloc|fopen|strdup)\s*\(",),
        check_template=r"\b(?:if|while|assert)\b.*\b{var}\b",
        keywords=_COMMON_KEYWORDS,
    ),
    "rust": LanguageProfile(
        name="rust",
        extensions=(".rs",),
        line_comments=("//",),
        block_comments=(_C_BLOCK,),
        string_patterns=(_DOUBLE_QUOTE_STR,),
        function_patterns=(
            r"^[ \t]*(?:pub(?:\([^)]*\))?\s+)?(?:const\s+)?(?:async\s+)?(?:unsafe\s+)?fn\s+(?P<name>\w+)",
        ),
        block_mode="brace",
        branch_keywords=("if", "for", "while", "loop", "match"),
        branch_operators=(r"&&", r"\|\|", r"=>"),
        variable_patterns=(r"\blet\s+(?:mut\s+)?(?P<name>[A-Za-z_]\w*)",),
        loop_variable_patterns=(r"\bfor\s+(?P<names>[\w\s,()]+?)\s+in\b",),
        naming_style="snake",
        error_style="return_value",
        discard_patterns=(r"\.(?P<call>unwrap|expect)\s*\(", r"\blet\s+_\s*=\s*(?P<call>[\w:.]+)\("),
        propagated_patterns=(r"(?P<call>[\w:.]+)\([^()\n]*\)\?",),
        keywords=_COMMON_KEYWORDS,
    ),
}

GENERIC_PROFILE = LanguageProfile(
    name="generic",
    extensions=(),
    line_comments=("//", "#"),
    block_comments=(_C_BLOCK,),
    string_patterns=(_DOUBLE_QUOTE_STR, _SINGLE_QUOTE_STR),
    function_patterns=(r"\bfunc(?:tion)?\s+(?P<name>\w+)\s*\(",),
    block_mode="brace",
    branch_keywords=("if", "for", "while", "case", "catch"),
    branch_operators=_C_OPERATORS,
    keywords=_COMMON_KEYWORDS,
)

_EXTENSION_MAP: dict[str, LanguageProfile] = {
    ext: profile for profile in PROFILES.values() for ext in profile.extensions
}


def supported_extensions() -> frozenset[str]:
    """Extensions that map to a dedicated language profile."""
    return frozenset(_EXTENSION_MAP)


def profile_for_path(path: str) -> LanguageProfile:
    """Pick the profile for a file path, falling back to the generic one."""
    return _EXTENSION_MAP.get(PurePath(path).suffix.lower(), GENERIC_PROFILE)


def get_profile(name: str) -> LanguageProfile:
    """Look up a profile by language name."""
    if name == GENERIC_PROFILE.name:
        return GENERIC_PROFILE
    try:
        return PROFILES[name]
    except KeyError:
        raise KeyError(f"Unknown language profile: {name!r}") from None
