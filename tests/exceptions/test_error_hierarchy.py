"""Tests for the coderot exception hierarchy."""

from pathlib import Path

import pytest

from coderot.exceptions import (
    AnalysisError,
    AnalysisInProgressError,
    CodeRotError,
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
    ParsingError,
)


class TestCodeRotError:
    def test_message_only(self):
        assert str(CodeRotError("boom")) == "boom"

    def test_details_are_appended(self):
        error = CodeRotError("boom", details={"file": "a.py", "line": "3"})
        assert str(error) == "boom (file=a.py, line=3)"
        assert error.message == "boom"


class TestDomainExceptions:
    @pytest.mark.parametrize(
        "error,parent",
        [
            (ParsingError("a.go", "go", "unbalanced braces"), AnalysisError),
            (AnalysisInProgressError(), AnalysisError),
            (InvalidPathError(Path("missing"), "path does not exist"), ConfigurationError),
            (InvalidConfigError("weights.naming", -1, "must be positive"), ConfigurationError),
        ],
    )
    def test_everything_is_a_coderot_error(self, error, parent):
        assert isinstance(error, parent)
        assert isinstance(error, CodeRotError)

    def test_parsing_error_fields(self):
        error = ParsingError("src/a.js", "javascript", "unbalanced braces in function 'run'")
        assert error.filepath == "src/a.js"
        assert error.language == "javascript"
        assert str(error).startswith("Failed to parse javascript file: src/a.js")

    def test_invalid_config_error_fields(self):
        error = InvalidConfigError("weights.vibes", 1.0, "unknown metric name")
        assert error.key == "weights.vibes"
        assert error.details["reason"] == "unknown metric name"
        assert "weights.vibes" in str(error)
