"""Tests for the coderot command line."""

import json

import pytest
from typer.testing import CliRunner

from coderot import __version__
from coderot.cli import app

runner = CliRunner()


@pytest.fixture
def project(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    src = tmp_path / "src"
    src.mkdir()
    (src / "util.py").write_text("def add_numbers(left, right):\n    return left + right\n")
    (src / "io.py").write_text("def f(a):\n    x = open(a)\n    return x\n")
    return src


class TestAnalyzeCommand:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_json_output(self, project):
        result = runner.invoke(app, [str(project), "--json", "--workers", "1"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["total_files"] == 2
        assert [f["file_path"] for f in data["files_analyzed"]] == ["io.py", "util.py"]
        assert list(data["metrics"]) == [
            "complexity",
            "structure",
            "comments",
            "naming",
            "duplication",
            "error_handling",
        ]

    def test_exclude(self, project):
        result = runner.invoke(app, [str(project), "--json", "-x", "io.py"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["total_files"] == 1

    def test_plain_report(self, project):
        result = runner.invoke(app, [str(project), "--no-color", "--top", "1"])

        assert result.exit_code == 0, result.output
        assert "Code Rot Report" in result.stdout
        assert "Worst files" in result.stdout
        assert "io.py" in result.stdout

    def test_config_file(self, project, tmp_path):
        config = tmp_path / "strict.toml"
        config.write_text("[weights]\nerror_handling = 10.0\n")
        result = runner.invoke(app, [str(project), "--json", "--config", str(config)])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["metrics"]["error_handling"]["weight"] == 10.0

    def test_missing_path(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, [str(tmp_path / "missing")])

        assert result.exit_code == 1
        assert "Invalid path" in result.output

    def test_unknown_weight_is_an_error(self, project, tmp_path):
        config = tmp_path / "typo.toml"
        config.write_text("[weights]\nnamin = 1.0\n")
        result = runner.invoke(app, [str(project), "--config", str(config)])

        assert result.exit_code == 1
        assert "weights.namin" in result.output

    def test_verbose_and_quiet_conflict(self, project):
        result = runner.invoke(app, [str(project), "--verbose", "--quiet"])
        assert result.exit_code == 2

    def test_log_file(self, project, tmp_path):
        log_file = tmp_path / "coderot.log"
        result = runner.invoke(app, [str(project), "--json", "--log-file", str(log_file)])

        assert result.exit_code == 0, result.output
        assert "Loaded settings" in log_file.read_text(encoding="utf-8")

    def test_log_file_from_config(self, project, tmp_path):
        log_file = tmp_path / "from-config.log"
        config = tmp_path / "logging.toml"
        config.write_text(f'verbosity = "quiet"\nlog_file = "{log_file.as_posix()}"\n')
        result = runner.invoke(app, [str(project), "--json", "--config", str(config)])

        assert result.exit_code == 0, result.output
        assert "Loaded settings" in log_file.read_text(encoding="utf-8")
