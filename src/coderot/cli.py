"""Command-line interface for coderot"""

import dataclasses
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.text import Text

from . import __version__
from .api import analyze_path
from .config import load_config
from .exceptions import CodeRotError
from .formatters import DEFAULT_THEME, PLAIN_THEME, JsonFormatter, ReportOptions, RichFormatter
from .logging_config import get_logger, setup_logging

app = typer.Typer(
    name="coderot",
    help="coderot - heuristic code quality scoring",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        Console().print(f"[bold cyan]coderot[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)


@app.command()
def analyze(
    path: Path = typer.Argument(
        Path("."),
        help="Directory or file to analyze",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file path (TOML format)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        help="Number of parallel workers (default: auto-detect)",
        min=1,
        max=64,
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for a single file before skipping it",
        min=0.001,
    ),
    top: int = typer.Option(
        3,
        "--top",
        "-t",
        help="Number of worst files to display",
        min=0,
    ),
    max_issues: int = typer.Option(
        3,
        "--max-issues",
        help="Issues to display per file",
        min=0,
    ),
    summary_only: bool = typer.Option(
        False,
        "--summary-only",
        "-s",
        help="Only show the overall score and conclusion",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show every file and issue, and enable DEBUG logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress all but ERROR logging",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also write a DEBUG-level log of the run to this file",
        dir_okay=False,
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the result as JSON",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Plain output without colors",
    ),
    exclude: Optional[List[str]] = typer.Option(
        None,
        "--exclude",
        "-x",
        help="Extra glob pattern to skip (repeatable)",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """
    Score the code under PATH for rot.

    [bold cyan]Examples:[/bold cyan]

      coderot src/

      coderot . --top 10 --max-issues 5

      coderot . --json | jq .code_quality_score

      coderot . --exclude "tests/*" --summary-only
    """
    if verbose and quiet:
        raise typer.BadParameter("--verbose and --quiet are mutually exclusive")

    logger = get_logger()
    err_console = Console(stderr=True, no_color=no_color)

    try:
        settings = load_config(
            config_file=config,
            workers=workers,
            timeout_seconds=timeout,
            verbose=verbose,
            quiet=quiet,
            log_file=str(log_file) if log_file else None,
        )
        try:
            setup_logging(settings.verbosity, settings.log_file)
        except OSError as e:
            raise CodeRotError(f"Cannot open log file '{settings.log_file}': {e}")
        if exclude:
            settings = dataclasses.replace(
                settings, exclude_patterns=[*settings.exclude_patterns, *exclude]
            )
        logger.debug(f"Loaded settings: {settings}")

        result = analyze_path(path, config=settings)
    except CodeRotError as e:
        logger.debug(f"{e.__class__.__name__}: {e}")
        err_console.print(Text.assemble(("Error:", "red"), f" {e}"))
        raise typer.Exit(1)

    if as_json:
        JsonFormatter().render(result)
        return

    formatter = RichFormatter(
        theme=PLAIN_THEME if no_color else DEFAULT_THEME,
        options=ReportOptions(
            verbose=verbose,
            top_files=top,
            max_issues=max_issues,
            summary_only=summary_only,
        ),
        console=Console(no_color=no_color, highlight=False),
    )
    formatter.render(result)


def main() -> None:
    """Console script entry point."""
    app()
