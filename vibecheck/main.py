from __future__ import annotations

"""
Typer CLI entry point: ``vibecheck [scan] [DIRECTORY]``, ``vibecheck list``
and ``vibecheck init``.

``scan`` is the default command, so ``vibecheck``, ``vibecheck ./app`` and
``vibecheck -f html`` all scan. The exit code is 0 whenever a scan
completes, whatever it finds; setup errors (missing directory, unreadable
explicit config, bad format or init type) exit with 1.
"""

import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from vibecheck.config import get_default_checkers
from vibecheck.errors import UnsupportedFormatError, VibeCheckError
from vibecheck.logging_setup import configure_logging
from vibecheck.reporting.console import print_findings
from vibecheck.reporting.render import REPORT_EXTENSIONS, REPORT_FORMATS, write_report
from vibecheck.scan import ScanOptions, VibeCheck

logger = logging.getLogger(__name__)

app = typer.Typer(help="VibeCheck - security scanner for web app codebases.")

COMMANDS = ("scan", "list", "init")
_ROOT_FLAGS = ("--help", "--install-completion", "--show-completion")

INIT_PROFILES = {
    "basic": "vibecheck:recommended",
    "strict": "vibecheck:strict",
    "next": "vibecheck:next",
    "supabase": "vibecheck:supabase",
}

DEFAULT_CONFIG_FILE = "vibecheck.config.json"
DEFAULT_REPORT_FORMAT = "markdown"


def _fail(message: str) -> None:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _infer_format(output: Optional[Path]) -> str:
    """Pick a format from the output file's extension, falling back to markdown."""
    if output is not None:
        suffix = output.suffix.lstrip(".").lower()
        for fmt, ext in REPORT_EXTENSIONS.items():
            if suffix == ext:
                return fmt
    return DEFAULT_REPORT_FORMAT


@app.command()
def scan(
    directory: Path = typer.Argument(Path("."), help="Directory to scan."),
    ignore: Optional[List[str]] = typer.Option(None, "--ignore", "-i", help="Glob pattern to ignore (repeatable)."),
    skip: Optional[List[str]] = typer.Option(None, "--skip", "-s", help="Checker id to skip (repeatable)."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Report format: text, json, markdown or html."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Report file path."),
    passed: Optional[bool] = typer.Option(None, "--passed/--no-passed", help="Show passed checks."),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Explicit config file."),
    allow_python_config: bool = typer.Option(
        False,
        "--allow-python-config",
        help="Also load Python config files (executes the file).",
    ),
) -> None:
    """
    Scan a directory with every enabled checker.

    Prints the results to the terminal and, when a format or output file is
    given (here or in the config's reportOptions), writes a report file.
    """
    log = configure_logging(verbose)

    if format is not None and format not in REPORT_FORMATS:
        _fail(str(UnsupportedFormatError(format)))

    options = ScanOptions(
        directory=directory,
        ignore_patterns=list(ignore or []),
        skip_checkers=list(skip or []),
        verbose=verbose,
        config_path=config,
        allow_python_config=allow_python_config,
        logger=log,
    )
    try:
        result = VibeCheck(options).scan()
    except VibeCheckError as e:
        _fail(str(e))

    report_options = result.config.report_options if result.config is not None else None
    fmt = format or (report_options.format if report_options else None)
    output_file = output or (Path(report_options.output_file) if report_options and report_options.output_file else None)
    show_passed = passed
    if show_passed is None:
        show_passed = report_options.show_passed if report_options and report_options.show_passed is not None else True

    print_findings(result.findings, show_passed=show_passed)

    if fmt is None and output_file is None:
        return
    fmt = fmt or _infer_format(output_file)
    try:
        path = write_report(
            result.findings,
            fmt,
            output_file=output_file,
            show_passed=show_passed,
            generated_at=result.timestamp,
        )
    except UnsupportedFormatError as e:
        _fail(str(e))
    except OSError as e:
        _fail(f"Could not write report: {e}")
    typer.echo(f"Report saved to {path}")


@app.command("list")
def list_checkers() -> None:
    """List every registered checker."""
    table = Table(title="Available Checkers", header_style="bold magenta", box=box.ROUNDED)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Description", style="dim")
    for checker in get_default_checkers():
        table.add_row(checker.id, checker.name, checker.description)
    Console().print(table)


@app.command()
def init(
    type: str = typer.Option("basic", "--type", "-t", help="Config type: basic, strict, next or supabase."),
    file: Path = typer.Option(Path(DEFAULT_CONFIG_FILE), "--file", "-f", help="Config file to create."),
) -> None:
    """Write a starter config file that extends a built-in profile."""
    if type not in INIT_PROFILES:
        _fail(f"Unknown config type {type!r}; choose one of {', '.join(INIT_PROFILES)}")
    if file.exists():
        _fail(f"{file} already exists; not overwriting it")

    starter = {
        "extends": INIT_PROFILES[type],
        "ignorePatterns": ["**/*.test.*", "**/*.spec.*", "**/__tests__/**"],
    }
    file.write_text(json.dumps(starter, indent=2) + "\n", encoding="utf-8")
    typer.echo(f"Created {file} (extends {INIT_PROFILES[type]})")


def main() -> None:
    """Console script entry point; routes bare invocations to ``scan``."""
    args = sys.argv[1:]
    if not args or (args[0] not in COMMANDS and args[0] not in _ROOT_FLAGS):
        sys.argv.insert(1, "scan")
    app()


if __name__ == "__main__":
    main()
