"""Typer-based CLI for commentdot."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .config import load_settings
from .errors import CommentDotError
from .linter import fix, replace, run
from .models import Scope
from .parser import GoParser, find_go_files

app = typer.Typer(
    help="Check that comments in Go files end in a period.",
    add_completion=False,
    rich_markup_mode="rich",
)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


def _fail(message: str) -> NoReturn:
    typer.echo(typer.style(f"Error: {message}", fg=typer.colors.RED), err=True)
    raise typer.Exit(code=1)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.command()
def main(
    paths: List[Path] = typer.Argument(..., help="Go files or directories to check."),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config file (default: .commentdot.toml)."
    ),
    fix_issues: bool = typer.Option(
        False, "--fix", "-f", help="Fix issues, and print fixed version to stdout."
    ),
    write: bool = typer.Option(
        False, "--write", "-w", help="Fix issues, and write result to original file."
    ),
    scope: Optional[Scope] = typer.Option(
        None, "--scope", "-s", case_sensitive=False, help="Which comments to check."
    ),
    period: Optional[bool] = typer.Option(
        None, "--period/--no-period", help="Check for a period at the end of comments."
    ),
    capital: Optional[bool] = typer.Option(
        None, "--capital/--no-capital", help="Check that sentences start with a capital letter."
    ),
    exclude: Optional[List[str]] = typer.Option(
        None, "--exclude", "-e", help="Regexp for lines to exclude (repeatable)."
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
):
    """Check comments in Go files, print issues, or fix them."""
    _setup_logging(verbose)

    try:
        settings = load_settings(
            config_file,
            scope=scope,
            period=period,
            capital=capital,
            exclude=list(exclude) if exclude else None,
        )
        parser = GoParser()
    except CommentDotError as exc:
        _fail(str(exc))

    files: List[Path] = []
    for path in paths:
        if not path.exists():
            _fail(f"Path '{path}' does not exist")
        files.extend(find_go_files(path))

    found = 0
    for path in files:
        try:
            source = parser.parse_file(path)
            if fix_issues:
                fixed = fix(path, source, settings)
                if fixed is not None:
                    typer.echo(fixed.decode("utf-8"), nl=False)
            elif write:
                replace(path, source, settings)
            else:
                issues = run(source, settings)
                for issue in issues:
                    typer.echo(str(issue))
                found += len(issues)
        except (CommentDotError, OSError) as exc:
            _fail(f"{path}: {exc}")

    if found:
        raise typer.Exit(code=1)
