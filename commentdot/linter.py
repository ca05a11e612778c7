"""Run the checks on a parsed file, and fix the file in place if asked."""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import Dict, List, Optional, Union

from .checks import check_comments
from .config import Settings
from .errors import PositionError, UnsuitableInputError
from .extractor import extract
from .models import Issue, SourceFile

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def run(source: SourceFile, settings: Settings) -> List[Issue]:
    """Return all issues in *source*, sorted by file, line and column.

    Files whose positions cannot be trusted (``//line`` directives, cgo
    output) are skipped and yield no issues.
    """
    try:
        records = extract(source, settings.scope)
    except UnsuitableInputError as exc:
        logger.warning("Skipping %s: %s", source.filename, exc)
        return []

    issues = check_comments(records, settings)
    sort_issues(issues)
    logger.debug("Found %d issue(s) in %s", len(issues), source.filename)
    return issues


def fix(path: PathLike, source: SourceFile, settings: Settings) -> Optional[bytes]:
    """Fix all issues and return the new file content.

    Lines without a replacement are kept byte for byte. Only period issues
    carry a replacement, so a line with both a period and a capital issue
    gets the period fix.

    Returns:
        The fixed content, or ``None`` for an empty file.
    """
    content = Path(path).read_bytes()
    if not content:
        return None

    fixes: Dict[int, List[Issue]] = {}
    for issue in run(source, settings):
        if issue.replacement is None:
            continue
        fixes.setdefault(issue.pos.line, []).append(issue)

    lines = content.split(b"\n")
    for line, issues in fixes.items():
        if not 1 <= line <= len(lines):
            raise PositionError(f"invalid line number: {path}:{line}")
        if len(issues) == 1:
            lines[line - 1] = issues[0].replacement.encode("utf-8")
            continue
        # Several comments on one line: insert every period, rightmost first.
        fixed = lines[line - 1]
        for issue in sorted(issues, key=lambda iss: iss.pos.column, reverse=True):
            fixed = fixed[:issue.pos.column - 1] + b"." + fixed[issue.pos.column - 1:]
        lines[line - 1] = fixed
    return b"\n".join(lines)


def replace(path: PathLike, source: SourceFile, settings: Settings) -> None:
    """Rewrite the original file with its fixed version, keeping its mode."""
    mode = stat.S_IMODE(os.stat(path).st_mode)

    fixed = fix(path, source, settings)
    if fixed is None:
        return

    Path(path).write_bytes(fixed)
    os.chmod(path, mode)


def sort_issues(issues: List[Issue]) -> None:
    """Sort by filename, line and column."""
    issues.sort(key=lambda iss: (iss.pos.filename, iss.pos.line, iss.pos.column))

