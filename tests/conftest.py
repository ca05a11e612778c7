"""Pytest configuration and fixtures for commentdot tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Callable, Generator, List

import pytest

from commentdot.models import Comment, CommentGroup, CommentRecord, SourceFile
from commentdot.parser import GoParser


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def fixtures_dir() -> Path:
    """Get path to the Go test files."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def go_parser() -> GoParser:
    return GoParser()


@pytest.fixture
def parse(go_parser: GoParser) -> Callable[[str], SourceFile]:
    """Parse Go code held in a string."""

    def _parse(code: str, filename: str = "example.go") -> SourceFile:
        return go_parser.parse_source(code.encode("utf-8"), filename)

    return _parse


@pytest.fixture
def write_go(temp_dir: Path) -> Callable[[str], Path]:
    """Write Go code to a file in the temporary directory."""

    def _write(code: str, name: str = "example.go") -> Path:
        path = temp_dir / name
        path.write_bytes(code.encode("utf-8"))
        return path

    return _write


@pytest.fixture
def make_record() -> Callable[..., CommentRecord]:
    """Build a comment record from raw comment texts placed at column 1.

    Each text is one comment token; consecutive tokens sit on consecutive
    lines, like a comment group in a Go file.
    """

    def _make(texts: List[str], decl: bool = False) -> CommentRecord:
        comments = []
        lines: List[str] = []
        line, offset = 1, 0
        for text in texts:
            comment = Comment(
                text=text,
                line=line,
                column=1,
                offset=offset,
                end_line=line + text.count("\n"),
            )
            comments.append(comment)
            lines.extend(text.split("\n"))
            line = comment.end_line + 1
            offset += len(text.encode("utf-8")) + 1
        return CommentRecord(
            filename="example.go",
            group=CommentGroup(tuple(comments)),
            lines=tuple(lines),
            decl=decl,
        )

    return _make
