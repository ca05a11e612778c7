"""Core data models shared by the parser, extractor, checkers and linter."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .errors import PositionError


class Scope(str, Enum):
    """Which comments a check run considers."""

    DECL = "decl"
    TOP = "top"
    ALL = "all"


class CommentKind(str, Enum):
    LINE = "line"
    BLOCK = "block"


@dataclass(frozen=True)
class Comment:
    """A single ``//`` or ``/* */`` token.

    ``line`` and ``column`` are 1-based, ``column`` is counted in bytes and
    ``offset`` is the 0-based byte offset of the token in its file.
    """

    text: str
    line: int
    column: int
    offset: int
    end_line: int
    inline: bool = False

    @property
    def end_offset(self) -> int:
        return self.offset + len(self.text.encode("utf-8"))

    @property
    def kind(self) -> CommentKind:
        if self.text.startswith("/*"):
            return CommentKind.BLOCK
        return CommentKind.LINE

    @property
    def line_count(self) -> int:
        return self.end_line - self.line + 1


@dataclass(frozen=True)
class CommentGroup:
    comments: Tuple[Comment, ...]

    @property
    def line(self) -> int:
        return self.comments[0].line

    @property
    def column(self) -> int:
        return self.comments[0].column

    @property
    def offset(self) -> int:
        return self.comments[0].offset

    @property
    def end_line(self) -> int:
        return self.comments[-1].end_line

    @property
    def end_offset(self) -> int:
        return self.comments[-1].end_offset

    @property
    def inline(self) -> bool:
        return self.comments[0].inline


@dataclass(frozen=True)
class Declaration:
    """A top-level declaration and its attached leading comment."""

    kind: str
    line: int
    end_line: int
    lparen: Optional[int] = None
    rparen: Optional[int] = None
    doc: Optional[CommentGroup] = None
    cgo: bool = False


@dataclass(frozen=True)
class SourceFile:
    filename: str
    content: bytes
    lines: Tuple[str, ...]
    comments: Tuple[Comment, ...] = ()
    groups: Tuple[CommentGroup, ...] = ()
    declarations: Tuple[Declaration, ...] = ()


@dataclass(frozen=True)
class FilePosition:
    """A file-global position: 1-based line, 1-based byte column."""

    filename: str
    line: int
    column: int
    offset: int = 0

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"


@dataclass(frozen=True)
class Position:
    """A position inside normalized comment text (1-based, rune columns)."""

    line: int
    column: int


@dataclass(frozen=True)
class CommentRecord:
    filename: str
    group: CommentGroup
    lines: Tuple[str, ...]
    decl: bool = False

    @property
    def kind(self) -> CommentKind:
        return self.group.comments[0].kind

    @property
    def start(self) -> FilePosition:
        return FilePosition(
            filename=self.filename,
            line=self.group.line,
            column=self.group.column,
            offset=self.group.offset,
        )

    def line_at(self, line: int) -> str:
        """Return the raw source line for a 1-based in-text line number."""
        if line < 1 or line > len(self.lines):
            raise PositionError(
                f"invalid line number inside comment: "
                f"{self.filename}:{self.group.line + line - 1}"
            )
        return self.lines[line - 1]


@dataclass(frozen=True)
class Issue:
    pos: FilePosition
    message: str
    replacement: Optional[str] = field(default=None, compare=False)

    def __str__(self) -> str:
        return f"{self.message}: {self.pos}"
