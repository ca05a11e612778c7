"""Map positions inside normalized comment text back to the source file.

In-text columns count runes (code points); file columns count bytes of the
UTF-8 encoded line, like the Go toolchain reports them.
"""

from __future__ import annotations

from .errors import PositionError
from .models import CommentKind, CommentRecord, FilePosition, Position

# Length of the "//" and "/*" comment markers.
MARKER_LENGTH = 2


def rune_to_byte_column(line: str, column: int) -> int:
    """Convert a 1-based rune column of *line* into a 1-based byte column."""
    return len(line[:max(column - 1, 0)].encode("utf-8")) + 1


def byte_to_rune_column(line: str, column: int) -> int:
    """Convert a 1-based byte column of *line* into a 1-based rune column."""
    head = line.encode("utf-8")[:max(column - 1, 0)]
    return len(head.decode("utf-8", errors="ignore")) + 1


def text_offset(record: CommentRecord, line: int) -> int:
    """Byte offset in the raw source line where text line *line* begins."""
    index = line
    for comment in record.group.comments:
        if index <= comment.line_count:
            if comment.kind is CommentKind.LINE or index == 1:
                return comment.column - 1 + MARKER_LENGTH
            return 0
        index -= comment.line_count
    raise PositionError(
        f"invalid line number inside comment: "
        f"{record.filename}:{record.group.line + line - 1}"
    )


def to_file_position(record: CommentRecord, pos: Position) -> FilePosition:
    """Resolve an in-text position of *record* to a file position.

    Raises:
        PositionError: the position does not exist in the record's source.
    """
    raw = record.line_at(pos.line)
    offset = text_offset(record, pos.line)
    raw_bytes = raw.encode("utf-8")
    if offset > len(raw_bytes):
        raise PositionError(
            f"invalid column number inside comment: "
            f"{record.filename}:{record.group.line + pos.line - 1}"
        )

    tail = raw_bytes[offset:].decode("utf-8")
    if pos.column - 1 > len(tail):
        raise PositionError(
            f"invalid column number inside comment: "
            f"{record.filename}:{record.group.line + pos.line - 1}:{pos.column}"
        )
    column = offset + rune_to_byte_column(tail, pos.column)

    # Byte offset of the record's first line, then of the target line.
    line_start = record.group.offset - (record.group.column - 1)
    for previous in record.lines[:pos.line - 1]:
        line_start += len(previous.encode("utf-8")) + 1

    return FilePosition(
        filename=record.filename,
        line=record.group.line + pos.line - 1,
        column=column,
        offset=line_start + column - 1,
    )


def make_replacement(raw_line: str, column: int) -> str:
    """Insert a period into *raw_line* before the 1-based rune *column*.

    Out-of-range columns leave the line unmodified.
    """
    if column < 1 or column - 1 > len(raw_line):
        return raw_line
    return raw_line[:column - 1] + "." + raw_line[column - 1:]
