"""Turn a comment record into plain text, blanking out non-prose lines.

Excluded content (code examples, tool directives, URLs, cgo code, example
output) is replaced by an empty line, so the text always has exactly as many
lines as the comment spans in the source.
"""

from __future__ import annotations

import re
from typing import List, Pattern, Sequence

from .models import Comment, CommentKind, CommentRecord

PLACEHOLDER = ""

# Special tags in comments like "// nolint:", or "// +k8s:".
TAGS = re.compile(r"^\+?[a-z0-9]+:")

# Special hashtags in comments like "// #nosec".
HASHTAGS = re.compile(r"^#[a-z]+($|\s)")

# URL at the end of the line.
END_URL = re.compile(r"[a-z]+://[^\s]+$")

# "// Output:" blocks of testable examples.
EXAMPLE_OUTPUT = re.compile(r"(?i)^\s*(unordered\s+)?output:")

CGO_EXPORT = "//export "
CGO_MARKERS = ("#include", "#define")


def normalize(record: CommentRecord, exclude: Sequence[Pattern[str]] = ()) -> str:
    """Return the logical text of *record* with special lines blanked.

    The result has one line per source line spanned by the record.
    """
    comments = record.group.comments
    if len(comments) == 1 and is_special_block(comments[0].text):
        return "\n" * (comments[0].line_count - 1)

    lines: List[str] = []
    in_output = False
    for comment in comments:
        if comment.kind is CommentKind.LINE:
            content = comment.text[2:]
            if EXAMPLE_OUTPUT.match(content):
                in_output = True
            if in_output or is_special_line(comment.text) or _excluded(content, exclude):
                lines.append(PLACEHOLDER)
            else:
                lines.append(content)
            continue

        in_output = False
        for line in _block_lines(comment):
            if is_special_line(line) or _excluded(line, exclude):
                lines.append(PLACEHOLDER)
            else:
                lines.append(line)
    return "\n".join(lines)


def is_special_block(comment: str) -> bool:
    """Check that a block comment is cgo code, not a regular sentence."""
    if not comment.startswith("/*"):
        return False
    return any(marker in comment for marker in CGO_MARKERS)


def is_special_line(comment: str) -> bool:
    """Check that a comment line shouldn't be checked as a regular sentence."""
    # Skip cgo export tags: https://golang.org/cmd/cgo/#hdr-C_references_to_Go
    if comment.startswith(CGO_EXPORT):
        return True

    comment = _trim_prefix(comment, "//")
    comment = _trim_prefix(comment, "/*")

    # Indented lines are code examples, which shouldn't end with period
    if comment.startswith(("  ", " \t", "\t")):
        return True

    # Skip tags and URLs
    comment = comment.strip()
    return bool(
        TAGS.match(comment)
        or HASHTAGS.match(comment)
        or END_URL.search(comment)
        or comment.startswith("+build")
    )


def _block_lines(comment: Comment) -> List[str]:
    text = comment.text[2:]
    if text.endswith("*/"):
        text = text[:-2]
    return text.split("\n")


def _excluded(line: str, exclude: Sequence[Pattern[str]]) -> bool:
    return any(pattern.search(line) for pattern in exclude)


def _trim_prefix(s: str, prefix: str) -> str:
    return s[len(prefix):] if s.startswith(prefix) else s
