"""Comment extraction: select the comment groups a check run looks at."""

from __future__ import annotations

import logging
import re
from typing import List, Set

from .errors import PositionError, UnsuitableInputError
from .models import CommentGroup, CommentKind, CommentRecord, Scope, SourceFile

logger = logging.getLogger(__name__)

# The leftmost column of a file, and the column of comments one tab deep
# inside a top-level block like ``const (...)``.
TOP_LEVEL_COLUMN = 1
BLOCK_COLUMN = 2

# ``//line file.go:10`` and ``/*line file.go:10*/`` rewrite reported positions.
LINE_DIRECTIVE = re.compile(r"^(//|/\*)line \S*:\d+")
CGO_GENERATED = "// Code generated by cmd/cgo; DO NOT EDIT."


def extract(source: SourceFile, scope: Scope) -> List[CommentRecord]:
    """Return the comments of *source* selected by *scope*.

    Raises:
        UnsuitableInputError: positions in the file cannot be trusted.
        PositionError: a comment lies outside the file's known lines.
    """
    check_consistency(source)

    decl_groups = _declaration_groups(source)
    skipped = _cgo_preambles(source)

    if scope == Scope.ALL:
        groups = list(source.groups)
    elif scope == Scope.TOP:
        groups = _block_groups(source) + _top_level_groups(source)
    else:
        groups = _block_groups(source) + decl_groups

    records: List[CommentRecord] = []
    seen: Set[int] = set()
    doc_offsets = {g.offset for g in decl_groups}
    for group in groups:
        if group.offset in seen or group.offset in skipped:
            continue
        seen.add(group.offset)
        records.append(_make_record(source, group, decl=group.offset in doc_offsets))
    logger.debug(
        "Extracted %d comments from %s (scope=%s)",
        len(records), source.filename, scope.value,
    )
    return records


def check_consistency(source: SourceFile) -> None:
    """Fail closed on files whose positions do not match their layout."""
    for comment in source.comments:
        # Block directives apply anywhere, line directives only at column 1.
        if LINE_DIRECTIVE.match(comment.text) and (
            comment.kind is CommentKind.BLOCK or comment.column == TOP_LEVEL_COLUMN
        ):
            raise UnsuitableInputError(
                f"line directive found: {source.filename}:{comment.line}"
            )
        if comment.column != TOP_LEVEL_COLUMN:
            continue
        if comment.text.rstrip() == CGO_GENERATED:
            raise UnsuitableInputError(f"cgo generated file: {source.filename}")

    if source.groups and source.groups[-1].end_line > len(source.lines):
        raise PositionError(
            f"inconsistent line numbers: {source.filename}:{source.groups[-1].end_line}"
        )


# ------------------------------------------------------------------
# Selectors
# ------------------------------------------------------------------

def _declaration_groups(source: SourceFile) -> List[CommentGroup]:
    """Doc comments of top-level function and general declarations."""
    return [d.doc for d in source.declarations if d.doc is not None and not d.cgo]


def _cgo_preambles(source: SourceFile) -> Set[int]:
    """Offsets of doc comments above ``import "C"``; those hold C code."""
    return {d.doc.offset for d in source.declarations if d.cgo and d.doc is not None}


def _block_groups(source: SourceFile) -> List[CommentGroup]:
    """Comments directly inside top-level blocks: ``var (...)``, ``const (...)``."""
    groups: List[CommentGroup] = []
    for decl in source.declarations:
        # No parenthesis == no block
        if decl.lparen is None or decl.rparen is None:
            continue
        for group in source.groups:
            if not decl.lparen < group.offset < decl.rparen:
                continue
            if group.column != BLOCK_COLUMN:
                continue
            groups.append(group)
    return groups


def _top_level_groups(source: SourceFile) -> List[CommentGroup]:
    return [g for g in source.groups if g.column == TOP_LEVEL_COLUMN]


def _make_record(source: SourceFile, group: CommentGroup, decl: bool) -> CommentRecord:
    if group.end_line > len(source.lines):
        raise PositionError(
            f"invalid line number inside comment: {source.filename}:{group.line}"
        )
    return CommentRecord(
        filename=source.filename,
        group=group,
        lines=tuple(source.lines[group.line - 1:group.end_line]),
        decl=decl,
    )

