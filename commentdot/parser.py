"""Go source parser built on Tree-sitter.

Produces an immutable :class:`~commentdot.models.SourceFile`: the file's
lines, every comment token, comments grouped the way the Go toolchain groups
them, and the top-level declarations with their attached doc comments.
"""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Set, Tuple

from .errors import ParseError
from .models import Comment, CommentGroup, Declaration, SourceFile

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# File discovery
# ---------------------------------------------------------------------------
GO_EXTENSION = ".go"

SKIP_DIRS: Set[str] = {
    "vendor", "node_modules", ".git", ".hg", ".svn",
    ".idea", ".vscode", "__pycache__",
}

# Tree-sitter node type -> declaration kind
DECLARATION_TYPES: Dict[str, str] = {
    "function_declaration": "function",
    "method_declaration": "method",
    "type_declaration": "type",
    "const_declaration": "const",
    "var_declaration": "var",
    "import_declaration": "import",
}

CGO_IMPORT = '"C"'


def find_go_files(root: Path) -> Iterator[Path]:
    """Yield Go files under *root*, skipping vendored and tool directories."""
    if root.is_file():
        yield root
        return
    for file_path in sorted(root.rglob(f"*{GO_EXTENSION}")):
        parts = file_path.relative_to(root).parts[:-1]
        if any(part in SKIP_DIRS for part in parts):
            continue
        if file_path.is_file():
            yield file_path


# ===================================================================
# Tree-sitter Go parser
# ===================================================================

class GoParser:
    """Parse Go files into :class:`SourceFile` values.

    Uses the ``tree-sitter-go`` grammar package. The concrete syntax tree
    keeps every comment token with exact byte positions, which is all the
    checks need.
    """

    _GRAMMAR_MODULE = "tree_sitter_go"

    def __init__(self) -> None:
        self._parser = self._init_parser()

    def _init_parser(self) -> Any:
        try:
            from tree_sitter import Language, Parser as TSParser
            mod = importlib.import_module(self._GRAMMAR_MODULE)
        except ImportError as exc:
            raise ParseError(
                f"tree-sitter Go grammar is not available ({exc}). "
                "Install with: pip install tree-sitter tree-sitter-go"
            ) from exc
        # tree-sitter >=0.22 per-language packages expose a language()
        # function that returns the Language capsule.
        parser = TSParser(Language(mod.language()))
        logger.debug("Loaded tree-sitter parser for go")
        return parser

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse_file(self, file_path: Path, content: Optional[bytes] = None) -> SourceFile:
        if content is None:
            try:
                content = Path(file_path).read_bytes()
            except OSError as exc:
                raise ParseError(f"read file {file_path}: {exc}") from exc
        return self.parse_source(content, str(file_path))

    def parse_source(self, content: bytes, filename: str = "<source>") -> SourceFile:
        try:
            text = content.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"decode {filename}: {exc}") from exc

        tree = self._parser.parse(content)
        root = tree.root_node
        if root.has_error:
            raise ParseError(f"syntax error in {filename}")

        raw_lines = content.split(b"\n")
        comments = tuple(
            _comment_from_node(node, raw_lines) for node in _collect_comment_nodes(root)
        )
        groups = tuple(_group_comments(comments, content))
        declarations = tuple(_collect_declarations(root, groups, content))
        logger.debug(
            "Parsed %s: %d comments in %d groups, %d declarations",
            filename, len(comments), len(groups), len(declarations),
        )
        return SourceFile(
            filename=filename,
            content=content,
            lines=tuple(text.split("\n")),
            comments=comments,
            groups=groups,
            declarations=declarations,
        )


# ===================================================================
# Tree helpers
# ===================================================================

def _collect_comment_nodes(root: Any) -> List[Any]:
    """Return every comment node in *root*, in source order."""
    found: List[Any] = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "comment":
            found.append(node)
            continue
        stack.extend(reversed(node.children))
    found.sort(key=lambda n: n.start_byte)
    return found


def _comment_from_node(node: Any, raw_lines: Sequence[bytes]) -> Comment:
    row, column = node.start_point
    prefix = raw_lines[row][:column] if row < len(raw_lines) else b""
    return Comment(
        text=node.text.decode("utf-8"),
        line=row + 1,
        column=column + 1,
        offset=node.start_byte,
        end_line=node.end_point[0] + 1,
        inline=bool(prefix.strip()),
    )


def _group_comments(comments: Sequence[Comment], content: bytes) -> Iterator[CommentGroup]:
    """Group adjacent comments like go/parser does.

    A comment joins the current group when it starts on the line right after
    the previous one ends and only whitespace separates them. Comments after
    code on the same line stand alone.
    """
    current: List[Comment] = []
    for comment in comments:
        if current and _continues(current, comment, content):
            current.append(comment)
            continue
        if current:
            yield CommentGroup(tuple(current))
        current = [comment]
    if current:
        yield CommentGroup(tuple(current))


def _continues(current: List[Comment], comment: Comment, content: bytes) -> bool:
    prev = current[-1]
    if current[0].inline or comment.inline:
        return False
    if comment.line != prev.end_line + 1:
        return False
    return not content[prev.end_offset:comment.offset].strip()


def _collect_declarations(
    root: Any,
    groups: Sequence[CommentGroup],
    content: bytes,
) -> Iterator[Declaration]:
    by_end_line: Dict[int, CommentGroup] = {
        g.end_line: g for g in groups if not g.inline
    }
    for child in root.children:
        kind = DECLARATION_TYPES.get(child.type)
        if kind is None:
            continue
        line = child.start_point[0] + 1
        doc = by_end_line.get(line - 1)
        if doc is not None and content[doc.end_offset:child.start_byte].strip():
            doc = None
        lparen, rparen = _find_parens(child)
        yield Declaration(
            kind=kind,
            line=line,
            end_line=child.end_point[0] + 1,
            lparen=lparen,
            rparen=rparen,
            doc=doc,
            cgo=kind == "import" and _imports_cgo(child),
        )


def _find_parens(decl_node: Any) -> Tuple[Optional[int], Optional[int]]:
    """Byte offsets of a grouped declaration's parentheses: ``const (...)``."""
    lparen: Optional[int] = None
    rparen: Optional[int] = None
    for child in decl_node.children:
        if child.type == "(" and lparen is None:
            lparen = child.start_byte
        elif child.type == ")":
            rparen = child.start_byte
        elif child.type.endswith("_spec_list"):
            return _find_parens(child)
    if lparen is None or rparen is None:
        return None, None
    return lparen, rparen


def _imports_cgo(import_node: Any) -> bool:
    stack = [import_node]
    while stack:
        node = stack.pop()
        if node.type == "import_spec":
            path = node.child_by_field_name("path")
            if path is not None and path.text.decode("utf-8") == CGO_IMPORT:
                return True
            continue
        stack.extend(node.children)
    return False
