"""Tests for the tree-sitter Go parser."""

from pathlib import Path

import pytest

from commentdot.errors import ParseError
from commentdot.models import CommentKind
from commentdot.parser import GoParser, find_go_files


def test_parse_collects_comments(parse):
    """Test that every comment token is collected in source order."""
    source = parse(
        "// Package doc.\n"
        "package example\n"
        "\n"
        "/* Block. */\n"
        "var x = 1 // inline\n"
    )

    texts = [c.text for c in source.comments]
    assert texts == ["// Package doc.", "/* Block. */", "// inline"]
    assert source.comments[1].kind is CommentKind.BLOCK
    assert source.comments[2].inline is True
    assert source.comments[2].line == 5
    assert source.comments[2].column == 11


def test_parse_lines_keep_layout(parse):
    """Test that lines are split on newlines only."""
    source = parse("package example\r\n\r\n// Doc\r\nvar x = 1\r\n")

    assert source.lines[2] == "// Doc\r"
    assert len(source.lines) == 5


def test_parse_byte_columns(parse):
    """Test that columns and offsets count bytes, not characters."""
    source = parse('package example\n\nvar s = "мир" // тест\n')

    comment = source.comments[0]
    assert comment.column == len('var s = "мир" '.encode("utf-8")) + 1
    assert comment.offset == len('package example\n\nvar s = "мир" '.encode("utf-8"))


class TestCommentGroups:
    """Tests for grouping adjacent comments."""

    def test_adjacent_lines_form_one_group(self, parse):
        source = parse("package example\n\n// One\n// Two\n\n// Three\n")

        assert [len(g.comments) for g in source.groups] == [2, 1]
        assert source.groups[0].line == 3
        assert source.groups[0].end_line == 4

    def test_code_splits_groups(self, parse):
        source = parse("package example\n\n// One\nvar x = 1\n// Two\n")

        assert len(source.groups) == 2

    def test_inline_comment_stands_alone(self, parse):
        source = parse(
            "package example\n"
            "\n"
            "func f() { // inline\n"
            "\t// Next\n"
            "}\n"
        )

        assert [g.comments[0].text for g in source.groups] == ["// inline", "// Next"]
        assert source.groups[0].inline is True

    def test_multiline_block_spans_lines(self, parse):
        source = parse("package example\n\n/*\nHello\n*/\n// After\n")

        group = source.groups[0]
        assert group.line == 3
        assert group.end_line == 6


class TestDeclarations:
    """Tests for top-level declarations and their doc comments."""

    def test_function_doc(self, parse):
        source = parse("package example\n\n// Sum adds.\nfunc Sum() {}\n")

        decl = source.declarations[0]
        assert decl.kind == "function"
        assert decl.doc is not None
        assert decl.doc.comments[0].text == "// Sum adds."

    def test_blank_line_detaches_doc(self, parse):
        source = parse("package example\n\n// Floating.\n\nfunc Sum() {}\n")

        assert source.declarations[0].doc is None

    def test_grouped_declaration_parens(self, parse):
        code = "package example\n\nconst (\n\tA = 1\n)\n"
        source = parse(code)

        decl = source.declarations[0]
        assert decl.kind == "const"
        assert decl.lparen == code.index("(")
        assert decl.rparen == code.index(")")

    def test_var_block_parens(self, parse):
        code = "package example\n\nvar (\n\tA = 1\n)\n"
        source = parse(code)

        assert source.declarations[0].lparen == code.index("(")

    def test_ungrouped_declaration_has_no_parens(self, parse):
        source = parse("package example\n\nfunc Sum(a, b int) int { return a + b }\n")

        assert source.declarations[0].lparen is None

    def test_cgo_import(self, parse):
        source = parse(
            "package example\n"
            "\n"
            "/*\n"
            "#include <stdio.h>\n"
            "*/\n"
            'import "C"\n'
        )

        decl = source.declarations[0]
        assert decl.kind == "import"
        assert decl.cgo is True
        assert decl.doc is not None


class TestErrors:
    def test_missing_file(self, go_parser: GoParser, temp_dir: Path):
        with pytest.raises(ParseError):
            go_parser.parse_file(temp_dir / "missing.go")

    def test_syntax_error(self, parse):
        with pytest.raises(ParseError):
            parse("package example\n\nfunc (\n")

    def test_invalid_utf8(self, go_parser: GoParser):
        with pytest.raises(ParseError):
            go_parser.parse_source(b"package example\n// \xff\n", "bad.go")


class TestFindGoFiles:
    def test_single_file(self, temp_dir: Path):
        path = temp_dir / "main.go"
        path.write_text("package main\n")

        assert list(find_go_files(path)) == [path]

    def test_skips_vendor(self, temp_dir: Path):
        (temp_dir / "vendor" / "lib").mkdir(parents=True)
        (temp_dir / "vendor" / "lib" / "lib.go").write_text("package lib\n")
        (temp_dir / "pkg").mkdir()
        (temp_dir / "pkg" / "a.go").write_text("package pkg\n")
        (temp_dir / "main.go").write_text("package main\n")
        (temp_dir / "notes.txt").write_text("not go\n")

        found = list(find_go_files(temp_dir))

        assert found == [temp_dir / "main.go", temp_dir / "pkg" / "a.go"]
