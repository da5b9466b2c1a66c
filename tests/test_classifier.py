"""Tests for line classification."""

from __future__ import annotations

import pytest

from org_stats.classifier import (
    COMMENT_SYNTAX,
    LANGUAGE_BY_EXTENSION,
    OTHER,
    classify_content,
    detect_language,
    split_lines,
)
from org_stats.selector import SOURCE_EXTENSIONS


def test_javascript_example():
    counts = classify_content("a\n// b\n\n", "index.js")
    assert counts.total == 3
    assert counts.code == 1
    assert counts.comment == 1
    assert counts.blank == 1


@pytest.mark.parametrize(
    "path, expected",
    [
        ("app.jsx", "JavaScript"),
        ("types.d.ts", "TypeScript"),
        ("lib/thing.H", "C/C++"),
        ("main.rs", "Rust"),
        ("query.sql", OTHER),
        ("LICENSE", OTHER),
    ],
)
def test_detect_language(path, expected):
    assert detect_language(path) == expected


def test_language_map_is_subset_of_allow_list():
    assert set(LANGUAGE_BY_EXTENSION) <= SOURCE_EXTENSIONS


def test_split_lines():
    assert split_lines("") == []
    assert split_lines("a") == ["a"]
    assert split_lines("a\n") == ["a"]
    assert split_lines("a\n\nb") == ["a", "", "b"]


def test_python_comments_and_docstrings():
    content = '"""Module doc\ncontinues here\n"""\n# comment\n    # indented comment\nx = 1  # trailing\n'
    counts = classify_content(content, "mod.py")
    # The docstring body line is counted as code.
    assert counts.comment == 4
    assert counts.code == 2
    assert counts.blank == 0
    assert counts.total == 6


def test_block_comment_continuation_is_code():
    content = "/*\n * license\n */\nint x;\n"
    counts = classify_content(content, "main.c")
    assert counts.comment == 1
    assert counts.code == 3


def test_php_accepts_hash_and_slashes():
    counts = classify_content("<?php\n# a\n// b\n/* c */\necho 1;", "index.php")
    assert counts.comment == 3
    assert counts.code == 2


def test_html_has_no_single_line_comments():
    counts = classify_content("<!-- note -->\n// not a comment\n<p>hi</p>", "page.html")
    assert counts.comment == 1
    assert counts.code == 2


def test_language_without_patterns_counts_everything_as_code():
    assert "Kotlin" not in COMMENT_SYNTAX
    counts = classify_content("// comment\nval x = 1\n\n", "Main.kt")
    assert counts.comment == 0
    assert counts.code == 2
    assert counts.blank == 1


def test_whitespace_only_lines_are_blank():
    counts = classify_content("  \n\t\nx\n", "a.go")
    assert counts.blank == 2
    assert counts.code == 1


def test_totals_add_up():
    content = "# a\n\nimport os\n'''doc'''\n  \nprint(os)\n"
    counts = classify_content(content, "x.py")
    assert counts.total == counts.code + counts.comment + counts.blank
