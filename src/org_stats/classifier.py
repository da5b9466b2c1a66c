"""Blank/comment/code line classification by comment-prefix heuristics.

Only the first line of a block comment is recognised as a comment; the lines
that follow it until the closing delimiter are counted as code.
"""

from __future__ import annotations

from dataclasses import dataclass

from .selector import file_extension

OTHER = "Other"

LANGUAGE_BY_EXTENSION = {
    "js": "JavaScript",
    "jsx": "JavaScript",
    "ts": "TypeScript",
    "tsx": "TypeScript",
    "py": "Python",
    "java": "Java",
    "cpp": "C++",
    "c": "C",
    "h": "C/C++",
    "cs": "C#",
    "php": "PHP",
    "rb": "Ruby",
    "go": "Go",
    "rs": "Rust",
    "swift": "Swift",
    "kt": "Kotlin",
    "scala": "Scala",
    "html": "HTML",
    "css": "CSS",
    "scss": "SCSS",
    "vue": "Vue",
    "svelte": "Svelte",
}


@dataclass(frozen=True)
class CommentSyntax:
    single: tuple[str, ...] = ()
    block_start: tuple[str, ...] = ()

    def is_comment(self, stripped: str) -> bool:
        return stripped.startswith(self.single + self.block_start)


_C_STYLE = CommentSyntax(single=("//",), block_start=("/*",))

COMMENT_SYNTAX = {
    "JavaScript": _C_STYLE,
    "TypeScript": _C_STYLE,
    "Python": CommentSyntax(single=("#",), block_start=('"""', "'''")),
    "Java": _C_STYLE,
    "C++": _C_STYLE,
    "C": _C_STYLE,
    "C#": _C_STYLE,
    "PHP": CommentSyntax(single=("//", "#"), block_start=("/*",)),
    "Ruby": CommentSyntax(single=("#",), block_start=("=begin",)),
    "Go": _C_STYLE,
    "Rust": _C_STYLE,
    "HTML": CommentSyntax(block_start=("<!--",)),
    "CSS": CommentSyntax(block_start=("/*",)),
}

_NO_COMMENTS = CommentSyntax()


@dataclass
class LineCounts:
    total: int = 0
    code: int = 0
    comment: int = 0
    blank: int = 0


def detect_language(path: str) -> str:
    return LANGUAGE_BY_EXTENSION.get(file_extension(path), OTHER)


def split_lines(content: str) -> list[str]:
    # A trailing newline terminates the last line instead of opening a new one.
    if not content:
        return []
    lines = content.split("\n")
    if content.endswith("\n"):
        lines.pop()
    return lines


def classify_content(content: str, path: str) -> LineCounts:
    """Count the blank, comment and code lines of a file's text."""
    syntax = COMMENT_SYNTAX.get(detect_language(path), _NO_COMMENTS)
    counts = LineCounts()
    for line in split_lines(content):
        stripped = line.strip()
        if not stripped:
            counts.blank += 1
        elif syntax.is_comment(stripped):
            counts.comment += 1
        else:
            counts.code += 1
    counts.total = counts.code + counts.comment + counts.blank
    return counts
