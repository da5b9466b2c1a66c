"""Pick the source files of a repository tree worth counting."""

from __future__ import annotations

from typing import Any

MAX_FILES = 100

SOURCE_EXTENSIONS = frozenset({
    "js", "jsx", "ts", "tsx", "py", "java", "cpp", "c", "h", "cs",
    "php", "rb", "go", "rs", "swift", "kt", "scala", "clj", "hs",
    "ml", "r", "m", "pl", "sh", "sql", "html", "css", "scss",
    "less", "vue", "svelte", "dart", "lua", "nim", "zig",
})


def file_extension(path: str) -> str:
    """Return the lowercase text after the final dot, or "" without one."""
    name = path.rsplit("/", 1)[-1]
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[-1].lower()


def select_source_files(tree: list[dict[str, Any]], limit: int = MAX_FILES) -> list[dict[str, Any]]:
    """Filter a recursive tree listing down to known source files.

    Only blobs with an allow-listed extension are kept, in tree order, and the
    result is cut at ``limit`` entries.
    """
    selected = [
        entry for entry in tree
        if entry.get("type") == "blob" and file_extension(entry.get("path", "")) in SOURCE_EXTENSIONS
    ]
    return selected[:limit]
