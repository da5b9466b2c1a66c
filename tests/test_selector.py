"""Tests for source file selection."""

from __future__ import annotations

from org_stats.selector import MAX_FILES, SOURCE_EXTENSIONS, file_extension, select_source_files


def _blob(path: str, size: int = 10) -> dict:
    return {"path": path, "type": "blob", "size": size, "url": f"https://api.example.com/{path}"}


def test_file_extension():
    assert file_extension("src/app.PY") == "py"
    assert file_extension("lib/archive.tar.gz") == "gz"
    assert file_extension("Makefile") == ""
    assert file_extension("some.dir/README") == ""


def test_allow_list_size():
    assert len(SOURCE_EXTENSIONS) == 35


def test_keeps_only_allow_listed_blobs():
    tree = [
        _blob("main.py"),
        {"path": "src", "type": "tree"},
        _blob("README.md"),
        _blob("Makefile"),
        _blob("web/App.TSX"),
        {"path": "vendor/lib", "type": "commit"},
        _blob("styles/site.scss"),
    ]
    selected = select_source_files(tree)
    assert [e["path"] for e in selected] == ["main.py", "web/App.TSX", "styles/site.scss"]


def test_truncates_in_tree_order():
    tree = [_blob(f"f{i}.go", size=1000 - i) for i in range(250)]
    selected = select_source_files(tree)
    assert len(selected) == MAX_FILES == 100
    assert selected[0]["path"] == "f0.go"
    assert selected[-1]["path"] == "f99.go"


def test_empty_tree():
    assert select_source_files([]) == []
