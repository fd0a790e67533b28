"""Tests for directory tree walking, copying, and deleting."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from bachctl.domain.paths import walk_tree
from bachctl.infrastructure.filesystem import copy_tree, delete_tree, tree_lines
from tests.conftest import write_source


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    root = tmp_path / "src"
    write_source(root / "a" / "A.java")
    write_source(root / "a" / "b" / "B.java")
    write_source(root / "README.md", "# readme\n")
    return root


class TestWalkTree:
    def test_root_first_then_sorted(self, tree: Path) -> None:
        entries = walk_tree(tree)
        assert entries[0] == tree
        assert entries[1:] == sorted(entries[1:])
        assert tree / "a" / "b" / "B.java" in entries

    def test_missing_root_yields_itself(self, tmp_path: Path) -> None:
        assert walk_tree(tmp_path / "missing") == [tmp_path / "missing"]


class TestTreeLines:
    def test_lists_relative_entries(self, tree: Path) -> None:
        lines = list(tree_lines(tree))
        assert lines[0] == str(tree)
        assert lines[1] == "."
        assert f".{os.sep}{Path('a', 'b', 'B.java')}" in lines
        assert f".{os.sep}README.md" in lines

    def test_missing_root(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="does not exist"):
            list(tree_lines(tmp_path / "missing"))


class TestCopyTree:
    def test_copies_everything(self, tree: Path, tmp_path: Path) -> None:
        target = tmp_path / "copy"
        assert copy_tree(tree, target) == 3
        assert (target / "a" / "b" / "B.java").read_text() == "class X {}\n"
        assert (target / "README.md").read_text() == "# readme\n"

    def test_predicate_filters_files(self, tree: Path, tmp_path: Path) -> None:
        target = tmp_path / "copy"
        copied = copy_tree(tree, target, lambda p: p.suffix == ".java")
        assert copied == 2
        assert not (target / "README.md").exists()
        assert (target / "a" / "A.java").is_file()

    def test_replaces_existing(self, tree: Path, tmp_path: Path) -> None:
        target = tmp_path / "copy"
        write_source(target / "README.md", "stale\n")
        copy_tree(tree, target)
        assert (target / "README.md").read_text() == "# readme\n"


class TestDeleteTree:
    def test_deletes_whole_tree(self, tree: Path) -> None:
        delete_tree(tree)
        assert not tree.exists()

    def test_predicate_keeps_rejected(self, tree: Path) -> None:
        delete_tree(tree, lambda p: p.suffix == ".md")
        assert not (tree / "README.md").exists()
        assert (tree / "a" / "b" / "B.java").exists()

    def test_single_file(self, tree: Path) -> None:
        delete_tree(tree / "README.md")
        assert not (tree / "README.md").exists()
        assert tree.exists()

    def test_empty_directory(self, tmp_path: Path) -> None:
        empty = tmp_path / "empty"
        empty.mkdir()
        delete_tree(empty, lambda p: False)
        assert not empty.exists()

    def test_missing_root_is_noop(self, tmp_path: Path) -> None:
        delete_tree(tmp_path / "missing")
        assert tmp_path.exists()
