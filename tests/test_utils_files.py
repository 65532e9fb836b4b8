"""Tests for file utility functions."""

from __future__ import annotations

from pathlib import Path

import pytest

from knawledger.errors import FileReadError
from knawledger.utils.files import (
    UNKNOWN_NAME,
    canonicalize,
    file_name,
    is_markdown,
    is_utf8,
    list_entries,
    markdown_paths,
)


class TestIsMarkdown:
    """Test is_markdown function."""

    def test_lowercase_md(self) -> None:
        assert is_markdown(Path("/notes/a.md"))

    def test_uppercase_is_ignored(self) -> None:
        assert not is_markdown(Path("/notes/c.MD"))

    def test_other_extensions(self) -> None:
        assert not is_markdown(Path("/notes/readme.txt"))
        assert not is_markdown(Path("/notes/a.markdown"))
        assert not is_markdown(Path("/notes/noext"))

    def test_only_final_extension_counts(self) -> None:
        assert is_markdown(Path("/notes/archive.tar.md"))
        assert not is_markdown(Path("/notes/a.md.bak"))

    def test_dotfile_has_no_extension(self) -> None:
        assert not is_markdown(Path("/notes/.md"))


class TestFileName:
    """Test file_name function."""

    def test_final_segment(self) -> None:
        assert file_name(Path("/notes/sub/b.md")) == "b.md"

    def test_missing_segment(self) -> None:
        assert file_name(Path("/")) == UNKNOWN_NAME

    def test_non_utf8_segment(self) -> None:
        name = b"caf\xe9.md".decode("utf-8", "surrogateescape")
        assert not is_utf8(name)
        assert file_name(Path("/notes") / name) == UNKNOWN_NAME


class TestCanonicalize:
    """Test canonicalize function."""

    def test_resolves_relative_parts(self, tmp_path: Path) -> None:
        sub = tmp_path / "sub"
        sub.mkdir()
        assert canonicalize(sub / ".." / "sub") == sub.resolve()

    def test_resolves_symlinks(self, tmp_path: Path) -> None:
        target = tmp_path / "target"
        target.mkdir()
        link = tmp_path / "link"
        link.symlink_to(target)
        assert canonicalize(link) == target.resolve()

    def test_missing_path_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileReadError):
            canonicalize(tmp_path / "missing")


class TestListEntries:
    """Test list_entries and markdown_paths."""

    def test_lists_files_and_directories(self, tmp_path: Path) -> None:
        (tmp_path / "a.md").write_text("a")
        (tmp_path / "b.txt").write_text("b")
        (tmp_path / "sub").mkdir()

        names = {entry.name for entry in list_entries(tmp_path)}

        assert names == {"a.md", "b.txt", "sub"}

    def test_markdown_filter(self, tmp_path: Path) -> None:
        (tmp_path / "a.md").write_text("a")
        (tmp_path / "b.txt").write_text("b")
        (tmp_path / "c.MD").write_text("c")

        paths = markdown_paths(list_entries(tmp_path))

        assert [path.name for path in paths] == ["a.md"]

    def test_missing_directory_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileReadError):
            list_entries(tmp_path / "missing")
