"""Tests for core data models."""

from __future__ import annotations

import uuid

import pytest
from pydantic import ValidationError

from knawledger.models import INT32_MAX, Directory, Document, DocumentData, DocumentMeta


class TestDocumentMeta:
    """Test DocumentMeta validation."""

    def test_defaults_are_absent(self) -> None:
        meta = DocumentMeta()

        assert meta.custom_id is None
        assert meta.title is None
        assert meta.reading_time is None
        assert meta.tags is None

    def test_id_alias(self) -> None:
        meta = DocumentMeta.model_validate({"id": "slug", "title": "T"})

        assert meta.custom_id == "slug"
        assert meta.title == "T"

    def test_populate_by_field_name(self) -> None:
        assert DocumentMeta(custom_id="slug").custom_id == "slug"

    def test_extra_keys_ignored(self) -> None:
        meta = DocumentMeta.model_validate({"author": "me", "tags": ["a"]})

        assert meta.tags == ["a"]
        assert not hasattr(meta, "author")

    def test_reading_time_bounds(self) -> None:
        assert DocumentMeta(reading_time=INT32_MAX).reading_time == INT32_MAX
        with pytest.raises(ValidationError):
            DocumentMeta(reading_time=INT32_MAX + 1)


class TestDirectory:
    """Test Directory dataclass."""

    def test_root(self) -> None:
        directory = Directory(id=uuid.uuid4(), name="notes", path="/notes")

        assert directory.is_root

    def test_child(self) -> None:
        parent = uuid.uuid4()
        directory = Directory(id=uuid.uuid4(), name="sub", path="/notes/sub", parent=parent)

        assert not directory.is_root
        assert directory.parent == parent


class TestDocument:
    """Test Document and DocumentData dataclasses."""

    def test_document_without_id(self) -> None:
        directory = uuid.uuid4()
        document = Document(file_name="a.md", directory=directory, path="/notes/a.md")

        assert document.id is None
        assert document.directory == directory

    def test_document_equality(self) -> None:
        directory = uuid.uuid4()
        first = Document(file_name="a.md", directory=directory, path="/notes/a.md")
        second = Document(file_name="a.md", directory=directory, path="/notes/a.md")

        assert first == second

    def test_document_data_defaults(self) -> None:
        data = DocumentData()

        assert data.content == ""
        assert data.meta == DocumentMeta()
