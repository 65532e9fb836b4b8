"""Async gateway to the catalog store.

The indexer only talks to the catalog through :class:`CatalogGateway`.
:class:`Catalog` implements it on top of :class:`SQLiteCatalogStore`,
running each blocking call in a worker thread.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import sqlite3
import uuid
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, Protocol, Sequence, Tuple, TypeVar

from knawledger.errors import CatalogError, NotFoundError
from knawledger.index.storage import SQLiteCatalogStore
from knawledger.models import Directory, Document, DocumentMeta

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class CatalogGateway(Protocol):
    """Operations the indexer needs from the catalog."""

    async def get_root_dir_by_name(self, name: str) -> Optional[Directory]:
        """Root directory with this name, if any."""
        ...

    async def get_dir_by_name_and_parent(
        self, name: str, parent: uuid.UUID
    ) -> Optional[Directory]:
        """Child directory with this name under ``parent``, if any."""
        ...

    async def insert_dir(
        self, path: str, name: str, parent: Optional[uuid.UUID]
    ) -> Directory:
        """Insert a directory and return it with a fresh id."""
        ...

    async def list_documents_in_dir(
        self, directory: uuid.UUID, file_names: Sequence[str]
    ) -> List[Document]:
        """Documents of ``directory`` whose file name is one of ``file_names``."""
        ...

    async def insert_doc(self, document: Document, meta: DocumentMeta) -> None:
        """Insert a document with its metadata."""
        ...

    async def trim_unused(self, roots: Iterable[str]) -> int:
        """Remove root directories not in ``roots``, with their contents."""
        ...


class Catalog:
    """:class:`CatalogGateway` backed by SQLite."""

    def __init__(self, store: SQLiteCatalogStore) -> None:
        self.store = store

    @classmethod
    def open(cls, db_path: Path) -> "Catalog":
        try:
            return cls(SQLiteCatalogStore(db_path))
        except sqlite3.Error as exc:
            raise CatalogError(f"{db_path}: {exc}") from exc

    def close(self) -> None:
        self.store.close()

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        try:
            return await asyncio.to_thread(functools.partial(func, *args))
        except sqlite3.Error as exc:
            raise CatalogError(str(exc)) from exc

    async def get_root_dir_by_name(self, name: str) -> Optional[Directory]:
        return await self._run(self.store.get_root_dir_by_name, name)

    async def get_dir_by_name_and_parent(
        self, name: str, parent: uuid.UUID
    ) -> Optional[Directory]:
        return await self._run(self.store.get_dir_by_name_and_parent, name, parent)

    async def insert_dir(
        self, path: str, name: str, parent: Optional[uuid.UUID]
    ) -> Directory:
        directory = await self._run(self.store.insert_dir, path, name, parent)
        LOGGER.debug("Inserted directory %s (%s)", directory.path, directory.id)
        return directory

    async def list_documents_in_dir(
        self, directory: uuid.UUID, file_names: Sequence[str]
    ) -> List[Document]:
        return await self._run(self.store.list_documents_in_dir, directory, list(file_names))

    async def insert_doc(self, document: Document, meta: DocumentMeta) -> None:
        await self._run(self.store.insert_doc, document, meta)

    async def trim_unused(self, roots: Iterable[str]) -> int:
        removed = await self._run(self.store.trim_unused, [str(root) for root in roots])
        if removed:
            LOGGER.info("Removed %d unused root directories", removed)
        return removed

    async def list_root_paths(self) -> List[str]:
        return await self._run(self.store.list_root_paths)

    async def get_document(self, identifier: str) -> Tuple[Document, DocumentMeta]:
        found = await self._run(self.store.get_document, identifier)
        if found is None:
            raise NotFoundError(identifier)
        return found

    async def count_directories(self) -> int:
        return await self._run(self.store.count_directories)

    async def count_documents(self) -> int:
        return await self._run(self.store.count_documents)
