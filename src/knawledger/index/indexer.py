"""Directory walking and document ingestion."""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from knawledger.config import FILES_PER_THREAD, available_parallelism
from knawledger.errors import InvalidDirectoryError
from knawledger.index.batcher import process_files
from knawledger.index.catalog import CatalogGateway
from knawledger.models import Directory
from knawledger.utils.files import canonicalize, is_utf8, list_entries, markdown_paths

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class IndexStats:
    directories: int = 0
    existing: int = 0
    processed: int = 0
    failed: int = 0
    pruned: int = 0

    def merge(self, other: "IndexStats") -> None:
        self.directories += other.directories
        self.existing += other.existing
        self.processed += other.processed
        self.failed += other.failed
        self.pruned += other.pruned


class Indexer:
    """Walks configured roots and records their markdown notes in the catalog."""

    def __init__(
        self,
        catalog: CatalogGateway,
        *,
        files_per_thread: int = FILES_PER_THREAD,
        max_threads: int | None = None,
    ) -> None:
        self.catalog = catalog
        self.files_per_thread = files_per_thread
        self.max_threads = max_threads if max_threads is not None else available_parallelism()

    async def index(self, roots: Sequence[Path]) -> IndexStats:
        """Prune roots that are no longer configured, then walk each root."""
        canonical_roots = [canonicalize(root) for root in roots]
        stats = IndexStats()
        stats.pruned = await self.catalog.trim_unused(str(root) for root in canonical_roots)

        for root in canonical_roots:
            stats.merge(await self.process_directory(root))
        return stats

    async def _ensure_directory(
        self, path: str, name: str, parent: Optional[uuid.UUID]
    ) -> Directory:
        if parent is not None:
            existing = await self.catalog.get_dir_by_name_and_parent(name, parent)
        else:
            existing = await self.catalog.get_root_dir_by_name(name)
        if existing is not None:
            return existing
        return await self.catalog.insert_dir(path, name, parent)

    async def process_directory(
        self, path: Path, parent: Optional[uuid.UUID] = None
    ) -> IndexStats:
        """Record ``path``, its sub-directories and any new markdown files.

        Any catalog failure aborts this directory and propagates; remaining
        sibling directories are not visited.
        """
        entries = list_entries(path)

        full_path = canonicalize(path)
        dir_name = full_path.name
        if not dir_name:
            raise InvalidDirectoryError(f"{full_path}: unsupported directory")
        if not is_utf8(dir_name):
            raise InvalidDirectoryError(f"{dir_name!r}: not valid utf-8")

        LOGGER.debug("Loading %s", full_path)

        directory = await self._ensure_directory(str(full_path), dir_name, parent)

        stats = IndexStats(directories=1)
        for entry in entries:
            if entry.is_dir():
                stats.merge(await self.process_directory(entry, directory.id))

        candidates: Dict[str, Path] = {}
        for entry in markdown_paths(entries):
            if entry.is_dir():
                continue
            if not is_utf8(entry.name):
                LOGGER.debug("Skipping file with non UTF-8 name in %s", full_path)
                continue
            candidates[entry.name] = entry

        existing = await self.catalog.list_documents_in_dir(directory.id, list(candidates))
        amount_existing = 0
        for document in existing:
            if candidates.pop(document.file_name, None) is not None:
                LOGGER.debug("Already exists: %s", document.file_name)
                amount_existing += 1

        pending: List[Path] = list(candidates.values())
        processed = await asyncio.to_thread(
            process_files,
            directory.id,
            pending,
            files_per_thread=self.files_per_thread,
            max_threads=self.max_threads,
        )

        for document, meta in processed:
            await self.catalog.insert_doc(document, meta)

        stats.existing += amount_existing
        stats.processed += len(processed)
        stats.failed += len(pending) - len(processed)

        LOGGER.info(
            "%s - Existing files: %d Processed files: %d",
            full_path,
            amount_existing,
            len(processed),
        )
        return stats
