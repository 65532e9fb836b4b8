"""SQLite catalog of directories and markdown documents."""

from __future__ import annotations

import json
import sqlite3
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from knawledger.models import Directory, Document, DocumentMeta


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _uuid(value: Optional[str]) -> Optional[uuid.UUID]:
    return uuid.UUID(value) if value is not None else None


def _row_to_directory(row: sqlite3.Row) -> Directory:
    return Directory(
        id=uuid.UUID(row["id"]),
        name=row["name"],
        path=row["path"],
        parent=_uuid(row["parent"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


def _row_to_document(row: sqlite3.Row) -> Document:
    return Document(
        id=uuid.UUID(row["id"]),
        file_name=row["file_name"],
        directory=uuid.UUID(row["directory"]),
        path=row["path"],
    )


def _row_to_meta(row: sqlite3.Row) -> DocumentMeta:
    return DocumentMeta(
        custom_id=row["custom_id"],
        title=row["title"],
        reading_time=row["reading_time"],
        tags=json.loads(row["tags"]) if row["tags"] is not None else None,
    )


class SQLiteCatalogStore:
    """Persistence layer for the directory tree and its documents.

    The connection is shared between threads; every statement runs under
    ``self._lock``.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        self._lock = threading.RLock()
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL;")
        self._conn.execute("PRAGMA synchronous=NORMAL;")
        self._conn.execute("PRAGMA foreign_keys=ON;")
        self._ensure_schema()

    @property
    def connection(self) -> sqlite3.Connection:
        return self._conn

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            try:
                yield self._conn
                self._conn.commit()
            except Exception:
                self._conn.rollback()
                raise

    def _ensure_schema(self) -> None:
        with self.transaction() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS directories (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    parent TEXT REFERENCES directories(id) ON DELETE CASCADE,
                    path TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            # Roots have a NULL parent and must still be unique by name.
            conn.execute(
                """CREATE UNIQUE INDEX IF NOT EXISTS idx_directories_name_parent
                    ON directories(name, COALESCE(parent, ''))
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS documents (
                    id TEXT PRIMARY KEY,
                    directory TEXT NOT NULL REFERENCES directories(id) ON DELETE CASCADE,
                    file_name TEXT NOT NULL,
                    path TEXT NOT NULL,
                    custom_id TEXT UNIQUE,
                    title TEXT,
                    reading_time INTEGER,
                    tags TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    UNIQUE(directory, file_name)
                )
                """
            )
            conn.execute(
                """CREATE INDEX IF NOT EXISTS idx_documents_directory
                    ON documents(directory)
                """
            )

    def get_root_dir_by_name(self, name: str) -> Optional[Directory]:
        with self._lock:
            row = self._conn.execute(
                "SELECT * FROM directories WHERE name = ? AND parent IS NULL",
                (name,),
            ).fetchone()
        return _row_to_directory(row) if row else None

    def get_dir_by_name_and_parent(self, name: str, parent: uuid.UUID) -> Optional[Directory]:
        with self._lock:
            row = self._conn.execute(
                "SELECT * FROM directories WHERE name = ? AND parent = ?",
                (name, str(parent)),
            ).fetchone()
        return _row_to_directory(row) if row else None

    def insert_dir(self, path: str, name: str, parent: Optional[uuid.UUID]) -> Directory:
        now = _now()
        directory_id = uuid.uuid4()
        with self.transaction() as conn:
            conn.execute(
                """
                INSERT INTO directories(id, name, parent, path, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    str(directory_id),
                    name,
                    str(parent) if parent is not None else None,
                    path,
                    now,
                    now,
                ),
            )
        return Directory(
            id=directory_id,
            name=name,
            path=path,
            parent=parent,
            created_at=datetime.fromisoformat(now),
            updated_at=datetime.fromisoformat(now),
        )

    def list_documents_in_dir(
        self, directory: uuid.UUID, file_names: Sequence[str]
    ) -> List[Document]:
        if not file_names:
            return []
        placeholders = ", ".join("?" for _ in file_names)
        with self._lock:
            rows = self._conn.execute(
                f"""
                SELECT * FROM documents
                WHERE directory = ? AND file_name IN ({placeholders})
                """,
                (str(directory), *file_names),
            ).fetchall()
        return [_row_to_document(row) for row in rows]

    def insert_doc(self, document: Document, meta: DocumentMeta) -> uuid.UUID:
        now = _now()
        document_id = document.id or uuid.uuid4()
        with self.transaction() as conn:
            conn.execute(
                """
                INSERT INTO documents(
                    id, directory, file_name, path, custom_id, title,
                    reading_time, tags, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    str(document_id),
                    str(document.directory),
                    document.file_name,
                    document.path,
                    meta.custom_id,
                    meta.title,
                    meta.reading_time,
                    json.dumps(meta.tags, ensure_ascii=False) if meta.tags is not None else None,
                    now,
                    now,
                ),
            )
        document.id = document_id
        return document_id

    def trim_unused(self, roots: Iterable[str]) -> int:
        """Delete root directories whose path is not configured.

        Sub-directories and documents go with them through the cascade.
        """
        keep = set(roots)
        with self.transaction() as conn:
            rows = conn.execute(
                "SELECT id, path FROM directories WHERE parent IS NULL"
            ).fetchall()
            stale = [row["id"] for row in rows if row["path"] not in keep]
            for directory_id in stale:
                conn.execute("DELETE FROM directories WHERE id = ?", (directory_id,))
        return len(stale)

    def list_root_paths(self) -> List[str]:
        with self._lock:
            rows = self._conn.execute(
                "SELECT path FROM directories WHERE parent IS NULL ORDER BY path"
            ).fetchall()
        return [row["path"] for row in rows]

    def get_document(self, identifier: str) -> Optional[Tuple[Document, DocumentMeta]]:
        """Find a document by custom id first, then by its UUID."""
        with self._lock:
            row = self._conn.execute(
                "SELECT * FROM documents WHERE custom_id = ?", (identifier,)
            ).fetchone()
            if row is None:
                row = self._conn.execute(
                    "SELECT * FROM documents WHERE id = ?", (identifier,)
                ).fetchone()
        if row is None:
            return None
        return _row_to_document(row), _row_to_meta(row)

    def count_directories(self) -> int:
        with self._lock:
            return self._conn.execute("SELECT COUNT(*) FROM directories").fetchone()[0]

    def count_documents(self) -> int:
        with self._lock:
            return self._conn.execute("SELECT COUNT(*) FROM documents").fetchone()[0]
