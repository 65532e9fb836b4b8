"""Application configuration defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

FILES_PER_THREAD = 128
DEFAULT_DB_PATH = Path("data/knawledger.db")


def available_parallelism() -> int:
    """Number of worker threads the host can run in parallel, at least 1."""
    return max(os.cpu_count() or 1, 1)


@dataclass(slots=True)
class AppConfig:
    db_path: Path = DEFAULT_DB_PATH
    roots: List[Path] = field(default_factory=list)
    files_per_thread: int = FILES_PER_THREAD
    max_threads: int = field(default_factory=available_parallelism)

    def __post_init__(self) -> None:
        if self.files_per_thread < 1:
            raise ValueError("files_per_thread must be at least 1")
        if self.max_threads < 1:
            raise ValueError("max_threads must be at least 1")

    def resolve_db_path(self, base_dir: Path | None = None) -> Path:
        if Path(self.db_path).is_absolute() or base_dir is None:
            return Path(self.db_path)
        return base_dir / self.db_path

    def resolved_roots(self) -> List[Path]:
        """Canonical root paths, duplicates removed, in configured order."""
        seen: set[Path] = set()
        roots: List[Path] = []
        for root in self.roots:
            canonical = Path(root).resolve()
            if canonical in seen:
                continue
            seen.add(canonical)
            roots.append(canonical)
        return roots
