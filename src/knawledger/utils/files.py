"""Utility helpers for working with note files and directories."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, List

from knawledger.errors import FileReadError

LOGGER = logging.getLogger(__name__)

MARKDOWN_EXTENSION = "md"
UNKNOWN_NAME = "__unknown"


def is_markdown(path: Path) -> bool:
    """True when the extension after the final dot is exactly ``md``."""
    return path.suffix[1:] == MARKDOWN_EXTENSION


def is_utf8(name: str) -> bool:
    """Names decoded from the filesystem carry surrogates when not UTF-8."""
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def file_name(path: Path) -> str:
    """Final path segment, or ``__unknown`` when absent or not UTF-8."""
    name = path.name
    if not name or not is_utf8(name):
        return UNKNOWN_NAME
    return name


def canonicalize(path: Path) -> Path:
    """Absolute, symlink resolved path. The path must exist."""
    try:
        return Path(path).resolve(strict=True)
    except OSError as exc:
        raise FileReadError(f"{path}: {exc}") from exc


def list_entries(directory: Path) -> List[Path]:
    """Entries of a directory in enumeration order.

    Entries that cannot be inspected are skipped.
    """
    try:
        iterator = os.scandir(directory)
    except OSError as exc:
        raise FileReadError(f"{directory}: {exc}") from exc

    entries: List[Path] = []
    with iterator:
        while True:
            try:
                entry = next(iterator)
            except StopIteration:
                break
            except OSError as exc:
                LOGGER.debug("Skipping unreadable entry in %s: %s", directory, exc)
                continue
            entries.append(Path(entry.path))
    return entries


def markdown_paths(entries: Iterable[Path]) -> List[Path]:
    """Filter entries down to markdown files."""
    return [entry for entry in entries if is_markdown(entry)]
