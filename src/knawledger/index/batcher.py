"""Parallel reading and parsing of markdown files.

Paths are cut into contiguous batches of ``files_per_thread``. Up to
``max_threads`` batches form a round; a round with several batches runs
them on a thread pool and joins every worker before the next round starts.
A round holding a single batch runs on the calling thread.
"""

from __future__ import annotations

import logging
import time
import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Iterator, List, Sequence, Tuple

from knawledger.config import FILES_PER_THREAD, available_parallelism
from knawledger.errors import KnawledgeError
from knawledger.ingestion.markdown_loader import read_meta
from knawledger.models import Document, DocumentMeta
from knawledger.utils.files import canonicalize, file_name

LOGGER = logging.getLogger(__name__)

ParsedFile = Tuple[Document, DocumentMeta]


def plan_rounds(
    paths: Sequence[Path], files_per_thread: int, max_threads: int
) -> Iterator[List[Sequence[Path]]]:
    """Yield rounds of non-empty batches covering ``paths`` in order."""
    offset = 0
    total = len(paths)
    while offset < total:
        batches: List[Sequence[Path]] = []
        for _ in range(max_threads):
            if offset >= total:
                break
            batches.append(paths[offset : offset + files_per_thread])
            offset += len(batches[-1])
        yield batches


def process_batch(directory: uuid.UUID, batch: Sequence[Path]) -> List[ParsedFile]:
    """Read and parse every path of a batch. Stops at the first failure.

    The file name comes from the path as listed, so a symlinked note keeps
    its own name while its stored path points at the target.
    """
    files: List[ParsedFile] = []
    for path in batch:
        canonical = canonicalize(path)
        meta = read_meta(canonical)
        document = Document(
            file_name=file_name(Path(path)),
            directory=directory,
            path=str(canonical),
        )
        files.append((document, meta))
    return files


def _log_failed_batch(batch: Sequence[Path], exc: KnawledgeError) -> None:
    LOGGER.error(
        "Error occurred while processing files %s .. %s (%d skipped): %s",
        batch[0],
        batch[-1],
        len(batch),
        exc,
    )


def _run_single(directory: uuid.UUID, batch: Sequence[Path]) -> List[ParsedFile]:
    LOGGER.debug("Processing single batch")
    try:
        return process_batch(directory, batch)
    except KnawledgeError as exc:
        _log_failed_batch(batch, exc)
        return []


def _run_multiple(
    directory: uuid.UUID, batches: List[Sequence[Path]]
) -> List[ParsedFile]:
    LOGGER.debug("Processing multiple batches")
    files: List[ParsedFile] = []
    with ThreadPoolExecutor(
        max_workers=len(batches), thread_name_prefix="knawledger-batch"
    ) as pool:
        tasks: List[Tuple[int, Sequence[Path], Future[List[ParsedFile]], float]] = []
        for index, batch in enumerate(batches):
            task = pool.submit(process_batch, directory, batch)
            LOGGER.debug("Spawned worker %d for %d files", index, len(batch))
            tasks.append((index, batch, task, time.perf_counter()))

        for index, batch, task, start in tasks:
            try:
                processed = task.result()
            except KnawledgeError as exc:
                _log_failed_batch(batch, exc)
                continue
            files.extend(processed)
            LOGGER.debug(
                "Worker %d finished in %.3fms",
                index,
                (time.perf_counter() - start) * 1000,
            )
    return files


def process_files(
    directory: uuid.UUID,
    file_paths: Sequence[Path],
    *,
    files_per_thread: int = FILES_PER_THREAD,
    max_threads: int | None = None,
) -> List[ParsedFile]:
    """Parse ``file_paths`` into documents belonging to ``directory``.

    A batch that fails is logged and dropped; the rest of the round is kept.
    The order of the result is not meaningful.
    """
    threads = max_threads if max_threads is not None else available_parallelism()
    files: List[ParsedFile] = []
    for batches in plan_rounds(list(file_paths), files_per_thread, max(threads, 1)):
        if len(batches) == 1:
            files.extend(_run_single(directory, batches[0]))
        else:
            files.extend(_run_multiple(directory, batches))
    return files
