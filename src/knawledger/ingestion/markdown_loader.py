"""Markdown loading and front-matter parsing.

Front-matter is the YAML block between a leading ``---`` fence and the
next ``---``. Recognised keys are ``id``, ``title``, ``reading_time`` and
``tags``; anything else is ignored.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Tuple

import yaml
from pydantic import ValidationError

from knawledger.errors import EncodingError, FileReadError, FrontMatterError
from knawledger.models import DocumentData, DocumentMeta
from knawledger.utils.text import calculate_reading_time, find_title_from_h1

LOGGER = logging.getLogger(__name__)

FENCE = "---"


def _strip_line_break(body: str) -> str:
    if body.startswith("\r\n"):
        return body[2:]
    if body.startswith("\n"):
        return body[1:]
    return body


def _load_yaml(raw: str) -> DocumentMeta:
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise FrontMatterError(str(exc)) from exc

    if data is None:
        return DocumentMeta()
    if not isinstance(data, dict):
        raise FrontMatterError(f"expected a mapping, got {type(data).__name__}")

    try:
        return DocumentMeta.model_validate(data)
    except ValidationError as exc:
        raise FrontMatterError(str(exc)) from exc


def parse_front_matter(content: str) -> Tuple[DocumentMeta, str]:
    """Split markdown into its metadata and the remaining body.

    Without a complete front-matter block only the title is derived, from
    the first line of the whole content holding a ``#``. An empty block
    (nothing but whitespace between the fences) is treated the same way:
    the title still comes from the whole content and no reading time is
    set.
    """
    fallback = DocumentMeta(title=find_title_from_h1(content))

    if not content.startswith(FENCE) or len(content) <= len(FENCE):
        return fallback, content

    close = content.find(FENCE, len(FENCE))
    if close == -1:
        return fallback, content[len(FENCE):]

    raw = content[len(FENCE):close]
    body = _strip_line_break(content[close + len(FENCE):])

    if not raw.strip():
        return fallback, body

    meta = _load_yaml(raw)
    # Always derived from the body, whatever the front-matter says.
    meta.reading_time = calculate_reading_time(body)
    if meta.title is None:
        meta.title = find_title_from_h1(body)

    return meta, body


def _read_text(path: Path) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise EncodingError(f"{path}: {exc}") from exc
    except OSError as exc:
        raise FileReadError(f"{path}: {exc}") from exc


def read_document(path: Path) -> DocumentData:
    """Read a note from disk and parse its front-matter."""
    meta, body = parse_front_matter(_read_text(path))
    return DocumentData(content=body, meta=meta)


def read_meta(path: Path) -> DocumentMeta:
    """Read only the metadata of a note."""
    LOGGER.debug("Processing %s", path)
    return read_document(path).meta
