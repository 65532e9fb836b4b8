"""Text helpers used when deriving note metadata."""

from __future__ import annotations

from typing import Optional

WORDS_PER_MINUTE = 200


def find_title_from_h1(content: str) -> Optional[str]:
    """Return the text after the first ``#`` on the first line containing one.

    Any line with a ``#`` qualifies, not only lines starting with ``# ``.
    """
    for line in content.splitlines():
        line = line.strip()
        _, sep, title = line.partition("#")
        if not sep:
            continue
        return title.strip()
    return None


def calculate_reading_time(content: str) -> int:
    """Estimate reading time in minutes from space separated tokens.

    The division is truncated before scaling, so anything under
    ``WORDS_PER_MINUTE`` tokens reads in 0 minutes.
    """
    words = len(content.split(" "))
    return int((words // WORDS_PER_MINUTE) * 0.60)
