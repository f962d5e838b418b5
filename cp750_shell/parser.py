"""Command line tokenizing for cp750-shell."""

from __future__ import annotations

from typing import List

COMMENT_CHAR = "#"


def split_command(line: str) -> List[str]:
    """Split a shell line into words; ``#`` starts a comment.

    Protocol values never contain blanks, so plain whitespace splitting is
    enough (``cp750.sys.fader 40`` -> ``["cp750.sys.fader", "40"]``).
    """
    if not line:
        return []
    text = line.split(COMMENT_CHAR, 1)[0].strip()
    return text.split() if text else []
