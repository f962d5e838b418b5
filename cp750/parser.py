"""Response line parsing."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from .fields import Field, field_by_key


logger = logging.getLogger(__name__)

STATUS_SEPARATOR = " : "


def split_line(line: str) -> Optional[Tuple[str, str]]:
    """Split a response line into raw ``(key, value)`` strings.

    ``"<key> : <value>"`` (bulk status form) wins over ``"<key> <value>"``.
    Returns ``None`` for blank lines and lines without a usable value.
    """
    text = line.strip() if line else ""
    if not text:
        return None
    pos = text.find(STATUS_SEPARATOR)
    if pos < 0 and text.endswith(STATUS_SEPARATOR.rstrip()):
        # "<key> : " with an empty value, trailing blank already stripped
        pos = len(text) - len(STATUS_SEPARATOR.rstrip())
    if pos > 0:
        key = text[:pos]
        value = text[pos + len(STATUS_SEPARATOR):].strip()
    else:
        pos = text.find(" ")
        if pos <= 0:
            return None
        key = text[:pos]
        value = text[pos + 1:].strip()
    if not value:
        return None
    return key, value


def parse_line(line: str) -> Optional[Tuple[Field, str]]:
    """Resolve a response line against the field registry."""
    parts = split_line(line)
    if parts is None:
        return None
    key, value = parts
    field = field_by_key(key)
    if field is None:
        logger.debug("ignoring unknown key %s", key)
        return None
    return field, value


__all__ = ["STATUS_SEPARATOR", "parse_line", "split_line"]
