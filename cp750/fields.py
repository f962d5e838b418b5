"""Static catalog of the fields a CP750 answers to.

The table is built once at import time and never mutated.  Each field carries
its value domain (a token set or an integer range) so callers can validate a
value before it is put on the wire.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple


QUERY_TOKEN = "?"
CTRL_PREFIX = "cp750.ctrl."

_INT_RE = re.compile(r"-?[0-9]+")


class InputMode(Enum):
    ANALOG = "analog"
    DIG_1 = "dig_1"
    DIG_2 = "dig_2"
    DIG_3 = "dig_3"
    DIG_4 = "dig_4"
    LAST = "last"
    MIC = "mic"
    NON_SYNC = "non_sync"

    @classmethod
    def from_any(cls, value: Any) -> Optional["InputMode"]:
        """Resolve a mode or token (case-insensitive); ``None`` if unknown."""
        if isinstance(value, InputMode):
            return value
        if not isinstance(value, str):
            return None
        return _INPUT_MODE_ALIASES.get(value.strip().lower())


_INPUT_MODE_ALIASES = {mode.value: mode for mode in InputMode}


@dataclass(frozen=True)
class Field:
    """A named point of device state reachable through the protocol."""

    key: str
    ordinal: int
    tokens: FrozenSet[str] = frozenset()
    minimum: Optional[int] = None
    maximum: Optional[int] = None
    queryable: bool = True

    @property
    def is_range(self) -> bool:
        return self.minimum is not None and self.maximum is not None

    @property
    def is_control(self) -> bool:
        return self.key.startswith(CTRL_PREFIX)

    def is_allowed(self, value: str) -> bool:
        if value == QUERY_TOKEN:
            return self.queryable
        if value in self.tokens:
            return True
        if not self.is_range or not _INT_RE.fullmatch(value):
            return False
        number = int(value)
        if str(number) != value:
            return False
        return self.minimum <= number <= self.maximum

    def allowed_values(self) -> Tuple[str, ...]:
        """Sorted literal domain, query token first (ranges are expanded)."""
        values = set(self.tokens)
        if self.is_range:
            values.update(str(i) for i in range(self.minimum, self.maximum + 1))
        ordered = sorted(values)
        if self.queryable:
            ordered.insert(0, QUERY_TOKEN)
        return tuple(ordered)

    def describe_domain(self) -> str:
        parts = [QUERY_TOKEN] if self.queryable else []
        if self.is_range:
            parts.append(f"{self.minimum}..{self.maximum}")
        parts.extend(sorted(self.tokens))
        return "|".join(parts)

    def __str__(self) -> str:
        return self.key


def _build_fields(entries: Iterable[Dict[str, Any]]) -> Tuple[Field, ...]:
    fields = []
    for ordinal, entry in enumerate(entries):
        key = entry["key"]
        fields.append(
            Field(
                key=key,
                ordinal=ordinal,
                tokens=frozenset(entry.get("tokens", ())),
                minimum=entry.get("minimum"),
                maximum=entry.get("maximum"),
                queryable=not key.startswith(CTRL_PREFIX),
            )
        )
    return tuple(fields)


FIELDS: Tuple[Field, ...] = _build_fields(
    [
        {"key": "cp750.sysinfo.version"},
        {"key": "cp750.sys.fader", "minimum": 0, "maximum": 100},
        {"key": "cp750.sys.mute", "minimum": 0, "maximum": 1},
        {"key": "cp750.sys.input_mode", "tokens": [mode.value for mode in InputMode]},
        {"key": "cp750.ctrl.fader_delta", "minimum": -100, "maximum": 100},
    ]
)

_FIELDS_BY_KEY: Dict[str, Field] = {field.key: field for field in FIELDS}

SYSINFO_VERSION, SYS_FADER, SYS_MUTE, SYS_INPUT_MODE, CTRL_FADER_DELTA = FIELDS


def field_by_key(key: str) -> Optional[Field]:
    """Exact-match lookup; ``None`` for keys the device does not speak."""
    return _FIELDS_BY_KEY.get(key)


def field_by_ordinal(ordinal: int) -> Optional[Field]:
    if 0 <= ordinal < len(FIELDS):
        return FIELDS[ordinal]
    return None


def queryable_fields() -> Tuple[Field, ...]:
    return tuple(field for field in FIELDS if field.queryable)


def resolve_field(field: Any) -> Field:
    """Accept a ``Field`` or a key string; raise ``KeyError`` otherwise."""
    if isinstance(field, Field):
        return field
    resolved = field_by_key(str(field))
    if resolved is None:
        raise KeyError(f"unknown field: {field}")
    return resolved


__all__ = [
    "CTRL_FADER_DELTA",
    "CTRL_PREFIX",
    "FIELDS",
    "Field",
    "InputMode",
    "QUERY_TOKEN",
    "SYSINFO_VERSION",
    "SYS_FADER",
    "SYS_INPUT_MODE",
    "SYS_MUTE",
    "field_by_key",
    "field_by_ordinal",
    "queryable_fields",
    "resolve_field",
]
