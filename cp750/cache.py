"""Cached device state for cp750."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Optional

from .fields import Field


logger = logging.getLogger(__name__)


@dataclass
class StateCache:
    """Last value observed for each field, in stream arrival order.

    Only the response-processing path writes here; readers never trigger
    traffic.
    """

    _values: Dict[Field, str] = field(init=False, default_factory=dict)
    _lock: threading.Lock = field(init=False, default_factory=threading.Lock)

    def update(self, key: Field, value: str) -> bool:
        """Store ``value``; return ``True`` if it differs from the cached one."""
        with self._lock:
            if self._values.get(key) == value:
                return False
            self._values[key] = value
        logger.info("updating value of %s to %s", key, value)
        return True

    def get(self, key: Field) -> Optional[str]:
        with self._lock:
            return self._values.get(key)

    def snapshot(self) -> Dict[Field, str]:
        with self._lock:
            return dict(self._values)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._values

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)
