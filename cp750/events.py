"""Field listener registry and dispatch for cp750."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, List

from .fields import Field


logger = logging.getLogger(__name__)

FieldListener = Callable[[Field, str], None]


class ListenerRegistry:
    """Persistent and one-shot callbacks keyed by field.

    Mutation happens under ``_lock``; callbacks always run outside it on a
    snapshot, so a listener may add or remove listeners (itself included)
    while being dispatched.
    """

    def __init__(self) -> None:
        self._persistent: Dict[Field, List[FieldListener]] = {}
        self._onetime: Dict[Field, List[FieldListener]] = {}
        self._lock = threading.Lock()

    def add(self, key: Field, listener: FieldListener) -> None:
        with self._lock:
            self._persistent.setdefault(key, []).append(listener)
        logger.debug("registering listener for %s", key)

    def add_onetime(self, key: Field, listener: FieldListener) -> None:
        with self._lock:
            self._onetime.setdefault(key, []).append(listener)
        logger.debug("registering one-time listener for %s", key)

    def remove(self, listener: FieldListener) -> int:
        """Drop ``listener`` from every field in both registries."""
        removed = 0
        with self._lock:
            for registry in (self._onetime, self._persistent):
                for key in list(registry):
                    bucket = registry[key]
                    kept = [entry for entry in bucket if entry != listener]
                    removed += len(bucket) - len(kept)
                    if kept:
                        registry[key] = kept
                    else:
                        del registry[key]
        return removed

    def listeners(self, key: Field) -> List[FieldListener]:
        with self._lock:
            return list(self._persistent.get(key, ()))

    def onetime_listeners(self, key: Field) -> List[FieldListener]:
        with self._lock:
            return list(self._onetime.get(key, ()))

    def clear(self) -> None:
        with self._lock:
            self._persistent.clear()
            self._onetime.clear()

    def fire(self, key: Field, value: str) -> None:
        """Notify one-shot listeners (consumed), then persistent ones."""
        with self._lock:
            onetime = self._onetime.pop(key, [])
        for listener in onetime:
            self._invoke(listener, key, value)
        for listener in self.listeners(key):
            self._invoke(listener, key, value)

    @staticmethod
    def _invoke(listener: FieldListener, key: Field, value: str) -> None:
        try:
            listener(key, value)
        except Exception:
            logger.exception("listener for %s failed", key)
