"""Serialized request/response execution over a LineTransport.

The CP750 protocol carries no request identifiers: a response belongs to a
request only because it follows it on the stream.  Every exchange therefore
holds ``_lock`` from the moment the request line is written until the blank
line that ends its response block has been read.

A request that timed out may still be answered later, or never (the device
stays silent on values it does not accept).  Each exchange therefore reads
blocks until one that answers its own request arrives; late blocks still
update the cache but are not returned.

Listeners are notified after ``_lock`` is released, in arrival order, so a
callback may issue requests of its own.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterable, List, Optional, Tuple

from .cache import StateCache
from .events import ListenerRegistry
from .fields import QUERY_TOKEN, Field
from .parser import STATUS_SEPARATOR, parse_line
from .transport import LineTransport, ProtocolViolationError, TransportTimeoutError


logger = logging.getLogger(__name__)

STATUS_COMMAND = "status"

Observation = Tuple[Field, str]


def answers(request: str, first_line: str) -> bool:
    """Whether a response block starting with ``first_line`` answers ``request``."""
    text = first_line.strip()
    if request.strip() == STATUS_COMMAND:
        return STATUS_SEPARATOR in text
    key = request.strip().split(" ", 1)[0]
    return text.startswith(key + " ") and not text.startswith(key + STATUS_SEPARATOR)


class CommandExecutor:
    """One request in flight at a time; responses feed cache and listeners."""

    def __init__(
        self,
        transport: LineTransport,
        *,
        cache: Optional[StateCache] = None,
        listeners: Optional[ListenerRegistry] = None,
    ) -> None:
        self.transport = transport
        self.cache = cache if cache is not None else StateCache()
        self.listeners = listeners if listeners is not None else ListenerRegistry()
        self._lock = threading.Lock()
        self._desynced = False

    @property
    def desynced(self) -> bool:
        """True from a read timeout until a later request gets its own answer."""
        return self._desynced

    def send_raw(self, line: str) -> str:
        """Write ``line`` and read its response block; return the last value."""
        observed: List[Observation] = []
        try:
            with self._lock:
                return self._exchange(line, observed)
        finally:
            self._dispatch(observed)

    def send(self, field: Field, value: str) -> str:
        if not field.is_allowed(value):
            logger.warning("ignoring un-allowed value for field %s: %s", field, value)
            return ""
        return self.send_raw(f"{field.key} {value}")

    def query(self, field: Field) -> str:
        return self.send(field, QUERY_TOKEN)

    def refresh(self) -> str:
        return self.send_raw(STATUS_COMMAND)

    def send_unanswered(self, line: str, *, wait: float = 0.5) -> bool:
        """Write a line that gets no response block (``exit``).

        Skipped (returns ``False``) if another exchange still holds the stream
        after ``wait`` seconds.
        """
        if not self._lock.acquire(timeout=wait):
            return False
        try:
            logger.debug("> %s", line)
            self.transport.write_line(line)
            return True
        finally:
            self._lock.release()

    def handshake(self, fields: Iterable[Field]) -> None:
        """Query each field once and check the device answers for that key."""
        observed: List[Observation] = []
        try:
            with self._lock:
                for field in fields:
                    line = f"{field.key} {QUERY_TOKEN}"
                    logger.debug("> %s", line)
                    self.transport.write_line(line)
                    first = self.transport.read_line()
                    if not answers(line, first):
                        raise ProtocolViolationError(f"unexpected response from server: {first!r}")
                    self._read_block(observed, first)
        finally:
            self._dispatch(observed)

    def _exchange(self, line: str, observed: List[Observation]) -> str:
        logger.debug("> %s", line)
        self.transport.write_line(line)
        try:
            while True:
                first, value = self._read_block(observed)
                if first is None:
                    # an empty block can only be ours while nothing is outstanding
                    if not self._desynced:
                        return value
                    continue
                if answers(line, first):
                    self._desynced = False
                    return value
                logger.debug("skipping late response block: %s", first.strip())
        except TransportTimeoutError:
            self._desynced = True
            raise

    def _read_block(self, observed: List[Observation], line: Optional[str] = None) -> Tuple[Optional[str], str]:
        """Consume lines up to a blank one; return the first line and last value."""
        first: Optional[str] = None
        last_value = ""
        if line is None:
            line = self.transport.read_line()
        while line.strip():
            if first is None:
                first = line
            value = self._observe(line, observed)
            if value:
                last_value = value
            line = self.transport.read_line()
        return first, last_value

    def _observe(self, line: str, observed: List[Observation]) -> str:
        parsed = parse_line(line)
        if parsed is None:
            return ""
        logger.debug("< %s", line.strip())
        field, value = parsed
        self.cache.update(field, value)
        observed.append(parsed)
        return value

    def _dispatch(self, observed: List[Observation]) -> None:
        for field, value in observed:
            self.listeners.fire(field, value)
