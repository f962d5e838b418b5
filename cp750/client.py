"""CP750 session: handshake, typed accessors and lifecycle."""

from __future__ import annotations

import logging
import socket
import threading
from typing import Any, Optional, Union

from .cache import StateCache
from .events import FieldListener, ListenerRegistry
from .executor import CommandExecutor
from .fields import (
    CTRL_FADER_DELTA,
    SYS_FADER,
    SYS_INPUT_MODE,
    SYS_MUTE,
    SYSINFO_VERSION,
    Field,
    InputMode,
    queryable_fields,
    resolve_field,
)
from .refresh import RefreshScheduler
from .transport import DEFAULT_PORT, DEFAULT_TIMEOUT, LineTransport, TransportConfig, TransportError


logger = logging.getLogger(__name__)

FieldRef = Union[Field, str]

EXIT_COMMAND = "exit"


class CP750Client:
    """Stateful connection to one CP750.

    Construction connects and runs the handshake; if either fails the stream
    is closed and the exception propagates.  The processor only accepts a few
    simultaneous connections, so always ``close()`` the client (or use it as a
    context manager).
    """

    def __init__(
        self,
        host: str = "127.0.0.1",
        port: int = DEFAULT_PORT,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        connect_timeout: Optional[float] = None,
        transport: Optional[LineTransport] = None,
    ) -> None:
        if transport is None:
            transport = LineTransport(
                TransportConfig(
                    host=host,
                    port=port,
                    connect_timeout=connect_timeout if connect_timeout is not None else timeout,
                    read_timeout=timeout,
                )
            )
        self.transport = transport
        self.cache = StateCache()
        self.listeners = ListenerRegistry()
        self.executor = CommandExecutor(transport, cache=self.cache, listeners=self.listeners)
        self._scheduler = RefreshScheduler(self.refresh)
        self._closed = False
        self._close_lock = threading.Lock()
        try:
            self.transport.connect()
            self.executor.handshake(queryable_fields())
        except BaseException:
            self.transport.close()
            raise
        logger.info("connected to CP750 version %s", self.get_version())

    @classmethod
    def from_socket(cls, sock: socket.socket, *, timeout: float = DEFAULT_TIMEOUT) -> "CP750Client":
        """Wrap an already connected socket (closed again if the handshake fails)."""
        host, port = sock.getpeername()[:2]
        config = TransportConfig(host=host, port=port, read_timeout=timeout)
        return cls(host, port, transport=LineTransport.from_socket(sock, config))

    def __enter__(self) -> "CP750Client":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Stop refreshing, say goodbye (best-effort) and drop the stream."""
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
        self._scheduler.stop()
        if not self.transport.closed:
            try:
                self.executor.send_unanswered(EXIT_COMMAND)
            except TransportError as exc:
                logger.debug("exit not delivered: %s", exc)
        self.transport.close()

    @property
    def refresh_interval(self) -> int:
        """Refresh period in milliseconds; ``0`` means no automatic refresh."""
        return self._scheduler.interval_ms

    def set_refresh_interval(self, interval_ms: int) -> None:
        self._scheduler.set_interval(interval_ms)

    @property
    def scheduler(self) -> RefreshScheduler:
        return self._scheduler

    # ------------------------------------------------------------------
    # Cache and listeners
    # ------------------------------------------------------------------
    def get_current_value(self, field: FieldRef) -> Optional[str]:
        """Last known value as read from the device, without any traffic."""
        return self.cache.get(resolve_field(field))

    def add_listener(self, field: FieldRef, listener: FieldListener) -> None:
        self.listeners.add(resolve_field(field), listener)

    def add_onetime_listener(self, field: FieldRef, listener: FieldListener) -> None:
        self.listeners.add_onetime(resolve_field(field), listener)

    def remove_listener(self, listener: FieldListener) -> None:
        self.listeners.remove(listener)

    # ------------------------------------------------------------------
    # Raw commands
    # ------------------------------------------------------------------
    def send(self, field: FieldRef, value: str) -> str:
        return self.executor.send(resolve_field(field), str(value))

    def query(self, field: FieldRef) -> str:
        return self.executor.query(resolve_field(field))

    def send_raw(self, line: str) -> str:
        return self.executor.send_raw(line)

    def refresh(self) -> None:
        """Re-read every field with one ``status`` request."""
        self.executor.refresh()

    # ------------------------------------------------------------------
    # Typed accessors
    # ------------------------------------------------------------------
    def get_version(self) -> Optional[str]:
        # fixed for the lifetime of the device; the handshake already read it
        return self.cache.get(SYSINFO_VERSION)

    def get_fader(self) -> int:
        """Current fader level, or ``-1`` if the device did not say."""
        result = self.executor.query(SYS_FADER)
        if not result:
            return -1
        return int(result)

    def set_fader(self, value: int) -> None:
        self.executor.send(SYS_FADER, str(int(value)))

    def set_fader_delta(self, delta: int) -> None:
        """Move the fader by ``delta`` (-100..100); the device clamps to 0..100."""
        self.executor.send(CTRL_FADER_DELTA, str(int(delta)))
        self.executor.query(SYS_FADER)

    def is_muted(self) -> bool:
        return self.executor.query(SYS_MUTE) == "1"

    def set_muted(self, mute: bool) -> None:
        self.executor.send(SYS_MUTE, "1" if mute else "0")

    def get_input_mode(self) -> Optional[InputMode]:
        return InputMode.from_any(self.executor.query(SYS_INPUT_MODE))

    def set_input_mode(self, mode: Union[InputMode, str]) -> None:
        """Select an input; ``InputMode.LAST`` swaps with the previous one.

        Each input carries its own default fader level, so the fader is
        re-read afterwards.
        """
        resolved = InputMode.from_any(mode)
        value = resolved.value if resolved is not None else str(mode)
        self.executor.send(SYS_INPUT_MODE, value)
        self.executor.query(SYS_FADER)
