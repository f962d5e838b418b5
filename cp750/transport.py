"""
Transport layer for cp750.

Responsibilities:
    * Own the single TCP stream to the processor (connect/read timeouts).
    * Frame newline-terminated ASCII lines in both directions.
    * Translate socket failures into the transport error taxonomy.

The receive buffer is kept here rather than in a ``socket.makefile`` wrapper
so that a read timeout leaves the stream readable for the next request.
"""

from __future__ import annotations

import logging
import socket
import threading
from dataclasses import dataclass, field
from typing import Optional


logger = logging.getLogger(__name__)

DEFAULT_PORT = 61408
DEFAULT_TIMEOUT = 10.0


class TransportError(RuntimeError):
    """Raised when the transport cannot complete an operation."""


class ConnectionFailedError(TransportError):
    """Raised when the TCP connection cannot be established."""


class StreamClosedError(TransportError):
    """Raised when the peer (or a local close) ends the stream mid-exchange."""


class TransportTimeoutError(TransportError):
    """Raised when no data arrives within the configured read timeout."""


class ProtocolViolationError(TransportError):
    """Raised when the peer answers with something other than what was asked."""


@dataclass
class TransportConfig:
    host: str = "127.0.0.1"
    port: int = DEFAULT_PORT
    connect_timeout: float = DEFAULT_TIMEOUT
    read_timeout: float = DEFAULT_TIMEOUT
    encoding: str = "ascii"


@dataclass
class LineTransport:
    """Blocking line-framed TCP stream."""

    config: TransportConfig = field(default_factory=TransportConfig)

    _sock: Optional[socket.socket] = field(init=False, default=None)
    _buffer: bytes = field(init=False, default=b"")
    _closed: bool = field(init=False, default=False)
    _close_lock: threading.Lock = field(init=False, default_factory=threading.Lock)

    @classmethod
    def from_socket(cls, sock: socket.socket, config: Optional[TransportConfig] = None) -> "LineTransport":
        """Adopt an already connected socket."""
        transport = cls(config or TransportConfig())
        if transport.config.read_timeout > 0:
            sock.settimeout(transport.config.read_timeout)
        transport._sock = sock
        return transport

    #
    # Connection lifecycle helpers
    #
    @property
    def closed(self) -> bool:
        return self._closed or self._sock is None

    @property
    def socket(self) -> Optional[socket.socket]:
        return self._sock

    def connect(self) -> None:
        if self._sock is not None:
            return
        if self._closed:
            raise StreamClosedError("transport closed")
        connect_timeout = self.config.connect_timeout if self.config.connect_timeout > 0 else DEFAULT_TIMEOUT
        try:
            sock = socket.create_connection((self.config.host, self.config.port), timeout=connect_timeout)
        except OSError as exc:
            raise ConnectionFailedError(f"connect to {self.config.host}:{self.config.port} failed: {exc}") from exc
        self._sock = sock
        self.set_read_timeout(self.config.read_timeout)
        logger.debug("connected to %s:%s", self.config.host, self.config.port)

    def set_read_timeout(self, seconds: float) -> None:
        if seconds <= 0:
            seconds = DEFAULT_TIMEOUT
        self.config.read_timeout = seconds
        sock = self._sock
        if sock is None:
            return
        try:
            sock.settimeout(seconds)
        except OSError as exc:
            raise StreamClosedError(f"cannot set timeout: {exc}") from exc

    def close(self) -> None:
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
            sock = self._sock
        if sock is None:
            return
        # shutdown first so a reader blocked in recv() on another thread wakes up
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        try:
            sock.close()
        except OSError:
            pass
        logger.debug("transport closed")

    #
    # Line I/O
    #
    def write_line(self, line: str) -> None:
        sock = self._require_socket()
        data = line.encode(self.config.encoding, errors="replace") + b"\n"
        try:
            sock.sendall(data)
        except socket.timeout as exc:
            raise TransportTimeoutError(f"write timed out: {line!r}") from exc
        except OSError as exc:
            raise StreamClosedError(f"write failed: {exc}") from exc

    def read_line(self) -> str:
        """Return the next line without its terminator (``\\r`` stripped)."""
        while b"\n" not in self._buffer:
            sock = self._require_socket()
            try:
                chunk = sock.recv(4096)
            except socket.timeout as exc:
                raise TransportTimeoutError(
                    f"no data within {self.config.read_timeout:g}s"
                ) from exc
            except OSError as exc:
                raise StreamClosedError(f"read failed: {exc}") from exc
            if not chunk:
                raise StreamClosedError("connection closed unexpectedly")
            self._buffer += chunk
        line, self._buffer = self._buffer.split(b"\n", 1)
        return line.rstrip(b"\r").decode(self.config.encoding, errors="replace")

    def _require_socket(self) -> socket.socket:
        sock = self._sock
        if self._closed or sock is None:
            raise StreamClosedError("transport closed")
        return sock
