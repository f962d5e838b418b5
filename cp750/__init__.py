"""
cp750 - client toolkit for the Dolby CP750 cinema processor control port.

The processor speaks a line-oriented ASCII protocol on TCP port 61408.  This
package keeps one connection per client, serializes requests over it, and
mirrors the device state in a local cache.  Each module has one job:

    fields.py     → registry of known fields and their value domains
    transport.py  → TCP stream, line framing, transport errors
    parser.py     → response line parsing
    cache.py      → last observed value per field
    events.py     → persistent and one-shot field listeners
    executor.py   → strictly ordered request/response execution
    refresh.py    → periodic background "status" refresh
    client.py     → handshake, typed accessors, lifecycle
"""

from .fields import (  # noqa: F401
    CTRL_FADER_DELTA,
    FIELDS,
    Field,
    InputMode,
    QUERY_TOKEN,
    SYSINFO_VERSION,
    SYS_FADER,
    SYS_INPUT_MODE,
    SYS_MUTE,
    field_by_key,
    field_by_ordinal,
)
from .transport import (  # noqa: F401
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
    ConnectionFailedError,
    LineTransport,
    ProtocolViolationError,
    StreamClosedError,
    TransportConfig,
    TransportError,
    TransportTimeoutError,
)
from .parser import parse_line  # noqa: F401
from .cache import StateCache  # noqa: F401
from .events import FieldListener, ListenerRegistry  # noqa: F401
from .executor import CommandExecutor  # noqa: F401
from .refresh import RefreshScheduler  # noqa: F401
from .client import CP750Client  # noqa: F401

__all__ = [
    "CP750Client",
    "CommandExecutor",
    "ConnectionFailedError",
    "CTRL_FADER_DELTA",
    "DEFAULT_PORT",
    "DEFAULT_TIMEOUT",
    "FIELDS",
    "Field",
    "FieldListener",
    "InputMode",
    "LineTransport",
    "ListenerRegistry",
    "ProtocolViolationError",
    "QUERY_TOKEN",
    "RefreshScheduler",
    "StateCache",
    "StreamClosedError",
    "SYSINFO_VERSION",
    "SYS_FADER",
    "SYS_INPUT_MODE",
    "SYS_MUTE",
    "TransportConfig",
    "TransportError",
    "TransportTimeoutError",
    "field_by_key",
    "field_by_ordinal",
    "parse_line",
]

__version__ = "0.1.0"
