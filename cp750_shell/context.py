"""Shell context and client helpers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from cp750 import DEFAULT_PORT, DEFAULT_TIMEOUT, CP750Client

LOGGER = logging.getLogger("cp750_shell.context")


@dataclass
class ShellContext:
    """Holds shared shell state."""

    host: str = "127.0.0.1"
    port: int = DEFAULT_PORT
    timeout: float = DEFAULT_TIMEOUT
    refresh_interval: int = 0
    json_output: bool = False
    _client: Optional[CP750Client] = field(default=None, init=False, repr=False)

    def ensure_client(self) -> CP750Client:
        """Open the CP750 session if needed."""
        if self._client and not self._client.closed:
            return self._client
        client = CP750Client(self.host, self.port, timeout=self.timeout)
        if self.refresh_interval > 0:
            client.set_refresh_interval(self.refresh_interval)
        self._client = client
        return client

    @property
    def client(self) -> Optional[CP750Client]:
        return self._client

    def set_refresh_interval(self, interval_ms: int) -> None:
        self.refresh_interval = interval_ms
        if self._client and not self._client.closed:
            self._client.set_refresh_interval(interval_ms)

    def disconnect(self) -> None:
        client = self._client
        if not client:
            return
        try:
            client.close()
        except Exception as exc:
            LOGGER.debug("client close failed: %s", exc)
        self._client = None
