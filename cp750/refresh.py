"""Background refresh loop.

States: idle (interval <= 0, wait until reconfigured) and armed (wait until
the next trigger time, then run the refresh callable).  Interval changes and
``stop()`` notify the condition so the loop re-evaluates immediately.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from .transport import StreamClosedError


logger = logging.getLogger(__name__)


class RefreshScheduler:
    def __init__(
        self,
        refresh: Callable[[], object],
        *,
        name: str = "cp750-refresh",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._refresh = refresh
        self._name = name
        self._clock = clock
        self._cond = threading.Condition()
        self._interval_ms = 0
        self._next_trigger: Optional[float] = None
        self._generation = 0
        self._stopped = False
        self._thread: Optional[threading.Thread] = None

    @property
    def interval_ms(self) -> int:
        with self._cond:
            return self._interval_ms

    @property
    def state(self) -> str:
        with self._cond:
            if self._stopped:
                return "stopped"
            return "armed" if self._interval_ms > 0 else "idle"

    @property
    def next_trigger(self) -> Optional[float]:
        with self._cond:
            return self._next_trigger

    @property
    def running(self) -> bool:
        thread = self._thread
        return bool(thread and thread.is_alive())

    def set_interval(self, interval_ms: int) -> None:
        """Change the period; ``0`` (or less) parks the loop until changed again."""
        interval_ms = int(interval_ms)
        with self._cond:
            if self._stopped:
                return
            self._interval_ms = interval_ms
            self._generation += 1
            if interval_ms > 0:
                self._next_trigger = self._clock() + interval_ms / 1000.0
            else:
                self._next_trigger = None
            self._cond.notify_all()
        logger.info("refresh interval set to %sms", interval_ms)
        if interval_ms > 0:
            self.start()

    def start(self) -> None:
        with self._cond:
            if self._stopped or (self._thread and self._thread.is_alive()):
                return
            self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
            self._thread.start()

    def stop(self, timeout: float = 1.0) -> None:
        with self._cond:
            self._stopped = True
            self._next_trigger = None
            self._cond.notify_all()
            thread = self._thread
        if thread and thread.is_alive() and thread is not threading.current_thread():
            thread.join(timeout=timeout)
        with self._cond:
            # a refresh blocked on the stream may outlive the join
            if self._thread is thread and not (thread and thread.is_alive()):
                self._thread = None

    def _wait_for_trigger(self) -> Optional[int]:
        """Block until due; return the generation that fired, ``None`` when stopped."""
        with self._cond:
            while not self._stopped:
                if self._interval_ms <= 0 or self._next_trigger is None:
                    self._cond.wait()
                    continue
                remaining = self._next_trigger - self._clock()
                if remaining <= 0:
                    return self._generation
                self._cond.wait(remaining)
            return None

    def _run(self) -> None:
        while True:
            generation = self._wait_for_trigger()
            if generation is None:
                return
            try:
                self._refresh()
            except StreamClosedError as exc:
                logger.warning("refresh stopped, stream closed: %s", exc)
                with self._cond:
                    self._stopped = True
                return
            except Exception as exc:
                logger.warning("refresh failed: %s", exc)
            with self._cond:
                # an interval change during the refresh already set its own trigger
                if generation == self._generation and self._interval_ms > 0:
                    self._next_trigger = self._clock() + self._interval_ms / 1000.0
