from __future__ import annotations
import logging
import math
import threading
import time
from typing import Any, Callable, Iterable, Optional, TypeVar

from colldeco.engine.contracts import Buffer
from colldeco.engine.errors import InvalidArgumentError, WaitCancelledError, WaitTimeoutError
from colldeco.engine.metrics import Metrics
from .synchronized import SynchronizedBuffer

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNSET: Any = object()

def _check_timeout(timeout: Optional[float]) -> Optional[float]:
    if timeout is not None and not (math.isfinite(timeout) and timeout >= 0):
        raise InvalidArgumentError(f"timeout must be a finite number >= 0 or None, got {timeout}")
    return timeout

class BlockingBuffer(SynchronizedBuffer[T]):
    """
    Synchronized buffer whose remove() and get() wait for an element instead of
    raising BufferUnderflowError when the backing buffer is empty.

    Waits are made on one Condition bound to ``lock``:

    - timeout=None waits until an element shows up or interrupt() is called.
    - a bounded timeout raises WaitTimeoutError once it runs out. The remaining
      time is recomputed from a monotonic deadline after every wake-up.
    - interrupt() releases every caller parked at that moment with
      WaitCancelledError.

    add() wakes one parked caller (or all of them with notify_all=True);
    add_all() always wakes all. A woken caller that ends up not consuming
    (a get(), a cancelled or timed-out caller) hands the signal on while
    elements remain, so an insert is never lost on a peeker.

    Which parked caller is released first is not specified.
    """
    def __init__(
        self,
        buffer: Buffer[T],
        timeout: Optional[float] = None,
        *,
        notify_all: bool = False,
        metrics: Metrics | None = None,
    ):
        super().__init__(buffer)
        self.timeout = _check_timeout(timeout)
        self.notify_all = notify_all
        self.metrics = metrics
        self._not_empty = threading.Condition(self.lock)
        self._waiting = 0
        self._interrupts = 0

    def add(self, item: T) -> bool:
        with self.lock:
            try:
                return self._decorated.add(item)
            finally:
                self._wake(everyone=self.notify_all)

    def add_all(self, items: Iterable[T]) -> bool:
        with self.lock:
            try:
                return self._decorated.add_all(items)
            finally:
                # a partial bulk insert still has to wake whoever it fed
                self._wake(everyone=True)

    def remove(self, timeout: Optional[float] = _UNSET) -> T:
        """Remove the next element, waiting for one if the buffer is empty."""
        return self._await(self._decorated.remove, timeout, "remove")

    def get(self, timeout: Optional[float] = _UNSET) -> T:
        """Peek at the next element, waiting for one if the buffer is empty."""
        return self._await(self._decorated.get, timeout, "get")

    def interrupt(self) -> int:
        """Release every caller currently waiting. Returns how many there were."""
        with self.lock:
            self._interrupts += 1
            released = self._waiting
            self._not_empty.notify_all()
        if released:
            logger.debug("interrupt released %d waiter(s)", released)
        return released

    @property
    def waiting(self) -> int:
        """Number of callers parked on this buffer right now."""
        with self.lock:
            return self._waiting

    def _wake(self, everyone: bool) -> None:
        if self._waiting == 0 or self._decorated.is_empty():
            return
        if everyone:
            self._not_empty.notify_all()
        else:
            self._not_empty.notify()

    def _count(self, key: str) -> None:
        if self.metrics is not None:
            self.metrics.inc(key, 1)

    def _await(self, take: Callable[[], T], timeout: Optional[float], op: str) -> T:
        timeout = self.timeout if timeout is _UNSET else _check_timeout(timeout)
        with self.lock:
            if not self._decorated.is_empty():
                item = take()
                self._wake(everyone=False)
                return item

            generation = self._interrupts
            deadline = None if timeout is None else time.monotonic() + timeout
            self._waiting += 1
            self._count("blocking.waits")
            logger.debug("%s() parked on empty buffer (timeout=%s)", op, timeout)
            try:
                while True:
                    if generation != self._interrupts:
                        self._count("blocking.cancelled")
                        # hand on any notification absorbed without consuming
                        self._wake(everyone=False)
                        raise WaitCancelledError(f"{op}() was interrupted while waiting")
                    if not self._decorated.is_empty():
                        break
                    if deadline is None:
                        self._not_empty.wait()
                        continue
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        self._count("blocking.timeouts")
                        logger.debug("%s() timed out after %.3fs", op, timeout)
                        raise WaitTimeoutError(f"{op}() found nothing within {timeout}s")
                    self._not_empty.wait(remaining)
            finally:
                self._waiting -= 1

            item = take()
            self._wake(everyone=False)
            return item
