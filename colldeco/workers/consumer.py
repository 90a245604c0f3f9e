from __future__ import annotations
from typing import Any, List
import threading
import time

from colldeco.decorators.blocking import BlockingBuffer
from colldeco.engine.contracts import Buffer
from colldeco.engine.errors import BufferUnderflowError, WaitTimeoutError
from colldeco.engine.metrics import Metrics

class DrainConsumer:
    """
    Removes elements until ``done`` is set and the buffer is empty.
    Blocking buffers are polled with a short timeout, anything else is polled
    with a short sleep between empty reads.
    """
    def __init__(self, name: str, *, poll_timeout_s: float = 0.05, sample_every: int = 100):
        self.name = name
        self.poll_timeout_s = poll_timeout_s
        self.sample_every = sample_every
        self.taken: List[Any] = []

    def _take(self, buf: Buffer[Any]) -> Any:
        if isinstance(buf, BlockingBuffer):
            return buf.remove(timeout=self.poll_timeout_s)
        return buf.remove()

    def consume(self, buf: Buffer[Any], done: threading.Event, metrics: Metrics) -> None:
        while True:
            t0 = time.perf_counter()
            try:
                item = self._take(buf)
            except (WaitTimeoutError, BufferUnderflowError):
                metrics.inc("empty_polls", 1)
                if done.is_set() and len(buf) == 0:
                    return
                if not isinstance(buf, BlockingBuffer):
                    time.sleep(self.poll_timeout_s / 10)
                continue
            metrics.observe_latency_ms((time.perf_counter() - t0) * 1000)
            metrics.inc("consumed", 1)
            self.taken.append(item)
            if len(self.taken) % self.sample_every == 0:
                metrics.sample_depth({self.name: len(buf)})
