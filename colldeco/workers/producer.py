from __future__ import annotations
from dataclasses import dataclass
import logging
import random
import time

from colldeco.engine.contracts import Buffer
from colldeco.engine.errors import BufferOverflowError, InvalidArgumentError
from colldeco.engine.metrics import Metrics

logger = logging.getLogger(__name__)

@dataclass
class RetryPolicy:
    max_attempts: int = 50
    base_delay_s: float = 0.001
    backoff: float = 2.0
    max_delay_s: float = 0.05

    def delay_for_attempt(self, attempt: int) -> float:
        # attempt is 1-based (1 = first retry delay)
        return min(self.base_delay_s * (self.backoff ** (attempt - 1)), self.max_delay_s)

class IntProducer:
    """
    Adds n distinct ints to a buffer. Value i of producer k is k * stride + i + 1,
    negated with probability negative_prob so validating chains have something
    to reject. A full bounded buffer is retried with backoff.
    """
    stride = 10_000_000

    def __init__(
        self,
        name: str,
        index: int,
        *,
        negative_prob: float = 0.0,
        rng_seed: int | None = None,
        retry: RetryPolicy | None = None,
    ):
        self.name = name
        self.index = index
        self.negative_prob = negative_prob
        self.rng = random.Random(rng_seed)
        self.retry = retry or RetryPolicy()

    def values(self, n: int):
        base = self.index * self.stride
        for i in range(n):
            v = base + i + 1
            if self.negative_prob > 0 and self.rng.random() < self.negative_prob:
                v = -v
            yield v

    def emit(self, n: int, buf: Buffer[int], metrics: Metrics) -> None:
        for v in self.values(n):
            attempt = 0
            while True:
                try:
                    buf.add(v)
                    metrics.inc("produced", 1)
                    break
                except InvalidArgumentError:
                    metrics.inc("rejected", 1)
                    break
                except BufferOverflowError:
                    attempt += 1
                    metrics.inc("overflow_retries", 1)
                    if attempt >= self.retry.max_attempts:
                        metrics.inc("dropped", 1)
                        logger.warning("%s dropped %d after %d attempts", self.name, v, attempt)
                        break
                    time.sleep(self.retry.delay_for_attempt(attempt))
