from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List
import logging
import threading
import time
import uuid

from colldeco.decorators.blocking import BlockingBuffer
from colldeco.decorators.synchronized import SynchronizedBuffer
from colldeco.workers.consumer import DrainConsumer
from colldeco.workers.producer import IntProducer
from .contracts import Buffer
from .decorator import layer_types
from .errors import InvalidArgumentError
from .metrics import Metrics
from .replay import RunArtifact

logger = logging.getLogger(__name__)

def check_shareable(buf: Buffer[Any]) -> None:
    """
    A chain can be hammered from several threads only if one of its layers
    serialises access. A blocking layer must be outermost so consumers can
    pass a poll timeout.
    """
    layers = layer_types(buf)
    if not any(issubclass(t, SynchronizedBuffer) for t in layers):
        raise InvalidArgumentError("workload needs a synchronized or blocking layer in the chain")
    if any(issubclass(t, BlockingBuffer) for t in layers[1:]):
        raise InvalidArgumentError("a blocking layer must be the outermost decorator for a workload")

@dataclass
class Workload:
    name: str
    buffer: Buffer[Any]
    producers: int = 2
    consumers: int = 2
    items_per_producer: int = 100
    poll_timeout_s: float = 0.05
    negative_prob: float = 0.0
    rng_seed: int | None = 123
    metrics: Metrics = field(default_factory=Metrics)

    @classmethod
    def from_config(cls, name: str, buf: Buffer[Any], cfg: Dict[str, Any], metrics: Metrics | None = None) -> "Workload":
        cfg = cfg or {}
        return cls(
            name=name,
            buffer=buf,
            producers=int(cfg.get("producers", 2)),
            consumers=int(cfg.get("consumers", 2)),
            items_per_producer=int(cfg.get("items_per_producer", 100)),
            poll_timeout_s=float(cfg.get("poll_timeout_s", 0.05)),
            negative_prob=float(cfg.get("negative_prob", 0.0)),
            rng_seed=cfg.get("rng_seed", 123),
            metrics=metrics or Metrics(),
        )

    def run(self) -> RunArtifact:
        check_shareable(self.buffer)
        if self.producers < 1 or self.consumers < 1:
            raise InvalidArgumentError("workload needs at least one producer and one consumer")

        metrics = self.metrics
        run_id = time.strftime("%Y%m%d_%H%M%S") + "_" + uuid.uuid4().hex[:8]
        done = threading.Event()

        producers = [
            IntProducer(
                f"producer-{i}",
                i,
                negative_prob=self.negative_prob,
                rng_seed=None if self.rng_seed is None else int(self.rng_seed) + i,
            )
            for i in range(self.producers)
        ]
        consumers = [DrainConsumer(f"consumer-{i}", poll_timeout_s=self.poll_timeout_s) for i in range(self.consumers)]

        consumer_threads = [
            threading.Thread(target=c.consume, args=(self.buffer, done, metrics), name=c.name, daemon=True)
            for c in consumers
        ]
        producer_threads = [
            threading.Thread(target=p.emit, args=(self.items_per_producer, self.buffer, metrics), name=p.name, daemon=True)
            for p in producers
        ]
        logger.info("run %s: %d producer(s), %d consumer(s) on %s",
                    run_id, len(producers), len(consumers), self.name)

        for t in consumer_threads + producer_threads:
            t.start()
        for t in producer_threads:
            t.join()
        done.set()
        for t in consumer_threads:
            t.join()

        taken: List[Any] = [item for c in consumers for item in c.taken]
        dupes = sum(n - 1 for n in Counter(taken).values() if n > 1)
        metrics.inc("duplicates", dupes)
        lost = metrics.get("produced") - metrics.get("consumed")
        if dupes or lost:
            logger.warning("run %s: %d duplicate(s), %d element(s) unaccounted for", run_id, dupes, lost)

        metrics.finalize()
        return RunArtifact(
            run_id=run_id,
            chain_name=self.name,
            created_ts=time.time(),
            metrics=metrics.summary(),
            config_snapshot={},  # filled by the cli from the yaml file
        )
