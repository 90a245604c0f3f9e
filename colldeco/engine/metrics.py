from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List
import statistics
import threading
import time

@dataclass
class Metrics:
    """
    Counters plus latency samples. Safe to share between threads:
    blocking buffers and workload workers all record into one instance.
    """
    counters: Dict[str, int] = field(default_factory=dict)
    latencies_ms: List[float] = field(default_factory=list)
    depth_samples: List[dict] = field(default_factory=list)
    started_ts: float = field(default_factory=time.time)
    finished_ts: float | None = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def inc(self, key: str, n: int = 1) -> None:
        with self._lock:
            self.counters[key] = self.counters.get(key, 0) + n

    def get(self, key: str) -> int:
        with self._lock:
            return self.counters.get(key, 0)

    def observe_latency_ms(self, ms: float) -> None:
        with self._lock:
            self.latencies_ms.append(ms)

    def sample_depth(self, depths: dict) -> None:
        depths = dict(depths)
        depths["_ts"] = time.time()
        with self._lock:
            self.depth_samples.append(depths)

    def finalize(self) -> None:
        self.finished_ts = time.time()

    def summary(self) -> dict:
        dur = (self.finished_ts or time.time()) - self.started_ts
        with self._lock:
            lats = sorted(self.latencies_ms)
            counters = dict(self.counters)
            samples = list(self.depth_samples)
        def pct(p: float) -> float | None:
            if not lats:
                return None
            idx = int(round((p/100) * (len(lats)-1)))
            return lats[idx]

        return {
            "duration_s": dur,
            "counters": counters,
            "latency_ms": {
                "count": len(lats),
                "p50": pct(50),
                "p95": pct(95),
                "mean": (statistics.mean(lats) if lats else None),
            },
            "depth_samples": samples,
        }
