from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict
import json
import os

@dataclass
class RunArtifact:
    run_id: str
    chain_name: str
    created_ts: float
    metrics: Dict[str, Any]
    config_snapshot: Dict[str, Any]

    def to_dict(self) -> dict:
        return {
            "run_id": self.run_id,
            "chain_name": self.chain_name,
            "created_ts": self.created_ts,
            "metrics": self.metrics,
            "config_snapshot": self.config_snapshot,
        }

    @classmethod
    def load(cls, path: str) -> "RunArtifact":
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return cls(**data)

    def save(self, path: str) -> None:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
