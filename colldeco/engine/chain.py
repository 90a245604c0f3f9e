from __future__ import annotations
import numbers
from typing import Any, Callable, Dict, Tuple

import yaml

from colldeco import buffers
from .contracts import Buffer
from .errors import InvalidArgumentError
from .metrics import Metrics
from .stores import ArrayStack, BoundedFifoBuffer, FifoBuffer

# Named collaborators a YAML file can refer to.
PREDICATES: Dict[str, Callable[[Any], bool]] = {
    "not_none": lambda x: x is not None,
    "positive": lambda x: x > 0,
    "non_negative": lambda x: x >= 0,
    "even": lambda x: x % 2 == 0,
}

TRANSFORMS: Dict[str, Callable[[Any], Any]] = {
    "identity": lambda x: x,
    "abs": abs,
    "double": lambda x: x * 2,
    "str": str,
    "upper": lambda x: str(x).upper(),
}

KINDS: Dict[str, Any] = {
    "int": int,
    "float": float,
    "str": str,
    "number": numbers.Number,
}

def _lookup(table: Dict[str, Any], name: Any, what: str) -> Any:
    try:
        return table[name]
    except (KeyError, TypeError):
        known = ", ".join(sorted(table))
        raise InvalidArgumentError(f"Unknown {what}: {name!r} (known: {known})") from None

def build_store(cfg: Dict[str, Any]) -> Buffer[Any]:
    store = cfg.get("store", "fifo")
    if store == "fifo":
        return FifoBuffer()
    if store == "bounded_fifo":
        return BoundedFifoBuffer(capacity=int(cfg.get("capacity", 32)))
    if store == "stack":
        return ArrayStack()
    raise InvalidArgumentError(f"Unknown store: {store!r}")

def build_buffer(cfg: Dict[str, Any], metrics: Metrics | None = None) -> Buffer[Any]:
    """
    Build a decorated buffer from the ``buffer`` section of a chain config.
    Decorators are listed innermost first; each one wraps the result so far.
    """
    if not isinstance(cfg, dict):
        raise InvalidArgumentError("buffer section must be a mapping")
    buf = build_store(cfg)

    for d in cfg.get("decorators", []) or []:
        dtype = d.get("type")
        if dtype == "synchronized":
            buf = buffers.synchronized_buffer(buf)
        elif dtype == "blocking":
            timeout = d.get("timeout_s", None)
            buf = buffers.blocking_buffer(
                buf,
                None if timeout is None else float(timeout),
                notify_all=bool(d.get("notify_all", False)),
                metrics=metrics,
            )
        elif dtype == "unmodifiable":
            buf = buffers.unmodifiable_buffer(buf)
        elif dtype == "predicated":
            buf = buffers.predicated_buffer(buf, _lookup(PREDICATES, d.get("predicate"), "predicate"))
        elif dtype == "typed":
            buf = buffers.typed_buffer(buf, _lookup(KINDS, d.get("kind"), "kind"))
        elif dtype == "transformed":
            buf = buffers.transformed_buffer(
                buf,
                _lookup(TRANSFORMS, d.get("transform"), "transform"),
                transform_existing=bool(d.get("transform_existing", False)),
            )
        else:
            raise InvalidArgumentError(f"Unknown decorator type: {dtype!r}")
    return buf

def load_config(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)
    if not isinstance(cfg, dict) or "buffer" not in cfg:
        raise InvalidArgumentError(f"{path}: expected a mapping with a 'buffer' section")
    return cfg

def build_buffer_from_yaml(path: str, metrics: Metrics | None = None) -> Tuple[Buffer[Any], Dict[str, Any]]:
    cfg = load_config(path)
    return build_buffer(cfg["buffer"], metrics=metrics), cfg
