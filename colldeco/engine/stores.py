from __future__ import annotations
import bisect
from collections import deque
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, TypeVar

from .contracts import Buffer, Container, SortedContainer
from .errors import (
    BufferOverflowError,
    BufferUnderflowError,
    EmptyContainerError,
    InvalidArgumentError,
)

T = TypeVar("T")

def _reject_none(item: Any, where: str) -> None:
    if item is None:
        raise InvalidArgumentError(f"{where} does not accept None elements")

class FifoBuffer(Buffer[T]):
    """
    Unbounded first-in first-out buffer over a deque.
    Not thread-safe; wrap it with synchronized_buffer/blocking_buffer to share it.
    """
    def __init__(self, items: Iterable[T] = ()):
        self._items: deque[T] = deque()
        for item in items:
            self.add(item)

    def add(self, item: T) -> bool:
        _reject_none(item, type(self).__name__)
        self._items.append(item)
        return True

    def remove(self) -> T:
        if not self._items:
            raise BufferUnderflowError("The buffer is already empty")
        return self._items.popleft()

    def get(self) -> T:
        if not self._items:
            raise BufferUnderflowError("The buffer is already empty")
        return self._items[0]

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

class BoundedFifoBuffer(FifoBuffer[T]):
    """
    Fixed-capacity fifo. add() on a full buffer raises BufferOverflowError
    instead of growing or blocking.
    """
    def __init__(self, capacity: int = 32, items: Iterable[T] = ()):
        if capacity <= 0:
            raise InvalidArgumentError("The size must be greater than 0")
        self.max_size = capacity
        super().__init__(items)

    @classmethod
    def of(cls, items: Iterable[T]) -> "BoundedFifoBuffer[T]":
        """Buffer sized exactly to hold items."""
        items = list(items)
        return cls(capacity=max(len(items), 1), items=items)

    def add(self, item: T) -> bool:
        _reject_none(item, type(self).__name__)
        if len(self._items) >= self.max_size:
            raise BufferOverflowError(f"The buffer cannot hold more than {self.max_size} objects")
        self._items.append(item)
        return True

    def is_full(self) -> bool:
        return len(self._items) >= self.max_size

class ArrayStack(Buffer[T]):
    """Last-in first-out buffer: remove() and get() act on the newest element."""
    def __init__(self, items: Iterable[T] = ()):
        self._items: List[T] = []
        for item in items:
            self.add(item)

    def add(self, item: T) -> bool:
        _reject_none(item, type(self).__name__)
        self._items.append(item)
        return True

    def remove(self) -> T:
        if not self._items:
            raise BufferUnderflowError("The stack is empty")
        return self._items.pop()

    def get(self) -> T:
        if not self._items:
            raise BufferUnderflowError("The stack is empty")
        return self._items[-1]

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        # bottom to top, the order elements were pushed
        return iter(self._items)

class HashContainer(Container[T]):
    def __init__(self, items: Iterable[T] = ()):
        self._counts: Dict[T, int] = {}
        self._total = 0
        self.add_all(items)

    def add(self, item: T, copies: int = 1) -> bool:
        _reject_none(item, type(self).__name__)
        if copies < 1:
            raise InvalidArgumentError(f"copies must be >= 1, got {copies}")
        before = self._counts.get(item, 0)
        self._counts[item] = before + copies
        self._total += copies
        return before == 0

    def remove(self, item: T, copies: Optional[int] = None) -> bool:
        if copies is not None and copies < 1:
            raise InvalidArgumentError(f"copies must be >= 1, got {copies}")
        before = self._counts.get(item, 0)
        if before == 0:
            return False
        taken = before if copies is None else min(copies, before)
        if taken == before:
            del self._counts[item]
        else:
            self._counts[item] = before - taken
        self._total -= taken
        return True

    def get_count(self, item: T) -> int:
        return self._counts.get(item, 0)

    def unique_set(self) -> frozenset:
        return frozenset(self._counts)

    def clear(self) -> None:
        self._counts.clear()
        self._total = 0

    def __len__(self) -> int:
        return self._total

    def __iter__(self) -> Iterator[T]:
        for item, n in list(self._counts.items()):
            for _ in range(n):
                yield item

class TreeContainer(HashContainer[T], SortedContainer[T]):
    """
    Ordered bag. Distinct elements are kept sorted by key (natural order
    when key is None) so first()/last() are O(1) and add/remove O(log n)
    for the search plus the list shift.
    """
    def __init__(self, items: Iterable[T] = (), key: Optional[Callable[[T], Any]] = None):
        self._key = key
        self._order: List[Any] = []   # sort keys of distinct elements
        self._sorted: List[T] = []    # distinct elements, parallel to _order
        super().__init__(items)

    @property
    def key(self) -> Optional[Callable[[T], Any]]:
        return self._key

    def _sort_key(self, item: T) -> Any:
        return self._key(item) if self._key is not None else item

    def add(self, item: T, copies: int = 1) -> bool:
        _reject_none(item, type(self).__name__)
        idx = None
        if item not in self._counts:
            # position first: an unorderable item must fail before the count changes
            sk = self._sort_key(item)
            idx = bisect.bisect_right(self._order, sk)
        is_new = super().add(item, copies)
        if idx is not None:
            self._order.insert(idx, sk)
            self._sorted.insert(idx, item)
        return is_new

    def remove(self, item: T, copies: Optional[int] = None) -> bool:
        changed = super().remove(item, copies)
        if changed and item not in self._counts:
            sk = self._sort_key(item)
            lo = bisect.bisect_left(self._order, sk)
            hi = bisect.bisect_right(self._order, sk)
            for idx in range(lo, hi):
                if self._sorted[idx] == item:
                    del self._order[idx]
                    del self._sorted[idx]
                    break
        return changed

    def clear(self) -> None:
        super().clear()
        self._order.clear()
        self._sorted.clear()

    def first(self) -> T:
        if not self._sorted:
            raise EmptyContainerError("The container is empty")
        return self._sorted[0]

    def last(self) -> T:
        if not self._sorted:
            raise EmptyContainerError("The container is empty")
        return self._sorted[-1]

    def __iter__(self) -> Iterator[T]:
        for item in list(self._sorted):
            for _ in range(self._counts.get(item, 0)):
                yield item
