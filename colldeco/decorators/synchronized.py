from __future__ import annotations
import threading
from typing import Iterable, Iterator, List, Optional, TypeVar

from colldeco.engine.contracts import Buffer, Container, SortedContainer
from colldeco.engine.decorator import BufferDecorator, ContainerDecorator, SortedContainerDecorator

T = TypeVar("T")

class SynchronizedBuffer(BufferDecorator[T]):
    """
    Runs every single operation under one re-entrant lock owned by this instance.

    Single calls are atomic with respect to each other. Compound sequences
    (check-then-remove, iterate-then-clear) are not; hold ``lock`` yourself:

        with buf.lock:
            if not buf.is_empty():
                item = buf.remove()

    Iterating returns a snapshot taken under the lock.
    """
    def __init__(self, buffer: Buffer[T]):
        super().__init__(buffer)
        self.lock = threading.RLock()

    def add(self, item: T) -> bool:
        with self.lock:
            return self._decorated.add(item)

    def add_all(self, items: Iterable[T]) -> bool:
        with self.lock:
            return self._decorated.add_all(items)

    def remove(self) -> T:
        with self.lock:
            return self._decorated.remove()

    def get(self) -> T:
        with self.lock:
            return self._decorated.get()

    def clear(self) -> None:
        with self.lock:
            self._decorated.clear()

    def __len__(self) -> int:
        with self.lock:
            return len(self._decorated)

    def __iter__(self) -> Iterator[T]:
        with self.lock:
            snapshot: List[T] = list(self._decorated)
        return iter(snapshot)

    def __contains__(self, item: object) -> bool:
        with self.lock:
            return item in self._decorated

    def is_empty(self) -> bool:
        with self.lock:
            return self._decorated.is_empty()

    def __repr__(self) -> str:
        with self.lock:
            return super().__repr__()

class SynchronizedContainer(ContainerDecorator[T]):
    """Bag counterpart of SynchronizedBuffer; same locking contract."""
    def __init__(self, container: Container[T]):
        super().__init__(container)
        self.lock = threading.RLock()

    def add(self, item: T, copies: int = 1) -> bool:
        with self.lock:
            return self._decorated.add(item, copies)

    def add_all(self, items: Iterable[T]) -> bool:
        with self.lock:
            return self._decorated.add_all(items)

    def remove(self, item: T, copies: Optional[int] = None) -> bool:
        with self.lock:
            return self._decorated.remove(item, copies)

    def get_count(self, item: T) -> int:
        with self.lock:
            return self._decorated.get_count(item)

    def unique_set(self) -> frozenset:
        with self.lock:
            return self._decorated.unique_set()

    def clear(self) -> None:
        with self.lock:
            self._decorated.clear()

    def __len__(self) -> int:
        with self.lock:
            return len(self._decorated)

    def __iter__(self) -> Iterator[T]:
        with self.lock:
            snapshot: List[T] = list(self._decorated)
        return iter(snapshot)

    def __contains__(self, item: object) -> bool:
        with self.lock:
            return item in self._decorated

    def is_empty(self) -> bool:
        with self.lock:
            return self._decorated.is_empty()

    def __repr__(self) -> str:
        with self.lock:
            return super().__repr__()

class SynchronizedSortedContainer(SynchronizedContainer[T], SortedContainerDecorator[T]):
    def __init__(self, container: SortedContainer[T]):
        SortedContainerDecorator.__init__(self, container)
        self.lock = threading.RLock()

    def first(self) -> T:
        with self.lock:
            return self._decorated.first()  # type: ignore[attr-defined]

    def last(self) -> T:
        with self.lock:
            return self._decorated.last()  # type: ignore[attr-defined]
