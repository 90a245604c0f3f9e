from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, Iterable, Iterator, Optional, TypeVar

T = TypeVar("T")

class Buffer(ABC, Generic[T]):
    """
    FIFO-like capability set: insert, remove-first, peek-first.
    Which element counts as "first" is up to the implementation
    (insertion order for a fifo, most recent for a stack).
    """

    @abstractmethod
    def add(self, item: T) -> bool:
        ...

    def add_all(self, items: Iterable[T]) -> bool:
        changed = False
        for item in items:
            changed = self.add(item) or changed
        return changed

    @abstractmethod
    def remove(self) -> T:
        """Remove and return the next element. Raises BufferUnderflowError if empty."""

    @abstractmethod
    def get(self) -> T:
        """Return the next element without removing it. Raises BufferUnderflowError if empty."""

    @abstractmethod
    def clear(self) -> None:
        ...

    @abstractmethod
    def __len__(self) -> int:
        ...

    @abstractmethod
    def __iter__(self) -> Iterator[T]:
        ...

    def __contains__(self, item: object) -> bool:
        return any(x == item for x in self)

    def is_empty(self) -> bool:
        return len(self) == 0

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self)!r})"

class Container(ABC, Generic[T]):
    """
    Multiset ("bag") capability set. len() counts copies, iteration
    yields every copy, unique_set() the distinct elements.
    """

    @abstractmethod
    def add(self, item: T, copies: int = 1) -> bool:
        """Add copies of item. True if item was not present before."""

    def add_all(self, items: Iterable[T]) -> bool:
        changed = False
        for item in items:
            self.add(item)
            changed = True
        return changed

    @abstractmethod
    def remove(self, item: T, copies: Optional[int] = None) -> bool:
        """Remove copies of item (all of them when copies is None). True if anything changed."""

    @abstractmethod
    def get_count(self, item: T) -> int:
        ...

    @abstractmethod
    def unique_set(self) -> frozenset:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...

    @abstractmethod
    def __len__(self) -> int:
        ...

    @abstractmethod
    def __iter__(self) -> Iterator[T]:
        ...

    def __contains__(self, item: object) -> bool:
        return self.get_count(item) > 0  # type: ignore[arg-type]

    def is_empty(self) -> bool:
        return len(self) == 0

    def __repr__(self) -> str:
        counts = {item: self.get_count(item) for item in self.unique_set()}
        return f"{type(self).__name__}({counts!r})"

class SortedContainer(Container[T]):
    """Container whose iteration follows the order given by key."""

    @property
    @abstractmethod
    def key(self) -> Optional[Callable[[T], Any]]:
        ...

    @abstractmethod
    def first(self) -> T:
        """Lowest element. Raises EmptyContainerError if empty."""

    @abstractmethod
    def last(self) -> T:
        """Highest element. Raises EmptyContainerError if empty."""
