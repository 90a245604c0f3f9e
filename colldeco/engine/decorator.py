from __future__ import annotations
from typing import Any, Callable, Iterable, Iterator, List, Optional, TypeVar

from .contracts import Buffer, Container, SortedContainer
from .errors import InvalidArgumentError

T = TypeVar("T")

def _require(collection: Any, what: str) -> Any:
    if collection is None:
        raise InvalidArgumentError(f"{what} must not be None")
    return collection

class BufferDecorator(Buffer[T]):
    """
    Base decorator: holds exactly one backing buffer and forwards every call to it.
    Subclasses override only the operations whose behaviour they change.

    The backing buffer is kept in a protected attribute; there is no public
    accessor, since reaching past the decorator would bypass whatever it adds.
    """
    def __init__(self, buffer: Buffer[T]):
        self._decorated: Buffer[T] = _require(buffer, "Buffer")

    @classmethod
    def decorate(cls, buffer: Buffer[T], *args: Any, **kwargs: Any) -> "BufferDecorator[T]":
        return cls(buffer, *args, **kwargs)

    def add(self, item: T) -> bool:
        return self._decorated.add(item)

    def add_all(self, items: Iterable[T]) -> bool:
        return self._decorated.add_all(items)

    def remove(self) -> T:
        return self._decorated.remove()

    def get(self) -> T:
        return self._decorated.get()

    def clear(self) -> None:
        self._decorated.clear()

    def __len__(self) -> int:
        return len(self._decorated)

    def __iter__(self) -> Iterator[T]:
        return iter(self._decorated)

    def __contains__(self, item: object) -> bool:
        return item in self._decorated

    def is_empty(self) -> bool:
        return self._decorated.is_empty()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._decorated!r})"

class ContainerDecorator(Container[T]):
    """Same as BufferDecorator, for bags."""
    def __init__(self, container: Container[T]):
        self._decorated: Container[T] = _require(container, "Container")

    @classmethod
    def decorate(cls, container: Container[T], *args: Any, **kwargs: Any) -> "ContainerDecorator[T]":
        return cls(container, *args, **kwargs)

    def add(self, item: T, copies: int = 1) -> bool:
        return self._decorated.add(item, copies)

    def add_all(self, items: Iterable[T]) -> bool:
        return self._decorated.add_all(items)

    def remove(self, item: T, copies: Optional[int] = None) -> bool:
        return self._decorated.remove(item, copies)

    def get_count(self, item: T) -> int:
        return self._decorated.get_count(item)

    def unique_set(self) -> frozenset:
        return self._decorated.unique_set()

    def clear(self) -> None:
        self._decorated.clear()

    def __len__(self) -> int:
        return len(self._decorated)

    def __iter__(self) -> Iterator[T]:
        return iter(self._decorated)

    def __contains__(self, item: object) -> bool:
        return item in self._decorated

    def is_empty(self) -> bool:
        return self._decorated.is_empty()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._decorated!r})"

class SortedContainerDecorator(ContainerDecorator[T], SortedContainer[T]):
    def __init__(self, container: SortedContainer[T]):
        super().__init__(container)
        if not isinstance(container, SortedContainer):
            raise InvalidArgumentError(f"Expected a SortedContainer, got {type(container).__name__}")

    @property
    def key(self) -> Optional[Callable[[T], Any]]:
        return self._decorated.key  # type: ignore[attr-defined]

    def first(self) -> T:
        return self._decorated.first()  # type: ignore[attr-defined]

    def last(self) -> T:
        return self._decorated.last()  # type: ignore[attr-defined]

def layer_types(collection: Any) -> List[type]:
    """
    Classes of every layer in a decorator chain, outermost first,
    ending with the backing store's class.
    """
    layers = []
    current = collection
    while current is not None:
        layers.append(type(current))
        current = getattr(current, "_decorated", None)
    return layers
