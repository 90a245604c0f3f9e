from __future__ import annotations
from typing import Iterable, NoReturn, Optional, TypeVar

from colldeco.engine.contracts import Buffer, Container, SortedContainer
from colldeco.engine.decorator import BufferDecorator, ContainerDecorator, SortedContainerDecorator
from colldeco.engine.errors import UnsupportedOperationError

T = TypeVar("T")

class Unmodifiable:
    """Marker mixin; decorating an instance that already carries it is a no-op."""

def _refuse(op: str) -> NoReturn:
    raise UnsupportedOperationError(f"{op}() is not supported on an unmodifiable collection")

class UnmodifiableBuffer(BufferDecorator[T], Unmodifiable):
    """Read-only view: add/add_all/remove/clear raise UnsupportedOperationError, reads pass through."""

    @classmethod
    def decorate(cls, buffer: Buffer[T]) -> Buffer[T]:
        if isinstance(buffer, Unmodifiable):
            return buffer
        return cls(buffer)

    def add(self, item: T) -> bool:
        _refuse("add")

    def add_all(self, items: Iterable[T]) -> bool:
        _refuse("add_all")

    def remove(self) -> T:
        _refuse("remove")

    def clear(self) -> None:
        _refuse("clear")

class UnmodifiableContainer(ContainerDecorator[T], Unmodifiable):
    @classmethod
    def decorate(cls, container: Container[T]) -> Container[T]:
        if isinstance(container, Unmodifiable):
            return container
        return cls(container)

    def add(self, item: T, copies: int = 1) -> bool:
        _refuse("add")

    def add_all(self, items: Iterable[T]) -> bool:
        _refuse("add_all")

    def remove(self, item: T, copies: Optional[int] = None) -> bool:
        _refuse("remove")

    def clear(self) -> None:
        _refuse("clear")

class UnmodifiableSortedContainer(UnmodifiableContainer[T], SortedContainerDecorator[T]):
    @classmethod
    def decorate(cls, container: SortedContainer[T]) -> SortedContainer[T]:
        if isinstance(container, Unmodifiable) and isinstance(container, SortedContainer):
            return container
        return cls(container)
