from __future__ import annotations
from typing import Any, Tuple, TypeVar, Union

from colldeco.engine.contracts import Buffer, Container, SortedContainer
from colldeco.engine.errors import InvalidArgumentError
from .predicated import PredicatedBuffer, PredicatedContainer, PredicatedSortedContainer

T = TypeVar("T")

Kind = Union[type, Tuple[type, ...]]

class InstanceOf:
    """
    Predicate accepting instances of kind. Subclasses count, and so do
    virtual subclasses registered on an ABC (``numbers.Number`` accepts int).
    """
    def __init__(self, kind: Kind):
        if kind is None:
            raise InvalidArgumentError("Type must not be None")
        kinds = kind if isinstance(kind, tuple) else (kind,)
        if not kinds or not all(isinstance(k, type) for k in kinds):
            raise InvalidArgumentError(f"Type must be a class or a tuple of classes, got {kind!r}")
        self.kind = kind
        if isinstance(kind, tuple):
            self.__name__ = "instanceof(" + " | ".join(k.__name__ for k in kind) + ")"
        else:
            self.__name__ = f"instanceof({kind.__name__})"

    def __call__(self, item: Any) -> bool:
        return isinstance(item, self.kind)

class TypedBuffer(PredicatedBuffer[T]):
    def __init__(self, buffer: Buffer[T], kind: Kind):
        super().__init__(buffer, InstanceOf(kind))

    @property
    def kind(self) -> Kind:
        return self.predicate.kind  # type: ignore[attr-defined]

class TypedContainer(PredicatedContainer[T]):
    def __init__(self, container: Container[T], kind: Kind):
        super().__init__(container, InstanceOf(kind))

    @property
    def kind(self) -> Kind:
        return self.predicate.kind  # type: ignore[attr-defined]

class TypedSortedContainer(PredicatedSortedContainer[T]):
    def __init__(self, container: SortedContainer[T], kind: Kind):
        super().__init__(container, InstanceOf(kind))

    @property
    def kind(self) -> Kind:
        return self.predicate.kind  # type: ignore[attr-defined]
