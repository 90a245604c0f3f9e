"""
Factory functions for decorating Container and SortedContainer instances.

Same rules as colldeco.buffers: arguments are validated up front, every call
returns a new container of the same shape, and the original container must
not be used once it has been wrapped.
"""
from __future__ import annotations
from typing import Any, Callable, TypeVar

from colldeco.decorators.predicated import PredicatedContainer, PredicatedSortedContainer
from colldeco.decorators.synchronized import SynchronizedContainer, SynchronizedSortedContainer
from colldeco.decorators.transformed import TransformedContainer, TransformedSortedContainer
from colldeco.decorators.typed import Kind, TypedContainer, TypedSortedContainer
from colldeco.decorators.unmodifiable import UnmodifiableContainer, UnmodifiableSortedContainer
from colldeco.engine.contracts import Container, SortedContainer
from colldeco.engine.stores import HashContainer, TreeContainer

T = TypeVar("T")

EMPTY_CONTAINER: Container[Any] = UnmodifiableContainer.decorate(HashContainer())
EMPTY_SORTED_CONTAINER: SortedContainer[Any] = UnmodifiableSortedContainer.decorate(TreeContainer())

def synchronized_container(container: Container[T]) -> SynchronizedContainer[T]:
    """
    Thread-safe bag. All access must go through the returned object, and
    compound sequences must hold ``.lock``:

        with bag.lock:
            if bag.get_count(x) > 1:
                bag.remove(x, 1)
    """
    return SynchronizedContainer.decorate(container)

def unmodifiable_container(container: Container[T]) -> Container[T]:
    return UnmodifiableContainer.decorate(container)

def predicated_container(container: Container[T], predicate: Callable[[Any], bool]) -> PredicatedContainer[T]:
    return PredicatedContainer.decorate(container, predicate)

def typed_container(container: Container[T], kind: Kind) -> TypedContainer[T]:
    return TypedContainer.decorate(container, kind)

def transformed_container(
    container: Container[T],
    transformer: Callable[[Any], Any],
    *,
    transform_existing: bool = False,
) -> TransformedContainer[T]:
    return TransformedContainer.decorate(container, transformer, transform_existing=transform_existing)

def synchronized_sorted_container(container: SortedContainer[T]) -> SynchronizedSortedContainer[T]:
    return SynchronizedSortedContainer.decorate(container)

def unmodifiable_sorted_container(container: SortedContainer[T]) -> SortedContainer[T]:
    return UnmodifiableSortedContainer.decorate(container)

def predicated_sorted_container(
    container: SortedContainer[T], predicate: Callable[[Any], bool]
) -> PredicatedSortedContainer[T]:
    return PredicatedSortedContainer.decorate(container, predicate)

def typed_sorted_container(container: SortedContainer[T], kind: Kind) -> TypedSortedContainer[T]:
    return TypedSortedContainer.decorate(container, kind)

def transformed_sorted_container(
    container: SortedContainer[T],
    transformer: Callable[[Any], Any],
    *,
    transform_existing: bool = False,
) -> TransformedSortedContainer[T]:
    return TransformedSortedContainer.decorate(container, transformer, transform_existing=transform_existing)
