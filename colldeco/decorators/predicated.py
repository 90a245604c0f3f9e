from __future__ import annotations
import logging
from typing import Any, Callable, Iterable, List, TypeVar

from colldeco.engine.contracts import Buffer, Container, SortedContainer
from colldeco.engine.decorator import BufferDecorator, ContainerDecorator, SortedContainerDecorator
from colldeco.engine.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Predicate = Callable[[Any], bool]

class Validating:
    """
    Shared validation for the predicated decorators.

    The predicate runs before anything is forwarded; a rejected element never
    reaches the backing collection. Bulk inserts validate every element first.

    Do not keep using the collection you wrapped: it is a back door that
    skips validation entirely.
    """
    predicate: Predicate

    def _init_predicate(self, predicate: Predicate, existing: Iterable[Any]) -> None:
        if predicate is None:
            raise InvalidArgumentError("Predicate must not be None")
        if not callable(predicate):
            raise InvalidArgumentError(f"Predicate must be callable, got {type(predicate).__name__}")
        self.predicate = predicate
        for item in existing:
            self.validate(item)

    def describe(self) -> str:
        return getattr(self.predicate, "__name__", repr(self.predicate))

    def validate(self, item: Any) -> None:
        if not self.predicate(item):
            logger.debug("%s rejected %r", type(self).__name__, item)
            raise InvalidArgumentError(
                f"Cannot add object {item!r} - predicate '{self.describe()}' rejected it"
            )

    def validate_all(self, items: Iterable[Any]) -> List[Any]:
        items = list(items)
        for item in items:
            self.validate(item)
        return items

class PredicatedBuffer(BufferDecorator[T], Validating):
    def __init__(self, buffer: Buffer[T], predicate: Predicate):
        super().__init__(buffer)
        self._init_predicate(predicate, self._decorated)

    def add(self, item: T) -> bool:
        self.validate(item)
        return self._decorated.add(item)

    def add_all(self, items: Iterable[T]) -> bool:
        return self._decorated.add_all(self.validate_all(items))

class PredicatedContainer(ContainerDecorator[T], Validating):
    def __init__(self, container: Container[T], predicate: Predicate):
        super().__init__(container)
        self._init_predicate(predicate, self._decorated.unique_set())

    def add(self, item: T, copies: int = 1) -> bool:
        self.validate(item)
        return self._decorated.add(item, copies)

    def add_all(self, items: Iterable[T]) -> bool:
        return self._decorated.add_all(self.validate_all(items))

class PredicatedSortedContainer(PredicatedContainer[T], SortedContainerDecorator[T]):
    def __init__(self, container: SortedContainer[T], predicate: Predicate):
        SortedContainerDecorator.__init__(self, container)
        self._init_predicate(predicate, self._decorated.unique_set())
